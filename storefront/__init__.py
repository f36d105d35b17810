"""Storefront and admin catalog backend."""
