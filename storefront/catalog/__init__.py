"""Catalog utilities.

Category tree handling, variant generation, the storefront filter/sort
pipeline and the lazy reveal controller.
"""

from storefront.catalog.pipeline import FilterCriteria, SortField, SortOrder, apply
from storefront.catalog.reveal import Debouncer, LazyReveal
from storefront.catalog.taxonomy import CategoryTree, build_tree, find_by_slug, flatten
from storefront.catalog.variants import generate_variants, validate_attributes, validate_variants

__all__ = [
    # Taxonomy
    "CategoryTree",
    "build_tree",
    "find_by_slug",
    "flatten",
    # Variants
    "generate_variants",
    "validate_attributes",
    "validate_variants",
    # Pipeline
    "FilterCriteria",
    "SortField",
    "SortOrder",
    "apply",
    # Reveal
    "Debouncer",
    "LazyReveal",
]
