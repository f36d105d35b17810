"""Review application service."""

from dataclasses import dataclass, field

import structlog

from storefront.catalog.repository import ProductRepository, ReviewRepository
from storefront.domain.entities import Review
from storefront.domain.exceptions import InvalidReviewError, ProductNotFoundError
from storefront.infrastructure.document_store import (
    DocumentStore,
    get_document_store,
    new_document_id,
)

logger = structlog.get_logger()

MIN_RATING = 1
MAX_RATING = 5


@dataclass
class ReviewSummary:
    """Aggregate rating figures for a product."""

    count: int = 0
    average: float = 0
    distribution: dict[int, int] = field(
        default_factory=lambda: {star: 0 for star in range(MIN_RATING, MAX_RATING + 1)}
    )


def summarize(reviews: list[Review]) -> ReviewSummary:
    """Count, average (one decimal) and per-star distribution."""
    summary = ReviewSummary(count=len(reviews))
    if not reviews:
        return summary
    for review in reviews:
        summary.distribution[review.rating] += 1
    summary.average = round(sum(r.rating for r in reviews) / len(reviews), 1)
    return summary


class ReviewService:
    """Service for product reviews."""

    def __init__(self, store: DocumentStore | None = None) -> None:
        self.store = store or get_document_store()
        self.reviews = ReviewRepository(self.store)
        self.products = ProductRepository(self.store)

    async def list_for_product(self, product_slug: str) -> list[Review]:
        """Reviews for a product, newest first."""
        reviews = await self.reviews.list_for_product(product_slug)
        reviews.sort(key=lambda r: r.created_at, reverse=True)
        return reviews

    async def submit(
        self,
        product_slug: str,
        username: str,
        email: str,
        rating: int,
        comment: str,
    ) -> Review:
        """Store a new review.

        Raises:
            ProductNotFoundError: If no product has the slug.
            InvalidReviewError: If a field is missing or the rating is out of range.
        """
        if not (rating and comment.strip() and username.strip() and email.strip()):
            raise InvalidReviewError("All fields are required")
        if not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidReviewError(
                f"Rating must be between {MIN_RATING} and {MAX_RATING}",
                details={"rating": rating},
            )
        if await self.products.get_by_slug(product_slug) is None:
            raise ProductNotFoundError(product_slug)

        review = Review(
            id=new_document_id(),
            product_slug=product_slug,
            username=username.strip(),
            email=email.strip(),
            rating=rating,
            comment=comment.strip(),
            verified=True,
            helpful=0,
        )
        await self.reviews.save(review)
        logger.info("Review submitted", review_id=review.id, product_slug=product_slug)
        return review
