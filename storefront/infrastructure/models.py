"""SQLAlchemy models for document storage.

Every catalog document (category, product, review) is stored as a JSON
body in a single table partitioned by collection name.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.infrastructure.database import Base


class DocumentRecord(Base):
    """A stored document.

    Attributes:
        id: Document identifier.
        collection: Collection the document belongs to.
        body: Document contents as JSON.
        created_at: Insertion timestamp, used for stable ordering.
        updated_at: Last replacement timestamp.
    """

    __tablename__ = "documents"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: uuid4().hex,
    )
    collection: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    body: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<DocumentRecord(collection={self.collection}, id={self.id})>"

    def to_dict(self) -> dict[str, Any]:
        """Return the document body with its id.

        Returns:
            Dictionary representation.
        """
        return {**self.body, "id": self.id}
