"""Database models for species comments."""

from datetime import UTC, datetime

from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlmodel import Field, SQLModel


class Comment(SQLModel, table=True):
    """A comment left by a user on a species record."""

    __tablename__: str = "comments"  # type: ignore[assignment]

    id: int | None = Field(default=None, primary_key=True)
    species_id: int = Field(
        sa_column=Column(
            Integer, ForeignKey("species.id", ondelete="CASCADE"), nullable=False, index=True
        )
    )
    user_id: str = Field(foreign_key="profiles.id", index=True)
    comment: str = Field(sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)
