"""Database models for user profiles."""

import uuid

from sqlalchemy import Column, String, Text
from sqlmodel import Field, SQLModel


class Profile(SQLModel, table=True):
    """A registered user and their public profile."""

    __tablename__: str = "profiles"  # type: ignore[assignment]

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    display_name: str = Field(sa_column=Column(String(100), nullable=False))
    email: str = Field(sa_column=Column(String(255), nullable=False, unique=True, index=True))
    biography: str | None = Field(default=None, sa_column=Column(Text))
    password_hash: str

    def get_display_name(self) -> str:
        """Display name, or a placeholder for profiles without one."""
        return self.display_name or "Anonymous"
