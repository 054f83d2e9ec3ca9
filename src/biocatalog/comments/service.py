"""Comment thread operations for species records."""

import logging
from datetime import datetime

from pydantic import BaseModel

from biocatalog.comments.models import Comment
from biocatalog.database.store import DataStore, PersistenceError
from biocatalog.notifications import Notifier, Severity

logger = logging.getLogger(__name__)


class CommentView(BaseModel):
    """One comment as shown to a particular viewer."""

    id: int
    comment: str
    created_at: datetime
    is_owner: bool = False


class CommentService:
    """Lists, adds, and deletes comments on a species.

    Failures are reported through the notifier and never raised to the caller.
    """

    def __init__(self, store: DataStore) -> None:
        self.store = store

    async def list_for_species(
        self, species_id: int, viewer_id: str | None, notifier: Notifier
    ) -> list[CommentView]:
        """Return a species' comments, newest first."""
        try:
            comments = await self.store.list(
                Comment, "created_at", descending=True, species_id=species_id
            )
        except PersistenceError as e:
            logger.error("Error fetching comments for species %s: %s", species_id, e.message)
            notifier.notify("Error fetching comments.", severity=Severity.DESTRUCTIVE)
            return []

        return [
            CommentView(
                id=comment.id,
                comment=comment.comment,
                created_at=comment.created_at,
                is_owner=comment.user_id == viewer_id,
            )
            for comment in comments
            if comment.id is not None
        ]

    async def add(
        self, species_id: int, user_id: str, text: str | None, notifier: Notifier
    ) -> Comment | None:
        """Add a trimmed, non-empty comment."""
        text = (text or "").strip()
        if not text:
            notifier.notify("Comment cannot be empty.", severity=Severity.DESTRUCTIVE)
            return None

        try:
            comment = await self.store.create(
                Comment, {"species_id": species_id, "user_id": user_id, "comment": text}
            )
        except PersistenceError as e:
            logger.error("Error adding comment to species %s: %s", species_id, e.message)
            notifier.notify("Error adding comment.", severity=Severity.DESTRUCTIVE)
            return None

        notifier.notify("Comment added successfully!")
        return comment

    async def delete(self, comment_id: int, user_id: str, notifier: Notifier) -> bool:
        """Delete a comment, but only when it belongs to the user."""
        try:
            await self.store.delete(Comment, comment_id, user_id=user_id)
        except PersistenceError as e:
            logger.error("Error deleting comment %s: %s", comment_id, e.message)
            notifier.notify("Error deleting comment.", severity=Severity.DESTRUCTIVE)
            return False

        notifier.notify("Comment deleted successfully!")
        return True
