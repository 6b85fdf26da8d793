import logging

from supabase import Client

from ..errors import StoreUnavailable, ValidationError
from ..schemas.comments import Comment, CommentCreate
from .comment_store import from_row, to_document, to_update_document, utc_now

logger = logging.getLogger(__name__)


def _is_blank(value: str | None) -> bool:
    return not value or not value.strip()


def normalize_id(value: str | None) -> str:
    return (value or "").strip()


def _check_rating(rating: int) -> None:
    if isinstance(rating, bool) or not isinstance(rating, int) or not 0 <= rating <= 5:
        raise ValidationError("Rating must be an integer between 0 and 5", ["rating"])


class CommentRepository:
    """
    CRUD over the comments table, keyed by comment id.

    Ownership is not checked here; callers verify the actor before update/delete.
    Store failures never escape: reads degrade to empty, writes to None/False.
    """

    def __init__(self, supabase: Client, table: str = "comments", membership_limit: int = 10):
        self.supabase = supabase
        self.table = table
        self.membership_limit = membership_limit

    def _decode(self, rows: list[dict]) -> list[Comment]:
        comments = []
        for row in rows:
            try:
                comments.append(from_row(row))
            except ValueError as exc:
                logger.warning("Skipping malformed comment row %s: %s", row.get("id"), exc)
        return comments

    def create(
        self,
        book_id: str | None,
        user_id: str | None,
        comment: str | None,
        rating: int | None = 0,
        user_name: str | None = None,
        user_email: str | None = None,
    ) -> Comment | None:
        # Reads look ids up stripped, so they are stored stripped.
        book_id = normalize_id(book_id)
        user_id = normalize_id(user_id)
        rating = 0 if rating is None else rating
        missing = [
            name
            for name, value in (("bookId", book_id), ("userId", user_id), ("comment", comment))
            if _is_blank(value)
        ]
        if missing:
            raise ValidationError.missing(missing)
        _check_rating(rating)

        payload = CommentCreate(
            book_id=book_id,
            user_id=user_id,
            user_name=user_name,
            user_email=user_email,
            comment=comment,
            rating=rating,
        )
        try:
            response = self.supabase.table(self.table).insert(to_document(payload, utc_now())).execute()
        except Exception:
            logger.exception("Failed to add comment for book %s", book_id)
            return None

        if not response.data:
            logger.error("Insert for book %s returned no row", book_id)
            return None

        created = self._decode(response.data[:1])
        if not created:
            return None
        logger.info("Comment %s added for book %s", created[0].id, book_id)
        return created[0]

    def get(self, comment_id: str) -> Comment | None:
        if _is_blank(comment_id):
            return None
        try:
            response = self.supabase.table(self.table).select("*").eq("id", comment_id).limit(1).execute()
        except Exception:
            logger.exception("Failed to fetch comment %s", comment_id)
            return None
        found = self._decode(response.data or [])
        return found[0] if found else None

    def list_by_book(self, book_id: str) -> list[Comment]:
        book_id = normalize_id(book_id)
        if not book_id:
            raise ValidationError.missing(["bookId"])
        try:
            # The store's ordering is not relied on; see the sort below.
            response = self.supabase.table(self.table).select("*").eq("book_id", book_id).execute()
        except Exception:
            logger.exception("Failed to fetch comments for book %s", book_id)
            return []

        comments = self._decode(response.data or [])
        comments.sort(key=lambda c: c.created_at, reverse=True)
        logger.debug("Retrieved %d comments for book %s", len(comments), book_id)
        return comments

    def list_by_books(self, book_ids: list[str]) -> list[Comment]:
        """
        One membership-filter read for a single chunk of book ids.

        Unlike the other reads this raises StoreUnavailable, so that batch callers
        can tell a failed chunk apart from a chunk with no comments.
        """
        if len(book_ids) > self.membership_limit:
            raise ValueError(
                f"At most {self.membership_limit} book ids per query, got {len(book_ids)}"
            )
        if not book_ids:
            return []
        try:
            response = self.supabase.table(self.table).select("*").in_("book_id", book_ids).execute()
        except Exception as exc:
            raise StoreUnavailable(f"Comments query for {len(book_ids)} books failed") from exc
        return self._decode(response.data or [])

    def update(self, comment_id: str, comment: str | None, rating: int) -> bool:
        if _is_blank(comment):
            raise ValidationError.missing(["comment"])
        _check_rating(rating)
        if _is_blank(comment_id):
            return False
        try:
            response = (
                self.supabase.table(self.table)
                .update(to_update_document(comment, rating, utc_now()))
                .eq("id", comment_id)
                .execute()
            )
        except Exception:
            logger.exception("Failed to update comment %s", comment_id)
            return False

        if not response.data:
            logger.info("Update matched no comment with id %s", comment_id)
            return False
        logger.info("Comment %s updated", comment_id)
        return True

    def delete(self, comment_id: str) -> bool:
        if _is_blank(comment_id):
            return False
        try:
            response = self.supabase.table(self.table).delete().eq("id", comment_id).execute()
        except Exception:
            logger.exception("Failed to delete comment %s", comment_id)
            return False

        if not response.data:
            logger.info("Delete matched no comment with id %s", comment_id)
            return False
        logger.info("Comment %s deleted", comment_id)
        return True
