"""
Rating Aggregator

Derives a book's rating triplet (average, sum, count) from its comments.
Nothing here is stored or cached: every call recomputes from the comments that
exist at read time, so concurrent writers never race on a shared aggregate.

Only comments with rating > 0 count; rating 0 marks a text-only comment.

The batch path splits book ids into chunks no larger than the store's
membership-filter limit, reads each chunk, then groups the rows by their own
book_id before reducing. The reduction is the same function the single-book
path uses, so both paths agree for every book.
"""

import logging
import math
from collections.abc import Iterable, Iterator
from decimal import ROUND_HALF_UP, Decimal

from ..errors import StoreUnavailable, ValidationError
from ..repositories.comments import CommentRepository
from ..schemas.comments import BookRating, Comment

logger = logging.getLogger(__name__)


def round_one_decimal(value: float) -> float:
    """Multiply by 10, round half away from zero, divide by 10."""
    scaled = Decimal(value * 10).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return float(scaled) / 10


def summarize(comments: Iterable[Comment]) -> BookRating:
    ratings = [c.rating for c in comments if c.rating > 0]
    if not ratings:
        return BookRating()
    total = sum(ratings)
    return BookRating(
        average_rating=round_one_decimal(total / len(ratings)),
        total_ratings=total,
        ratings_count=len(ratings),
    )


def chunked(items: list[str], size: int) -> Iterator[list[str]]:
    if size < 1:
        raise ValueError("chunk size must be positive")
    for start in range(0, len(items), size):
        yield items[start:start + size]


def unique_ids(book_ids: Iterable[str]) -> list[str]:
    """First-seen order, blanks dropped."""
    seen: dict[str, None] = {}
    for book_id in book_ids:
        book_id = (book_id or "").strip()
        if book_id:
            seen.setdefault(book_id, None)
    return list(seen)


class RatingAggregator:
    def __init__(self, repository: CommentRepository, chunk_size: int | None = None):
        self.repository = repository
        # Never larger than what one membership-filter read accepts.
        self.chunk_size = min(chunk_size or repository.membership_limit, repository.membership_limit)

    def rating_for(self, book_id: str) -> BookRating:
        """Never raises; any failure yields the zero rating."""
        try:
            comments = self.repository.list_by_book(book_id)
        except ValidationError:
            return BookRating()
        return summarize(comments)

    def ratings_for(self, book_ids: Iterable[str]) -> dict[str, BookRating]:
        """
        Ratings for many books at once, keyed by book id.

        Every requested id is present in the result; ids without rated comments
        (or whose chunk could not be read) get the zero rating. A failed chunk
        does not abort the others.
        """
        ids = unique_ids(book_ids)
        by_book: dict[str, dict[str, Comment]] = {book_id: {} for book_id in ids}

        failed_chunks = 0
        for chunk in chunked(ids, self.chunk_size):
            try:
                comments = self.repository.list_by_books(chunk)
            except StoreUnavailable:
                failed_chunks += 1
                logger.warning("Ratings chunk failed, books %s fall back to zero", chunk, exc_info=True)
                continue
            for comment in comments:
                # Rows are keyed by id so an overlapping read cannot count one twice.
                if comment.book_id in by_book:
                    by_book[comment.book_id][comment.id] = comment

        if failed_chunks:
            logger.error("%d of %d ratings chunks failed", failed_chunks, math.ceil(len(ids) / self.chunk_size))

        return {book_id: summarize(comments.values()) for book_id, comments in by_book.items()}
