from fastapi import APIRouter, Depends, HTTPException, Query

from ..dependencies import get_rating_aggregator
from ..schemas.comments import RatingResponse, RatingsResponse
from ..services.ratings import RatingAggregator

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.get("", response_model=RatingResponse | RatingsResponse)
def get_ratings(
    book_id: str | None = Query(None, alias="bookId", description="Single book to rate"),
    book_ids: str | None = Query(None, alias="bookIds", description="Comma-separated book ids"),
    aggregator: RatingAggregator = Depends(get_rating_aggregator),
):
    """
    Rating for one book, or for many at once when bookIds is given.
    Unknown books get a zero rating rather than an error.
    """
    if book_ids:
        ids = [b for b in book_ids.split(",") if b.strip()]
        if ids:
            return RatingsResponse(ratings=aggregator.ratings_for(ids))

    if book_id and book_id.strip():
        return RatingResponse(rating=aggregator.rating_for(book_id.strip()))

    raise HTTPException(status_code=400, detail="Book ID or Book IDs are required")
