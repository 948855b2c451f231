# app/services/review_services.py
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional, Tuple

from app.core.exceptions import NotFoundError, PermissionDeniedError, ValidationFailedError
from app.models.auth_models import UserRecord
from app.models.common import utc_now
from app.models.prompt_models import PromptRecord
from app.models.review_models import ReviewCreate, ReviewNode, ReviewRecord, ReviewUpdate
from app.services.database.base_store import PromptLibraryStore
from app.services.thread_services import build_thread, subtree_ids

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def check_rating(rating: Optional[int], required: bool):
    if rating is None:
        if required:
            raise ValidationFailedError("Rating must be between 1 and 5")
        return
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationFailedError("Rating must be between 1 and 5")


def average_rating(reviews: Iterable[ReviewRecord]) -> float:
    """Mean of top-level ratings rounded half-up to one decimal, 0 without any."""
    ratings = [r.rating for r in reviews if r.parent_review_id is None and r.rating is not None]
    if not ratings:
        return 0.0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


async def recompute_prompt_rating(store: PromptLibraryStore, prompt_id: str) -> Optional[PromptRecord]:
    reviews = await store.list_reviews(prompt_id=prompt_id)
    top_level = [r for r in reviews if r.parent_review_id is None]
    return await store.update_prompt(
        prompt_id, {"rating": average_rating(reviews), "review_count": len(top_level)}
    )


async def get_review_or_404(store: PromptLibraryStore, review_id: str) -> ReviewRecord:
    review = await store.get_review(review_id)
    if review is None:
        raise NotFoundError("Review not found")
    return review


async def list_review_threads(store: PromptLibraryStore, prompt_id: str) -> List[ReviewNode]:
    return build_thread(await store.list_reviews(prompt_id=prompt_id), ReviewNode, "parent_review_id")


async def create_review(
    store: PromptLibraryStore, prompt_id: str, user: UserRecord, data: ReviewCreate
) -> Tuple[ReviewRecord, PromptRecord]:
    if await store.get_prompt(prompt_id) is None:
        raise NotFoundError("Prompt not found")

    if data.parent_review_id:
        parent = await store.get_review(data.parent_review_id)
        if parent is None or parent.prompt_id != prompt_id:
            raise ValidationFailedError("Parent review not found for this prompt")
        check_rating(data.rating, required=False)
    else:
        check_rating(data.rating, required=True)

    review = ReviewRecord(
        prompt_id=prompt_id,
        user_id=user.id,
        user_name=user.name,
        **data.model_dump(),
    )
    review = await store.create_review(review)
    prompt = await recompute_prompt_rating(store, prompt_id)
    logger.info(f"Review {review.id} added to prompt {prompt_id}, rating now {prompt.rating}")
    return review, prompt


async def update_review(
    store: PromptLibraryStore, review_id: str, user: UserRecord, data: ReviewUpdate
) -> ReviewRecord:
    review = await get_review_or_404(store, review_id)
    if review.user_id != user.id:
        raise PermissionDeniedError("You can only edit your own reviews")

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "rating" in changes:
        check_rating(changes["rating"], required=review.parent_review_id is None)
    changes["updated_at"] = utc_now()

    updated = await store.update_review(review_id, changes)
    await recompute_prompt_rating(store, review.prompt_id)
    return updated


async def delete_review(store: PromptLibraryStore, review_id: str, user: UserRecord) -> None:
    review = await get_review_or_404(store, review_id)
    if review.user_id != user.id:
        raise PermissionDeniedError("You can only delete your own reviews")

    siblings = await store.list_reviews(prompt_id=review.prompt_id)
    await store.delete_reviews(subtree_ids(siblings, review.id, "parent_review_id"))
    await recompute_prompt_rating(store, review.prompt_id)
