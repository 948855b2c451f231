# app/services/stats_services.py
from collections import Counter
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal

from app.models.auth_models import UserRecord
from app.models.common import utc_now
from app.models.prompt_models import PromptFilter
from app.models.stats_models import (
    ActivityStats,
    Averages,
    CategoryStat,
    StatsOverview,
    Totals,
    UserPromptStats,
    UserReviewStats,
    UserStats,
)
from app.services.database.base_store import PromptLibraryStore, sort_prompts

TIMEFRAMES = {
    "24h": timedelta(hours=24),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
}

TOP_N = 5
RECENT_ACTIVITY_LIMIT = 10


async def get_overview(store: PromptLibraryStore) -> StatsOverview:
    prompts = await store.list_prompts()
    categories = await store.list_categories()
    reviews = await store.list_reviews()

    rated = [prompt.rating for prompt in prompts if prompt.rating > 0]
    average = 0.0
    if rated:
        average = float((Decimal(str(sum(rated))) / len(rated)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))

    category_counts = Counter(prompt.category for prompt in prompts)
    return StatsOverview(
        totals=Totals(
            prompts=len(prompts),
            categories=len(categories),
            users=await store.count_users(),
            reviews=len(reviews),
            usage=sum(prompt.usage_count for prompt in prompts),
        ),
        averages=Averages(rating=average),
        top_categories=[CategoryStat(name=name, count=count) for name, count in category_counts.most_common(TOP_N)],
        recent_prompts=sort_prompts(prompts, "newest")[:TOP_N],
        top_rated_prompts=[p for p in sort_prompts(prompts, "rating") if p.rating > 0][:TOP_N],
    )


async def get_activity_stats(store: PromptLibraryStore, timeframe: str = "24h") -> ActivityStats:
    since = utc_now() - TIMEFRAMES[timeframe]
    activities = await store.list_activities(since=since)
    breakdown = Counter(activity.action for activity in activities)
    return ActivityStats(timeframe=timeframe, total=len(activities), breakdown=dict(breakdown))


async def get_user_stats(store: PromptLibraryStore, user: UserRecord) -> UserStats:
    prompts = await store.list_prompts(PromptFilter(user_id=user.id, limit=None))
    reviews = await store.list_reviews(user_id=user.id)
    reviews.sort(key=lambda review: review.created_at, reverse=True)

    return UserStats(
        prompts=UserPromptStats(
            total=len(prompts),
            total_usage=sum(prompt.usage_count for prompt in prompts),
            total_reviews=sum(prompt.review_count for prompt in prompts),
            recent=prompts[:TOP_N],
        ),
        reviews=UserReviewStats(total=len(reviews), recent=reviews[:TOP_N]),
        recent_activity=await store.list_activities(user_id=user.id, limit=RECENT_ACTIVITY_LIMIT),
    )
