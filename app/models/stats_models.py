# app/models/stats_models.py
from typing import Dict, List, Literal

from app.models.common import CamelModel
from app.models.prompt_models import PromptRecord
from app.models.review_models import ReviewRecord
from app.models.activity_models import ActivityRecord

Timeframe = Literal["24h", "7d", "30d"]


class Totals(CamelModel):
    prompts: int = 0
    categories: int = 0
    users: int = 0
    reviews: int = 0
    usage: int = 0


class Averages(CamelModel):
    rating: float = 0.0


class CategoryStat(CamelModel):
    name: str
    count: int


class StatsOverview(CamelModel):
    totals: Totals
    averages: Averages
    top_categories: List[CategoryStat] = []
    recent_prompts: List[PromptRecord] = []
    top_rated_prompts: List[PromptRecord] = []


class ActivityStats(CamelModel):
    timeframe: Timeframe
    total: int
    breakdown: Dict[str, int] = {}


class UserPromptStats(CamelModel):
    total: int = 0
    total_usage: int = 0
    total_reviews: int = 0
    recent: List[PromptRecord] = []


class UserReviewStats(CamelModel):
    total: int = 0
    recent: List[ReviewRecord] = []


class UserStats(CamelModel):
    prompts: UserPromptStats
    reviews: UserReviewStats
    recent_activity: List[ActivityRecord] = []
