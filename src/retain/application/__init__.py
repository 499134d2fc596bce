# Application Package
from .analytics import AnalyticsReport, SessionAnalytics
from .progress import daily_progress, summarize
from .review_service import ReviewService
from .scheduler import apply_review

__all__ = [
    "apply_review",
    "summarize",
    "daily_progress",
    "ReviewService",
    "SessionAnalytics",
    "AnalyticsReport",
]
