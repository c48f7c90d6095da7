"""
Services: batch and repository-backed entry points.

- ProfileRefreshService: parallel profile rebuilds with retry
- TeamRecommendationService: load stored profiles and run the matcher
"""

from skill_engine.services.profile_refresh_service import ProfileRefreshService, RefreshResult
from skill_engine.services.team_recommendation_service import (
    TeamRecommendationService,
    candidates_from_records,
)

__all__ = [
    "ProfileRefreshService",
    "RefreshResult",
    "TeamRecommendationService",
    "candidates_from_records",
]
