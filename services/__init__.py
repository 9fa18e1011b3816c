"""
Application services layer.

Services orchestrate business operations using repositories and domain services.
"""

from services.analytics_service import AnalyticsService

# Result type for consistent error handling
from services.result import Result

# Service interfaces (ABCs)
from services.interfaces import IAnalyticsService

__all__ = [
    # Concrete services
    "AnalyticsService",
    # Result type
    "Result",
    # Interfaces
    "IAnalyticsService",
]
