"""
textshift Core Module
=====================

Structure:
- config.py: Application settings and environment configuration
- constants.py: Enums and fixed tables
- exceptions.py: Error taxonomy for pipeline stages and providers
- rate_limiter.py: Paced, concurrency-capped gate for provider calls
"""

from .config import Settings, get_settings, settings
from .constants import Language, NotifyLevel, Platform, ProviderName
from .rate_limiter import RateLimiter, SlotRelease

__all__ = [
    "Language",
    "NotifyLevel",
    "Platform",
    "ProviderName",
    "RateLimiter",
    "Settings",
    "SlotRelease",
    "get_settings",
    "settings",
]
