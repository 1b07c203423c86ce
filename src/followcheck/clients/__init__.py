"""API client layer for followcheck.

Async HTTP clients for fetching user-relationship data from:
- GitHub REST API: followers, following, user profiles
"""

from followcheck.clients.base import (
    APIProviderError,
    BaseAsyncClient,
    RateLimitExceededError,
    RateLimiter,
)
from followcheck.clients.github import GitHubClient

__all__ = [
    "BaseAsyncClient",
    "RateLimiter",
    "APIProviderError",
    "RateLimitExceededError",
    "GitHubClient",
]
