"""Fetcher: GitHub API → user records.

Retrieves one logical resource (a relationship list or a single profile)
and classifies the outcome as OK, RATE_LIMITED or HARD_ERROR. Nothing is
retried here; the classification is handed back so the caller decides
what a failure means for its request.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from followcheck.clients import APIProviderError, BaseAsyncClient, RateLimitExceededError
from followcheck.config import settings
from followcheck.models import UserIdentity, UserProfile

logger = logging.getLogger(__name__)

# GitHub serves at most this many items per listing page
MAX_PER_PAGE = 100


class FetchStatus(Enum):
    """Classification of one fetch."""

    OK = "ok"
    RATE_LIMITED = "rate_limited"
    HARD_ERROR = "hard_error"


@dataclass(frozen=True)
class FetchResult:
    """Outcome of fetch_all() / fetch_one().

    ``data`` is set only when status is OK. ``message`` and
    ``status_code`` describe the failure otherwise (status_code is None
    for transport failures such as timeouts). ``reset_at`` is the epoch second
    at which an exhausted quota resets, when the provider said so.
    """

    status: FetchStatus
    data: Any = None
    message: str | None = None
    status_code: int | None = None
    reset_at: int | None = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK

    @property
    def not_found(self) -> bool:
        return self.status is FetchStatus.HARD_ERROR and self.status_code == 404

    @classmethod
    def from_error(cls, error: APIProviderError) -> "FetchResult":
        if isinstance(error, RateLimitExceededError):
            return cls(
                status=FetchStatus.RATE_LIMITED,
                message=str(error),
                status_code=error.status_code,
                reset_at=error.reset_at,
            )
        return cls(
            status=FetchStatus.HARD_ERROR,
            message=str(error),
            status_code=error.status_code,
        )


class PagedFetcher:
    """Fetches relationship lists page by page and single profiles.

    Pages are requested strictly one after another: the stop condition
    (a short or empty page) is only known once the previous page has
    arrived, and the client's pacing must be consulted before each send.

    Usage:
        fetcher = PagedFetcher(per_page=100)

        async with GitHubClient(token=token) as client:
            result = await fetcher.fetch_all(client, client.following_path("octocat"))
            if result.ok:
                for user in result.data:
                    print(user.login)
    """

    def __init__(self, per_page: int | None = None) -> None:
        """Initialize fetcher.

        Args:
            per_page: Page size for listings, 1..100 (default: from settings)

        Raises:
            ValueError: If per_page is outside what GitHub serves per page
        """
        if per_page is None:
            per_page = settings.per_page
        if not 1 <= per_page <= MAX_PER_PAGE:
            raise ValueError(f"per_page must be between 1 and {MAX_PER_PAGE}, got {per_page}")
        self.per_page = per_page

    async def fetch_all(self, client: BaseAsyncClient, path: str) -> FetchResult:
        """Fetch every page of a user listing.

        Stops at the first page that is empty or holds fewer than
        per_page items.

        Args:
            client: Open API client (carries the credential, if any)
            path: Resource path, e.g. /users/octocat/followers

        Returns:
            FetchResult whose data is a list of UserIdentity in page order
        """
        users: list[UserIdentity] = []
        page = 1

        while True:
            try:
                items = await client.get(
                    path, params={"page": page, "per_page": self.per_page}
                )
            except APIProviderError as e:
                result = FetchResult.from_error(e)
                logger.warning(
                    "%s page %d: %s (%s)", path, page, result.status.value, e,
                )
                return result

            if not isinstance(items, list):
                logger.error("%s page %d: expected a list, got %s", path, page, type(items).__name__)
                return FetchResult(
                    status=FetchStatus.HARD_ERROR,
                    message=f"Unexpected response for {path}: expected a list",
                )

            users.extend(UserIdentity.from_api(item) for item in items)
            logger.debug("%s page %d: %d items", path, page, len(items))

            if not items or len(items) < self.per_page:
                break
            page += 1

        logger.info("%s: %d users in %d page(s)", path, len(users), page)
        return FetchResult(status=FetchStatus.OK, data=users)

    async def fetch_one(self, client: BaseAsyncClient, path: str) -> FetchResult:
        """Fetch a single user profile.

        Returns:
            FetchResult whose data is a UserProfile
        """
        try:
            payload = await client.get(path)
        except APIProviderError as e:
            result = FetchResult.from_error(e)
            logger.warning("%s: %s (%s)", path, result.status.value, e)
            return result

        if not isinstance(payload, dict) or "login" not in payload:
            logger.error("%s: malformed profile payload", path)
            return FetchResult(
                status=FetchStatus.HARD_ERROR,
                message=f"Unexpected response for {path}: expected a user object",
            )

        return FetchResult(status=FetchStatus.OK, data=UserProfile.from_api(payload))
