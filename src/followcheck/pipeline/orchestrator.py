"""Orchestrator: main pipeline coordinator.

One check runs through these states:
  Start → FetchingRelationships → Reconciling → Enriching → Done

Failures while fetching the two relationship lists end the check (both
lists are needed for a correct answer). Failures while enriching only
degrade the affected rows.

Usage:
    envelope = await check_relationship_asymmetry(
        "octocat", credential="", direction=Direction.FOLLOWING_BUT_NOT_FOLLOWED_BACK
    )
    if envelope.ok:
        for user in envelope.users:
            print(user.login)
"""

import logging
from datetime import datetime, timezone

from followcheck.clients import GitHubClient
from followcheck.config import settings
from followcheck.models import Direction, ResultEnvelope
from followcheck.pipeline.enricher import DetailEnricher
from followcheck.pipeline.fetcher import FetchResult, FetchStatus, PagedFetcher
from followcheck.pipeline.reconciler import Difference, reconcile

logger = logging.getLogger(__name__)

EMPTY_USERNAME_MESSAGE = "Please enter a GitHub username."
NOT_FOUND_MESSAGE = "GitHub user '{username}' not found."
RATE_LIMIT_MESSAGE = (
    "GitHub API rate limit exceeded while fetching {resource}. Please provide a token."
)
PARTIAL_DATA_MESSAGE = (
    "Some user details could not be fetched. Please provide a token or try again later."
)
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."
RATE_LIMIT_RESET_SUFFIX = " The limit resets at {time} UTC."


class Orchestrator:
    """Main pipeline orchestrator for followcheck.

    Coordinates Fetcher, Reconciler and Enricher for one username. The
    only place that swallows unexpected exceptions.

    Usage:
        orchestrator = Orchestrator()
        envelope = await orchestrator.run("octocat", credential=token)
        print(envelope.to_dict())
    """

    def __init__(
        self,
        per_page: int | None = None,
        concurrency: int | None = None,
    ) -> None:
        """Initialize orchestrator with all components.

        Args:
            per_page: Listing page size (default: from settings)
            concurrency: Max concurrent profile fetches (default: from settings)
        """
        self.fetcher = PagedFetcher(per_page=per_page)
        self.enricher = DetailEnricher(self.fetcher, concurrency=concurrency)

    def _create_client(self, credential: str | None) -> GitHubClient:
        return GitHubClient(
            token=credential,
            base_url=settings.github_api_url,
            api_version=settings.github_api_version,
            rate_limit=settings.github_rate_limit,
            timeout=settings.request_timeout,
        )

    async def run(
        self,
        username: str,
        credential: str | None = None,
        direction: Direction = Direction.FOLLOWING_BUT_NOT_FOLLOWED_BACK,
    ) -> ResultEnvelope:
        """Run one check and return its envelope.

        Never raises: unexpected faults become a generic failure envelope.

        Args:
            username: GitHub login to check
            credential: Optional token; blank means unauthenticated
            direction: Which asymmetry to report

        Returns:
            ResultEnvelope with users (maybe partial) or an error
        """
        username = (username or "").strip()
        if not username:
            logger.info("Rejected check: empty username")
            return ResultEnvelope.failure(EMPTY_USERNAME_MESSAGE)

        try:
            return await self._run(username, credential, direction)
        except Exception:
            logger.exception("Check failed unexpectedly for %s", username)
            return ResultEnvelope.failure(UNEXPECTED_ERROR_MESSAGE)

    async def _run(
        self,
        username: str,
        credential: str | None,
        direction: Direction,
    ) -> ResultEnvelope:
        logger.info("Checking %s (%s)", username, direction.value)

        async with self._create_client(credential) as client:
            # --- FetchingRelationships ---
            following = await self.fetcher.fetch_all(client, client.following_path(username))
            if not following.ok:
                return self._relationship_failure(following, username, "following")

            followers = await self.fetcher.fetch_all(client, client.followers_path(username))
            if not followers.ok:
                return self._relationship_failure(followers, username, "followers")

            # --- Reconciling ---
            if direction is Direction.FOLLOWING_BUT_NOT_FOLLOWED_BACK:
                difference = Difference.A_MINUS_B
            else:
                difference = Difference.B_MINUS_A
            identities = reconcile(following.data, followers.data, difference)
            logger.info(
                "%s: following=%d followers=%d → %d result(s)",
                username, len(following.data), len(followers.data), len(identities),
            )

            # --- Enriching ---
            users, partial = await self.enricher.enrich(client, identities)

        if partial:
            return ResultEnvelope.success(users, partial=True, message=PARTIAL_DATA_MESSAGE)
        return ResultEnvelope.success(users)

    @staticmethod
    def _relationship_failure(
        result: FetchResult,
        username: str,
        resource: str,
    ) -> ResultEnvelope:
        """Map a failed relationship-list fetch to a terminal envelope."""
        if result.status is FetchStatus.RATE_LIMITED:
            logger.error("Rate limit hit fetching %s for %s", resource, username)
            message = RATE_LIMIT_MESSAGE.format(resource=resource)
            if result.reset_at is not None:
                reset = datetime.fromtimestamp(result.reset_at, tz=timezone.utc)
                message += RATE_LIMIT_RESET_SUFFIX.format(time=reset.strftime("%H:%M:%S"))
            return ResultEnvelope.failure(message, rate_limited=True)
        if result.not_found:
            logger.error("User %s not found", username)
            return ResultEnvelope.failure(NOT_FOUND_MESSAGE.format(username=username))
        logger.error("Fetching %s for %s failed: %s", resource, username, result.message)
        return ResultEnvelope.failure(result.message or UNEXPECTED_ERROR_MESSAGE)


async def check_relationship_asymmetry(
    username: str,
    credential: str | None = None,
    direction: Direction = Direction.FOLLOWING_BUT_NOT_FOLLOWED_BACK,
) -> ResultEnvelope:
    """Public entry point: who doesn't follow back (or isn't followed back).

    Args:
        username: GitHub login to check
        credential: Optional token; blank means unauthenticated
        direction: Which asymmetry to report

    Returns:
        ResultEnvelope
    """
    return await Orchestrator().run(username, credential, direction)
