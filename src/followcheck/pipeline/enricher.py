"""Enricher: reconciled users → users with profile details.

Fetches each user's profile concurrently (a task group bounded by a
semaphore) and merges the detail counts in. A failed profile fetch
degrades that one record to its identity fields; it never aborts the
batch.
"""

import asyncio
import logging
from collections.abc import Sequence

from followcheck.clients import BaseAsyncClient, GitHubClient
from followcheck.config import settings
from followcheck.models import UserIdentity, UserProfile
from followcheck.pipeline.fetcher import FetchStatus, PagedFetcher

logger = logging.getLogger(__name__)


class DetailEnricher:
    """Adds follower/following/repo/gist counts to user records.

    Usage:
        enricher = DetailEnricher(PagedFetcher())

        async with GitHubClient(token=token) as client:
            profiles, partial = await enricher.enrich(client, identities)
    """

    def __init__(self, fetcher: PagedFetcher, concurrency: int | None = None) -> None:
        """Initialize enricher.

        Args:
            fetcher: Fetcher used for the per-user profile requests
            concurrency: Max in-flight profile fetches (default: from settings)
        """
        self.fetcher = fetcher
        self.concurrency = concurrency or settings.enrich_concurrency

    async def enrich(
        self,
        client: BaseAsyncClient,
        identities: Sequence[UserIdentity],
    ) -> tuple[list[UserProfile], bool]:
        """Fetch and merge profile details for every identity.

        Every identity is attempted, whatever happens to its siblings.
        Each task writes only its own slot, so the output keeps the
        input order.

        Args:
            client: Open API client
            identities: Users to enrich, in display order

        Returns:
            (profiles in input order, True if any profile fetch failed)
        """
        slots: list[tuple[UserProfile, FetchStatus] | None] = [None] * len(identities)
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _enrich_one(index: int, identity: UserIdentity) -> None:
            async with semaphore:
                result = await self.fetcher.fetch_one(
                    client, GitHubClient.user_path(identity.login)
                )
            if result.ok:
                slots[index] = (result.data.merged_onto(identity), result.status)
            else:
                slots[index] = (UserProfile.from_identity(identity), result.status)

        # An unexpected fault cancels the siblings before the client closes
        async with asyncio.TaskGroup() as group:
            for index, identity in enumerate(identities):
                group.create_task(_enrich_one(index, identity))

        # every slot is filled once the group exits
        profiles = [profile for profile, _ in slots]
        failures = [status for _, status in slots if status is not FetchStatus.OK]

        if failures:
            rate_limited = sum(1 for s in failures if s is FetchStatus.RATE_LIMITED)
            logger.warning(
                "Enrichment incomplete: %d/%d profiles missing (%d rate-limited)",
                len(failures), len(identities), rate_limited,
            )
        else:
            logger.info("Enriched %d profiles", len(identities))

        return profiles, bool(failures)
