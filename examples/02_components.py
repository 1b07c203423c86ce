"""Example 2: Using the Pipeline Components Directly

Runs fetch → reconcile → enrich by hand, e.g. to reuse one client
session for several reports on the same user.
"""

import asyncio
import sys

from followcheck.clients import GitHubClient
from followcheck.config import settings
from followcheck.pipeline import DetailEnricher, Difference, PagedFetcher, reconcile


async def main(username: str) -> None:
    fetcher = PagedFetcher()
    enricher = DetailEnricher(fetcher, concurrency=4)

    async with GitHubClient(token=settings.github_token) as client:
        following = await fetcher.fetch_all(client, client.following_path(username))
        followers = await fetcher.fetch_all(client, client.followers_path(username))
        if not (following.ok and followers.ok):
            print(f"Fetch failed: {following.message or followers.message}")
            return

        print(f"{username}: following {len(following.data)}, followers {len(followers.data)}")

        for label, difference in (
            ("Not following back", Difference.A_MINUS_B),
            ("Not followed back", Difference.B_MINUS_A),
        ):
            identities = reconcile(following.data, followers.data, difference)
            profiles, partial = await enricher.enrich(client, identities[:10])
            print(f"\n{label} ({len(identities)}, first {len(profiles)} enriched):")
            for profile in profiles:
                print(f"  {profile.login:<39} repos={profile.public_repo_count}")
            if partial:
                print("  (some details missing)")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "octocat"))
