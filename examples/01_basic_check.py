"""Example 1: Basic Check

This example shows the most basic usage of followcheck:
asking who a GitHub user follows that doesn't follow them back.

Set GITHUB_TOKEN in the environment for a higher API quota.
"""

import asyncio
import sys

from followcheck.config import settings
from followcheck.models import Direction
from followcheck.pipeline import check_relationship_asymmetry


async def main(username: str) -> None:
    """Run a basic check and print the envelope."""
    print("=" * 60)
    print(f"followcheck: Example 1: {username}")
    print("=" * 60)
    print()

    for direction in Direction:
        envelope = await check_relationship_asymmetry(
            username,
            credential=settings.github_token,
            direction=direction,
        )

        print(f"{direction.get_description()}:")
        if not envelope.ok:
            print(f"  ✗ {envelope.error_message}")
            if envelope.is_rate_limit_error:
                print("  → set GITHUB_TOKEN and try again")
            print()
            continue

        for user in envelope.users:
            followers = user.follower_count if user.follower_count is not None else "?"
            print(f"  • {user.login:<39} followers={followers}")
        if envelope.has_partial_data_error:
            print(f"  ! {envelope.error_message}")
        print(f"  ✓ {len(envelope.users)} user(s)")
        print()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "octocat"))
