"""GitHub REST API client.

Provides async access to the user-relationship resources:
- Following list (paginated)
- Followers list (paginated)
- Single user profile

API Documentation: https://docs.github.com/en/rest/users/followers

Usage:
    from followcheck.clients.github import GitHubClient

    async with GitHubClient(token="ghp_...") as client:
        page = await client.get(
            client.following_path("octocat"), params={"page": 1, "per_page": 100}
        )
        profile = await client.get(client.user_path("octocat"))
"""

from urllib.parse import quote

import httpx

from followcheck.clients.base import BaseAsyncClient


class GitHubClient(BaseAsyncClient):
    """Async client for the GitHub REST API.

    Args:
        token: Optional GitHub token; blank means unauthenticated
        base_url: API base URL (default: https://api.github.com)
        api_version: X-GitHub-Api-Version header value
        rate_limit: Max requests per second (default: 10)
        timeout: Per-request timeout in seconds (default: 30)
    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str = "https://api.github.com",
        api_version: str = "2022-11-28",
        rate_limit: int = 10,
        timeout: float = 30.0,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": api_version,
        }
        if token and token.strip():
            headers["Authorization"] = f"token {token.strip()}"
        super().__init__(
            base_url=base_url,
            headers=headers,
            rate_limit=rate_limit,
            timeout=timeout,
        )

    @property
    def authenticated(self) -> bool:
        return "Authorization" in self.headers

    def _is_rate_limited(self, response: httpx.Response) -> bool:
        """GitHub signals quota exhaustion three ways.

        - 403 with X-RateLimit-Remaining: 0 (primary limit)
        - 429 (secondary limit)
        - 403 whose message mentions the rate limit (secondary limit)
        """
        if response.status_code == 429:
            return True
        if response.status_code != 403:
            return False
        if response.headers.get("X-RateLimit-Remaining") == "0":
            return True
        return "rate limit" in response.text.lower()

    @staticmethod
    def user_path(login: str) -> str:
        """Resource path of a user's profile: /users/{login}."""
        return f"/users/{quote(login, safe='')}"

    @classmethod
    def following_path(cls, login: str) -> str:
        """Resource path of the paginated list of users ``login`` follows."""
        return f"{cls.user_path(login)}/following"

    @classmethod
    def followers_path(cls, login: str) -> str:
        """Resource path of the paginated list of users following ``login``."""
        return f"{cls.user_path(login)}/followers"
