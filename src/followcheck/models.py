"""Request-scoped data model for followcheck.

Every record here is immutable and lives for a single check: created
when the relationship lists are fetched, discarded once the envelope is
returned.

Identity:
    Users are compared by their IdentityKey (case-folded login), never by
    raw login strings. "Octocat" and "octocat" are the same user.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class IdentityKey:
    """Case-folded login used for set membership and equality."""

    folded: str

    @classmethod
    def of(cls, login: str) -> "IdentityKey":
        return cls(login.casefold())


@dataclass(frozen=True, eq=False)
class UserIdentity:
    """Base user record as returned by follower/following listings."""

    login: str
    avatar_url: str
    profile_url: str

    @property
    def key(self) -> IdentityKey:
        return IdentityKey.of(self.login)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UserIdentity):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "UserIdentity":
        """Build from a GitHub user object ({login, avatar_url, html_url})."""
        return cls(
            login=payload["login"],
            avatar_url=payload.get("avatar_url") or "",
            profile_url=payload.get("html_url") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary using GitHub's field names."""
        return {
            "login": self.login,
            "avatar_url": self.avatar_url,
            "html_url": self.profile_url,
        }


@dataclass(frozen=True, eq=False)
class UserProfile(UserIdentity):
    """UserIdentity plus optional detail counts.

    A count of None means "not fetched", which is not the same as zero.
    """

    follower_count: int | None = None
    following_count: int | None = None
    public_repo_count: int | None = None
    public_gist_count: int | None = None

    @classmethod
    def from_identity(cls, identity: UserIdentity) -> "UserProfile":
        """Profile carrying only the base identity fields."""
        return cls(
            login=identity.login,
            avatar_url=identity.avatar_url,
            profile_url=identity.profile_url,
        )

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "UserProfile":
        """Build from a GET /users/{login} payload."""
        base = UserIdentity.from_api(payload)
        return cls(
            login=base.login,
            avatar_url=base.avatar_url,
            profile_url=base.profile_url,
            follower_count=_count(payload.get("followers")),
            following_count=_count(payload.get("following")),
            public_repo_count=_count(payload.get("public_repos")),
            public_gist_count=_count(payload.get("public_gists")),
        )

    def merged_onto(self, identity: UserIdentity) -> "UserProfile":
        """Detail counts from this profile on top of the listing's identity fields."""
        return UserProfile(
            login=identity.login,
            avatar_url=identity.avatar_url,
            profile_url=identity.profile_url,
            follower_count=self.follower_count,
            following_count=self.following_count,
            public_repo_count=self.public_repo_count,
            public_gist_count=self.public_gist_count,
        )

    @property
    def has_details(self) -> bool:
        return any(
            v is not None
            for v in (
                self.follower_count,
                self.following_count,
                self.public_repo_count,
                self.public_gist_count,
            )
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary; detail fields that were not fetched are omitted."""
        result = super().to_dict()
        details = {
            "followers": self.follower_count,
            "following": self.following_count,
            "public_repos": self.public_repo_count,
            "public_gists": self.public_gist_count,
        }
        result.update({k: v for k, v in details.items() if v is not None})
        return result


def _count(value: Any) -> int | None:
    """Non-negative integer count, or None when absent or malformed."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


class Direction(Enum):
    """Which side of the follow relationship to report."""

    # following minus followers: people you follow who don't follow you back
    FOLLOWING_BUT_NOT_FOLLOWED_BACK = "not-following-back"
    # followers minus following: people following you whom you don't follow back
    FOLLOWED_BUT_NOT_FOLLOWING_BACK = "not-followed-back"

    def get_description(self) -> str:
        """Human-readable description of the check."""
        descriptions = {
            Direction.FOLLOWING_BUT_NOT_FOLLOWED_BACK: "Users you follow who don't follow you back",
            Direction.FOLLOWED_BUT_NOT_FOLLOWING_BACK: "Users who follow you that you don't follow back",
        }
        return descriptions[self]


@dataclass(frozen=True)
class ResultEnvelope:
    """Outcome of one check.

    Exactly one terminal state: either ``users`` is populated (possibly
    with ``has_partial_data_error``) or the check failed and
    ``error_message`` is set with ``users`` absent. Use the ``success``
    and ``failure`` constructors.
    """

    users: list[UserProfile] | None = None
    error_message: str | None = None
    is_rate_limit_error: bool = False
    has_partial_data_error: bool = False

    def __post_init__(self) -> None:
        if self.users is None and self.error_message is None:
            raise ValueError("ResultEnvelope needs users or an error_message")
        if self.users is None and self.has_partial_data_error:
            raise ValueError("Partial data flag requires users")
        if self.users is not None and self.is_rate_limit_error:
            raise ValueError("Critical rate-limit failures carry no users")

    @classmethod
    def success(
        cls,
        users: list[UserProfile],
        partial: bool = False,
        message: str | None = None,
    ) -> "ResultEnvelope":
        return cls(
            users=list(users),
            error_message=message if partial else None,
            has_partial_data_error=partial,
        )

    @classmethod
    def failure(cls, message: str, rate_limited: bool = False) -> "ResultEnvelope":
        return cls(error_message=message, is_rate_limit_error=rate_limited)

    @property
    def ok(self) -> bool:
        return self.users is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the UI-facing dictionary shape."""
        result: dict[str, Any] = {}
        if self.users is not None:
            result["users"] = [u.to_dict() for u in self.users]
        if self.error_message is not None:
            result["error"] = self.error_message
        result["isRateLimitError"] = self.is_rate_limit_error
        result["hasPartialDataError"] = self.has_partial_data_error
        return result
