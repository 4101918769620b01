"""Typed contracts for GitHub client responses and repository snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, TypeVar


T = TypeVar("T")

RECENT_COMMITS_SHOWN = 3


class FetchState(str, Enum):
    """Normalized response state for downstream comparison stages."""

    OK = "ok"
    EMPTY = "empty"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(slots=True)
class FetchResult(Generic[T]):
    """Container that separates payload from fetch semantics."""

    state: FetchState
    data: Optional[T] = None
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def is_ok(self) -> bool:
        return self.state in (FetchState.OK, FetchState.EMPTY)

    @property
    def is_not_found(self) -> bool:
        return self.state == FetchState.NOT_FOUND

    @property
    def is_failed(self) -> bool:
        return self.state in (FetchState.FAILED, FetchState.NOT_FOUND)

    def unwrap_or(self, default: T) -> T:
        """Payload on success, ``default`` on any failure state."""
        if self.is_ok and self.data is not None:
            return self.data
        return default


RepoPayload = dict[str, Any]
ListingPayload = list[dict[str, Any]]
LanguagePayload = dict[str, int]
CommitPayload = list[dict[str, Any]]
ContentPayload = str

RepoContract = FetchResult[RepoPayload]
ListingContract = FetchResult[ListingPayload]
LanguageContract = FetchResult[LanguagePayload]
CommitContract = FetchResult[CommitPayload]
ContentContract = FetchResult[ContentPayload]


@dataclass(frozen=True)
class RepositorySummary:
    """Immutable snapshot of one repository, fetched once per request."""

    name: str
    full_name: str = ""
    description: str = ""
    language: str = ""
    stars: int = 0
    forks: int = 0
    size: int = 0
    topics: tuple[str, ...] = ()
    homepage: str = ""
    created_at: str = ""
    updated_at: str = ""
    contents: tuple[dict[str, Any], ...] = ()
    languages: dict[str, int] = field(default_factory=dict)
    commit_count: int = 0
    recent_commits: tuple[dict[str, str], ...] = ()

    @classmethod
    def from_payload(
        cls,
        payload: RepoPayload,
        *,
        contents: ListingPayload | None = None,
        languages: LanguagePayload | None = None,
        commits: CommitPayload | None = None,
    ) -> "RepositorySummary":
        """Build a snapshot from a ``GET /repos/{owner}/{name}`` document."""
        commit_items = [item for item in commits or () if isinstance(item, dict)]
        return cls(
            name=str(payload.get("name") or ""),
            full_name=str(payload.get("full_name") or ""),
            description=str(payload.get("description") or ""),
            language=str(payload.get("language") or ""),
            stars=int(payload.get("stargazers_count") or 0),
            forks=int(payload.get("forks_count") or 0),
            size=int(payload.get("size") or 0),
            topics=tuple(str(topic) for topic in payload.get("topics") or ()),
            homepage=str(payload.get("homepage") or "").strip(),
            created_at=str(payload.get("created_at") or ""),
            updated_at=str(payload.get("updated_at") or ""),
            contents=tuple(item for item in contents or () if isinstance(item, dict)),
            languages=dict(languages or {}),
            commit_count=len(commit_items),
            recent_commits=tuple(_commit_digest(item) for item in commit_items[:RECENT_COMMITS_SHOWN]),
        )

    @property
    def has_homepage(self) -> bool:
        return bool(self.homepage)


def _commit_digest(item: dict[str, Any]) -> dict[str, str]:
    """``{message, date}`` from one ``GET /repos/{owner}/{name}/commits`` entry."""
    commit = item.get("commit") or {}
    author = commit.get("author") or {}
    return {
        "message": str(commit.get("message") or ""),
        "date": str(author.get("date") or ""),
    }
