"""GitHub crawler primitives for project comparison."""

from app.crawlers.github.client import GitHubRepoClient
from app.crawlers.github.contracts import (
    CommitContract,
    ContentContract,
    FetchResult,
    FetchState,
    LanguageContract,
    ListingContract,
    RepoContract,
    RepositorySummary,
)
from app.crawlers.github.repository_fetcher import RepositoryFetcher

__all__ = [
    "GitHubRepoClient",
    "RepositoryFetcher",
    "RepositorySummary",
    "FetchState",
    "FetchResult",
    "RepoContract",
    "ListingContract",
    "LanguageContract",
    "CommitContract",
    "ContentContract",
]
