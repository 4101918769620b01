from __future__ import annotations

import asyncio

import pytest

from app.crawlers.github.contracts import FetchResult, FetchState
from app.crawlers.github.repository_fetcher import RepositoryFetcher
from app.services.compare.errors import ProjectNotFound, UpstreamCallFailure


class FakeRepositoryClient:
    def __init__(
        self,
        *,
        missing: tuple[str, ...] = (),
        unreachable: tuple[str, ...] = (),
        broken_listings: tuple[str, ...] = (),
        broken_commits: tuple[str, ...] = (),
    ) -> None:
        self.missing = missing
        self.unreachable = unreachable
        self.broken_listings = broken_listings
        self.broken_commits = broken_commits
        self.calls: list[tuple[str, str]] = []

    async def get_repo(self, owner: str, repo: str) -> FetchResult:
        self.calls.append(("repo", repo))
        if repo in self.missing:
            return FetchResult(state=FetchState.NOT_FOUND, status_code=404)
        if repo in self.unreachable:
            return FetchResult(state=FetchState.FAILED, error="ConnectError")
        return FetchResult(
            state=FetchState.OK,
            data={
                "name": repo,
                "full_name": f"{owner}/{repo}",
                "stargazers_count": 12,
                "forks_count": 3,
                "homepage": "https://demo.example",
                "topics": ["react"],
            },
        )

    async def list_contents(self, owner: str, repo: str) -> FetchResult:
        self.calls.append(("contents", repo))
        if repo in self.broken_listings:
            return FetchResult(state=FetchState.FAILED, status_code=500, error="HTTP 500")
        return FetchResult(state=FetchState.OK, data=[{"name": "README.md", "type": "file"}])

    async def get_languages(self, owner: str, repo: str) -> FetchResult:
        self.calls.append(("languages", repo))
        return FetchResult(state=FetchState.FAILED, status_code=403, error="rate limited")

    async def list_commits(self, owner: str, repo: str) -> FetchResult:
        self.calls.append(("commits", repo))
        if repo in self.broken_commits:
            return FetchResult(state=FetchState.FAILED, status_code=409, error="Git Repository is empty.")
        return FetchResult(
            state=FetchState.OK,
            data=[
                {"sha": f"s{index}", "commit": {"message": f"Change {index}", "author": {"date": f"2024-05-0{index}T00:00:00Z"}}}
                for index in range(5, 0, -1)
            ],
        )


def test_fetch_pair_builds_summaries() -> None:
    client = FakeRepositoryClient()
    summary1, summary2 = asyncio.run(RepositoryFetcher(client).fetch_pair("octo", "alpha", "beta"))

    assert summary1.name == "alpha"
    assert summary2.full_name == "octo/beta"
    assert summary1.stars == 12
    assert summary1.has_homepage
    assert summary1.topics == ("react",)
    assert summary1.contents[0]["name"] == "README.md"
    assert summary1.languages == {}


def test_missing_repository_raises_not_found_without_further_fetches() -> None:
    client = FakeRepositoryClient(missing=("beta",))

    with pytest.raises(ProjectNotFound):
        asyncio.run(RepositoryFetcher(client).fetch_pair("octo", "alpha", "beta"))

    assert {kind for kind, _ in client.calls} == {"repo"}


def test_listing_failure_degrades_to_empty_contents() -> None:
    client = FakeRepositoryClient(broken_listings=("alpha",))
    summary1, summary2 = asyncio.run(RepositoryFetcher(client).fetch_pair("octo", "alpha", "beta"))

    assert summary1.contents == ()
    assert len(summary2.contents) == 1


def test_commit_history_keeps_count_and_three_most_recent() -> None:
    client = FakeRepositoryClient()
    summary1, _ = asyncio.run(RepositoryFetcher(client).fetch_pair("octo", "alpha", "beta"))

    assert summary1.commit_count == 5
    assert summary1.recent_commits == (
        {"message": "Change 5", "date": "2024-05-05T00:00:00Z"},
        {"message": "Change 4", "date": "2024-05-04T00:00:00Z"},
        {"message": "Change 3", "date": "2024-05-03T00:00:00Z"},
    )


def test_commit_failure_degrades_to_empty_history() -> None:
    client = FakeRepositoryClient(broken_commits=("beta",))
    summary1, summary2 = asyncio.run(RepositoryFetcher(client).fetch_pair("octo", "alpha", "beta"))

    assert summary2.commit_count == 0
    assert summary2.recent_commits == ()
    assert summary1.commit_count == 5
    assert ("commits", "beta") in client.calls


def test_unreachable_metadata_is_upstream_failure_not_missing_project() -> None:
    client = FakeRepositoryClient(unreachable=("beta",))

    with pytest.raises(UpstreamCallFailure):
        asyncio.run(RepositoryFetcher(client).fetch_pair("octo", "alpha", "beta"))

    assert {kind for kind, _ in client.calls} == {"repo"}


class RateLimitedRepositoryClient(FakeRepositoryClient):
    async def get_repo(self, owner: str, repo: str) -> FetchResult:
        self.calls.append(("repo", repo))
        return FetchResult(state=FetchState.FAILED, status_code=403, error="HTTP 403: rate limit exceeded")


def test_http_error_status_on_metadata_is_not_found() -> None:
    client = RateLimitedRepositoryClient()

    with pytest.raises(ProjectNotFound):
        asyncio.run(RepositoryFetcher(client).fetch_pair("octo", "alpha", "beta"))
