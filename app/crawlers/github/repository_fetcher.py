"""Fetch both repositories of a comparison as immutable snapshots."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from app.crawlers.github.contracts import (
    CommitContract,
    LanguageContract,
    ListingContract,
    RepoContract,
    RepositorySummary,
)
from app.services.compare.errors import ProjectNotFound, UpstreamCallFailure
from app.utils.logger import sanitize_log_extra

logger = logging.getLogger(__name__)


class RepositoryClient(Protocol):
    """Subset of the GitHub client the fetcher depends on."""

    async def get_repo(self, owner: str, repo: str) -> RepoContract: ...

    async def list_contents(self, owner: str, repo: str) -> ListingContract: ...

    async def get_languages(self, owner: str, repo: str) -> LanguageContract: ...

    async def list_commits(self, owner: str, repo: str) -> CommitContract: ...


class RepositoryFetcher:
    """Metadata is mandatory for both repositories; listings, languages and commits are best effort."""

    def __init__(self, client: RepositoryClient) -> None:
        self._client = client

    async def fetch_pair(
        self,
        owner: str,
        project1: str,
        project2: str,
    ) -> tuple[RepositorySummary, RepositorySummary]:
        repo1, repo2 = await asyncio.gather(
            self._client.get_repo(owner, project1),
            self._client.get_repo(owner, project2),
        )
        if not repo1.is_ok or not repo2.is_ok or not repo1.data or not repo2.data:
            logger.info(
                "Repository metadata unavailable",
                extra=sanitize_log_extra(
                    owner=owner,
                    project1_state=repo1.state.value,
                    project2_state=repo2.state.value,
                ),
            )
            # No HTTP status means GitHub was never reached
            for result in (repo1, repo2):
                if result.is_failed and result.status_code is None:
                    raise UpstreamCallFailure(f"GitHub metadata request failed: {result.error}")
            raise ProjectNotFound("One or both projects not found")

        (
            listing1,
            listing2,
            languages1,
            languages2,
            commits1,
            commits2,
        ) = await asyncio.gather(
            self._client.list_contents(owner, project1),
            self._client.list_contents(owner, project2),
            self._client.get_languages(owner, project1),
            self._client.get_languages(owner, project2),
            self._client.list_commits(owner, project1),
            self._client.list_commits(owner, project2),
        )
        for name, listing in ((project1, listing1), (project2, listing2)):
            if not listing.is_ok:
                logger.warning(
                    "Content listing unavailable; continuing with empty listing",
                    extra=sanitize_log_extra(owner=owner, project=name, error=listing.error),
                )
        for name, commits in ((project1, commits1), (project2, commits2)):
            if not commits.is_ok:
                logger.info(
                    "Commit history unavailable",
                    extra=sanitize_log_extra(owner=owner, project=name, error=commits.error),
                )

        return (
            RepositorySummary.from_payload(
                repo1.data,
                contents=listing1.unwrap_or([]),
                languages=languages1.unwrap_or({}),
                commits=commits1.unwrap_or([]),
            ),
            RepositorySummary.from_payload(
                repo2.data,
                contents=listing2.unwrap_or([]),
                languages=languages2.unwrap_or({}),
                commits=commits2.unwrap_or([]),
            ),
        )
