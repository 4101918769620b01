"""Async GitHub REST client returning typed fetch contracts."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from app.config.settings import settings
from app.crawlers.github.contracts import (
    CommitContract,
    ContentContract,
    FetchResult,
    FetchState,
    LanguageContract,
    ListingContract,
    RepoContract,
)
from app.utils.logger import sanitize_for_log, sanitize_log_extra

logger = logging.getLogger(__name__)

GITHUB_ACCEPT_HEADER = "application/vnd.github+json"


class GitHubRepoClient:
    """Unauthenticated-by-default GitHub client; every call returns a FetchResult."""

    def __init__(
        self,
        *,
        token: str | None = None,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": GITHUB_ACCEPT_HEADER,
            "User-Agent": settings.USER_AGENT,
        }
        token = token if token is not None else settings.GITHUB_TOKEN
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=base_url or settings.GITHUB_API_BASE_URL,
            headers=headers,
            timeout=timeout_seconds or settings.GITHUB_TIMEOUT_SECONDS,
            transport=transport,
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GitHubRepoClient":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.aclose()

    async def get_repo(self, owner: str, repo: str) -> RepoContract:
        return await self._request(f"/repos/{quote(owner)}/{quote(repo)}")

    async def list_contents(self, owner: str, repo: str) -> ListingContract:
        result = await self._request(f"/repos/{quote(owner)}/{quote(repo)}/contents")
        return self._expect_list(result)

    async def get_languages(self, owner: str, repo: str) -> LanguageContract:
        return await self._request(f"/repos/{quote(owner)}/{quote(repo)}/languages")

    async def list_commits(self, owner: str, repo: str, *, per_page: int | None = None) -> CommitContract:
        """Most recent commits on the default branch, newest first."""
        result = await self._request(
            f"/repos/{quote(owner)}/{quote(repo)}/commits",
            params={"per_page": per_page or settings.GITHUB_COMMITS_PER_PAGE},
        )
        return self._expect_list(result)

    async def list_directory(self, url: str) -> ListingContract:
        """One-level listing of a subdirectory, addressed by its API ``url``."""
        result = await self._request(url)
        return self._expect_list(result)

    async def get_raw(self, download_url: str) -> ContentContract:
        """Raw file text from a listing entry's ``download_url``."""
        return await self._request(download_url, raw=True)

    async def _request(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        raw: bool = False,
    ) -> FetchResult[Any]:
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            error = sanitize_for_log(str(exc) or exc.__class__.__name__)
            logger.warning(
                "GitHub request failed",
                extra=sanitize_log_extra(url=url, params=params or {}, error=error),
            )
            return FetchResult(state=FetchState.FAILED, error=error)

        if response.status_code == 404:
            return FetchResult(state=FetchState.NOT_FOUND, status_code=404, error="Not Found")

        if response.status_code >= 400:
            error = sanitize_for_log(f"HTTP {response.status_code}: {response.text[:200]}")
            logger.warning(
                "GitHub request failed",
                extra=sanitize_log_extra(
                    url=url,
                    params=params or {},
                    status_code=response.status_code,
                    error=error,
                ),
            )
            return FetchResult(state=FetchState.FAILED, status_code=response.status_code, error=error)

        if raw:
            text = response.text
            state = FetchState.OK if text else FetchState.EMPTY
            return FetchResult(state=state, data=text, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError:
            return FetchResult(
                state=FetchState.FAILED,
                status_code=response.status_code,
                error="Response body is not JSON",
            )

        state = FetchState.OK if payload else FetchState.EMPTY
        return FetchResult(state=state, data=payload, status_code=response.status_code)

    @staticmethod
    def _expect_list(result: FetchResult[Any]) -> ListingContract:
        if result.is_ok and not isinstance(result.data, list):
            # Contents API returns an object when the path is a single file
            return FetchResult(
                state=FetchState.FAILED,
                status_code=result.status_code,
                error="Expected a directory listing",
            )
        return result
