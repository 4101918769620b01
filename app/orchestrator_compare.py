"""Project comparison orchestrator: cache, fetch, extract, generate, fall back."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from app.crawlers.github.client import GitHubRepoClient
from app.crawlers.github.repository_fetcher import RepositoryFetcher
from app.services.compare.cache import ComparisonCache, InMemoryComparisonCache, comparison_cache_key
from app.services.compare.errors import (
    ComparisonInternalError,
    InvalidComparisonRequest,
    ProjectNotFound,
    UpstreamCallFailure,
)
from app.services.compare.fallback import FallbackSynthesizer
from app.services.compare.generation_client import GenerationClient
from app.services.compare.prompt_builder import ComparisonPromptBuilder, GenerationRequest
from app.services.compare.result_parser import parse_comparison_result
from app.services.compare.schema import ComparisonResult
from app.services.compare.signal_extractor import CodeSignalExtractor
from app.utils.logger import sanitize_log_extra

logger = logging.getLogger(__name__)

MISSING_FIELDS_ERROR = "GitHub username and two project names are required"
NOT_FOUND_ERROR = "One or both projects not found"
INTERNAL_ERROR = "Internal server error"

PATH_CACHE_HIT = "cache_hit"
PATH_MODEL = "model"
PATH_FALLBACK = "fallback"


class ComparisonOrchestrator:
    """Runs one comparison request end to end.

    Generation and parse failures are recovered through the fallback
    synthesizer; only invalid input, missing repositories and unexpected
    errors reach the caller.
    """

    def __init__(
        self,
        *,
        cache: ComparisonCache | None = None,
        github_client_factory: Callable[[], Any] = GitHubRepoClient,
        repository_fetcher: Any | None = None,
        signal_extractor: Any | None = None,
        prompt_builder: ComparisonPromptBuilder | None = None,
        llm_call: Callable[[GenerationRequest], Awaitable[str]] | None = None,
        fallback: FallbackSynthesizer | None = None,
    ) -> None:
        self._cache = cache if cache is not None else InMemoryComparisonCache()
        self._github_client_factory = github_client_factory
        self._repository_fetcher = repository_fetcher
        self._signal_extractor = signal_extractor
        self._prompt_builder = prompt_builder or ComparisonPromptBuilder()
        self._llm_call = llm_call
        self._generation_client: GenerationClient | None = None
        self._fallback = fallback or FallbackSynthesizer()

    @property
    def cache(self) -> ComparisonCache:
        return self._cache

    async def compare(self, github_username: Any, project1: Any, project2: Any) -> ComparisonResult:
        owner, first, second = self._validate(github_username, project1, project2)

        key = comparison_cache_key(owner, first, second)
        cached = self._cache.get(key)
        if cached is not None:
            logger.info(
                "Comparison served from cache",
                extra=sanitize_log_extra(owner=owner, project1=first, project2=second, path=PATH_CACHE_HIT),
            )
            return cached

        try:
            result = await self._run_pipeline(owner, first, second)
        except (InvalidComparisonRequest, ProjectNotFound):
            raise
        except Exception as exc:
            logger.exception(
                "Project comparison failed",
                extra=sanitize_log_extra(owner=owner, project1=first, project2=second, error=str(exc)),
            )
            raise ComparisonInternalError(INTERNAL_ERROR) from exc

        self._cache.put(key, result)
        return result

    @staticmethod
    def _validate(github_username: Any, project1: Any, project2: Any) -> tuple[str, str, str]:
        values = []
        for value in (github_username, project1, project2):
            if not isinstance(value, str) or not value.strip():
                raise InvalidComparisonRequest(MISSING_FIELDS_ERROR)
            values.append(value.strip())
        return values[0], values[1], values[2]

    async def _run_pipeline(self, owner: str, project1: str, project2: str) -> ComparisonResult:
        client = None
        if self._repository_fetcher is None or self._signal_extractor is None:
            client = self._github_client_factory()
        try:
            fetcher = self._repository_fetcher or RepositoryFetcher(client)
            extractor = self._signal_extractor or CodeSignalExtractor(client)

            summary1, summary2 = await fetcher.fetch_pair(owner, project1, project2)
            analysis1, analysis2 = await asyncio.gather(
                extractor.extract(owner, project1, list(summary1.contents)),
                extractor.extract(owner, project2, list(summary2.contents)),
            )
        finally:
            if client is not None:
                await client.aclose()

        request = self._prompt_builder.build(summary1, analysis1, summary2, analysis2)
        try:
            raw_response = await self._generate(request)
            result = parse_comparison_result(raw_response)
        except Exception as exc:
            logger.warning(
                "AI comparison unusable; synthesizing fallback",
                extra=sanitize_log_extra(
                    owner=owner,
                    project1=project1,
                    project2=project2,
                    path=PATH_FALLBACK,
                    reason=exc.__class__.__name__,
                    error=str(exc),
                ),
            )
            return self._fallback.synthesize(summary1, analysis1, summary2, analysis2)

        logger.info(
            "AI comparison parsed",
            extra=sanitize_log_extra(owner=owner, project1=project1, project2=project2, path=PATH_MODEL),
        )
        return result

    async def _generate(self, request: GenerationRequest) -> str:
        if self._llm_call is not None:
            return await self._llm_call(request)

        if self._generation_client is None:
            try:
                self._generation_client = GenerationClient()
            except ValueError as exc:
                raise UpstreamCallFailure(str(exc)) from exc
        return await self._generation_client.generate(request)
