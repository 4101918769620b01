"""Best-effort code-signal extraction from a repository's root listing."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import json
import logging
import re
from typing import Any, Optional, Protocol

from app.config.settings import settings
from app.crawlers.github.contracts import ContentContract, ListingContract
from app.services.compare.contracts import (
    STACK_CATEGORIES,
    AnalyzedFile,
    CodeAnalysis,
    TechnologyStack,
)
from app.services.compare.signal_rules import SignalMatch, match_signals
from app.utils.helpers import file_extension, truncate_string
from app.utils.logger import sanitize_log_extra

logger = logging.getLogger(__name__)

EXTENSIONS_OF_INTEREST = (
    ".js", ".jsx", ".ts", ".tsx", ".mjs", ".py", ".vue", ".svelte",
    ".html", ".css", ".scss", ".md", ".json", ".yml", ".yaml", ".toml",
)
SPECIAL_FILENAMES = ("dockerfile", "procfile", "requirements.txt", "pipfile", "makefile")

# Manifests and entry points first; anything else keeps listing order after these
PRIORITY_FILES = (
    "package.json",
    "requirements.txt",
    "pyproject.toml",
    "readme.md",
    "main.py",
    "app.py",
    "server.js",
    "index.js",
    "index.ts",
    "app.js",
    "app.jsx",
    "app.tsx",
    "main.js",
    "main.ts",
    "index.html",
    "dockerfile",
    "docker-compose.yml",
    "next.config.js",
    "vite.config.js",
    "tailwind.config.js",
)

MANIFEST_FILES = ("package.json", "requirements.txt")
COMPONENT_DIRS = ("components", "src")
API_DIRS = ("api", "routes")

PURPOSE_HEADINGS = ("about", "description", "overview", "purpose", "what is", "introduction")
FEATURE_HEADINGS = ("features", "key features", "main features", "functionality", "what it does", "highlights")

_TITLE_PATTERN = re.compile(r"^#[ \t]+(.+?)[ \t#]*$", re.MULTILINE)
_BULLET_PATTERN = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+(.+?)\s*$", re.MULTILINE)
_REQUIREMENT_PATTERN = re.compile(r"^([A-Za-z0-9][A-Za-z0-9._-]*)(?:\[[^\]]*\])?\s*(.*)$")
_MARKDOWN_NOISE = re.compile(r"(\*\*|__|`)")


class FileSource(Protocol):
    """Subset of the GitHub client used for file and directory fetches."""

    async def get_raw(self, download_url: str) -> ContentContract: ...

    async def list_directory(self, url: str) -> ListingContract: ...


@dataclass(frozen=True)
class ReadmeSignals:
    title: str = ""
    purpose: str = ""
    features: tuple[str, ...] = ()


def is_file_of_interest(filename: str) -> bool:
    lowered = filename.lower()
    return lowered in SPECIAL_FILENAMES or file_extension(lowered) in EXTENSIONS_OF_INTEREST


def select_files(listing: list[dict[str, Any]], limit: int) -> list[dict[str, Any]]:
    """
    Pick the files worth fetching from a root listing

    Files named in ``PRIORITY_FILES`` come first in that list's order; other
    files of interest follow in their listing order. The result is cut to
    ``limit`` entries.
    """
    candidates = [
        entry for entry in listing
        if isinstance(entry, dict)
        and entry.get("type") == "file"
        and is_file_of_interest(str(entry.get("name") or ""))
    ]
    rank = {name: position for position, name in enumerate(PRIORITY_FILES)}

    ranked = sorted(
        (entry for entry in candidates if str(entry["name"]).lower() in rank),
        key=lambda entry: rank[str(entry["name"]).lower()],
    )
    unranked = [entry for entry in candidates if str(entry["name"]).lower() not in rank]
    return (ranked + unranked)[:limit]


def parse_manifest(filename: str, content: str) -> Optional[dict[str, str]]:
    """
    Parse a dependency manifest into ``{name: version spec}``

    Returns None when the file is not a known manifest or cannot be parsed.
    """
    lowered = filename.lower()
    if lowered == "package.json":
        try:
            document = json.loads(content)
        except ValueError:
            return None
        if not isinstance(document, dict):
            return None
        dependencies: dict[str, str] = {}
        for section in ("dependencies", "devDependencies"):
            block = document.get(section)
            if isinstance(block, dict):
                dependencies.update({str(name): str(version) for name, version in block.items()})
        return dependencies

    if lowered == "requirements.txt":
        dependencies = {}
        for line in content.splitlines():
            line = line.split("#", 1)[0].strip()
            if not line or line.startswith("-"):
                continue
            match = _REQUIREMENT_PATTERN.match(line)
            if match:
                dependencies[match.group(1)] = match.group(2).strip() or "*"
        return dependencies

    return None


def _find_section(content: str, headings: tuple[str, ...]) -> Optional[str]:
    for heading in headings:
        pattern = re.compile(
            rf"^#{{1,6}}[ \t]*[^\w\n]*[ \t]*{re.escape(heading)}\b[^\n]*\n(.*?)(?=^#{{1,6}}[ \t]|\Z)",
            re.MULTILINE | re.DOTALL | re.IGNORECASE,
        )
        match = pattern.search(content)
        if match:
            return match.group(1)
    return None


def parse_readme(content: str, purpose_max_chars: int) -> ReadmeSignals:
    """Title line, first purpose section and first feature list of a README."""
    title_match = _TITLE_PATTERN.search(content)
    title = title_match.group(1).strip() if title_match else ""

    purpose = ""
    purpose_section = _find_section(content, PURPOSE_HEADINGS)
    if purpose_section:
        purpose = truncate_string(" ".join(purpose_section.split()), purpose_max_chars)

    features: list[str] = []
    feature_section = _find_section(content, FEATURE_HEADINGS)
    if feature_section:
        for bullet in _BULLET_PATTERN.findall(feature_section):
            cleaned = _MARKDOWN_NOISE.sub("", bullet).strip()
            if cleaned:
                features.append(cleaned)

    return ReadmeSignals(title=title, purpose=purpose, features=tuple(features))


class CodeSignalExtractor:
    """Derive a CodeAnalysis from a bounded, priority-ranked sample of files.

    Extraction is total: per-file and per-directory failures degrade the
    affected field, and any unexpected error yields ``CodeAnalysis.empty()``.
    """

    def __init__(
        self,
        client: FileSource,
        *,
        max_files: int | None = None,
        content_max_chars: int | None = None,
        purpose_max_chars: int | None = None,
        concurrency: int | None = None,
    ) -> None:
        self._client = client
        self._max_files = max_files or settings.COMPARE_MAX_ANALYZED_FILES
        self._content_max_chars = content_max_chars or settings.COMPARE_FILE_CONTENT_MAX_CHARS
        self._purpose_max_chars = purpose_max_chars or settings.COMPARE_PURPOSE_MAX_CHARS
        self._concurrency = max(concurrency or settings.COMPARE_FETCH_CONCURRENCY, 1)

    async def extract(self, owner: str, repo: str, listing: list[dict[str, Any]]) -> CodeAnalysis:
        try:
            return await self._extract(listing)
        except Exception as exc:
            logger.warning(
                "Code signal extraction failed; using empty analysis",
                extra=sanitize_log_extra(owner=owner, repo=repo, error=str(exc)),
            )
            return CodeAnalysis.empty()

    async def _extract(self, listing: list[dict[str, Any]]) -> CodeAnalysis:
        selected = select_files(listing, self._max_files)
        directories = [
            entry for entry in listing
            if isinstance(entry, dict)
            and entry.get("type") == "dir"
            and str(entry.get("name") or "").lower() in COMPONENT_DIRS + API_DIRS
        ]

        semaphore = asyncio.Semaphore(self._concurrency)
        fetched, probed = await asyncio.gather(
            asyncio.gather(*(self._fetch_file(semaphore, entry) for entry in selected)),
            asyncio.gather(*(self._probe_directory(semaphore, entry) for entry in directories)),
        )

        stack: dict[str, list[str]] = {category: [] for category in STACK_CATEGORIES}
        features: list[str] = []
        analyzed: list[AnalyzedFile] = []
        manifest: Optional[dict[str, str]] = None
        readme = ReadmeSignals()

        def apply(matches: list[SignalMatch]) -> None:
            for match in matches:
                if match.category == "feature":
                    features.append(match.label)
                else:
                    stack[match.category].append(match.label)

        files = [item for item in fetched if item is not None]
        for analyzed_file, full_text in files:
            analyzed.append(analyzed_file)
            lowered = analyzed_file.filename.lower()
            if manifest is None and lowered in MANIFEST_FILES:
                manifest = parse_manifest(lowered, full_text)

        if manifest:
            apply(match_signals("dependency", [name.lower() for name in manifest]))
        apply(match_signals("filename", [item.filename for item in analyzed]))

        for analyzed_file in analyzed:
            apply(match_signals("content", [analyzed_file.content]))
            if analyzed_file.filename.lower() == "readme.md":
                readme = parse_readme(analyzed_file.content, self._purpose_max_chars)
                features.extend(readme.features)

        components: list[str] = []
        api_routes: list[str] = []
        for entry, names in zip(directories, probed):
            if names is None:
                continue
            if str(entry.get("name")).lower() in COMPONENT_DIRS:
                components.extend(names)
            else:
                api_routes.extend(names)

        return CodeAnalysis(
            package_manifest=manifest,
            actual_code=tuple(analyzed),
            project_purpose=readme.purpose,
            project_title=readme.title,
            key_features=tuple(features),
            technology_stack=TechnologyStack(**{category: tuple(labels) for category, labels in stack.items()}),
            components=tuple(components),
            api_routes=tuple(api_routes),
        )

    async def _fetch_file(
        self,
        semaphore: asyncio.Semaphore,
        entry: dict[str, Any],
    ) -> Optional[tuple[AnalyzedFile, str]]:
        download_url = entry.get("download_url")
        if not download_url:
            return None

        async with semaphore:
            result = await self._client.get_raw(str(download_url))
        if not result.is_ok or not result.data:
            return None

        name = str(entry["name"])
        text = result.data
        return (
            AnalyzedFile(
                filename=name,
                content=truncate_string(text, self._content_max_chars),
                size=int(entry.get("size") or len(text)),
                extension=file_extension(name),
            ),
            text,
        )

    async def _probe_directory(
        self,
        semaphore: asyncio.Semaphore,
        entry: dict[str, Any],
    ) -> Optional[list[str]]:
        url = entry.get("url")
        if not url:
            return None

        async with semaphore:
            result = await self._client.list_directory(str(url))
        if not result.is_ok:
            return None
        return [
            str(child.get("name"))
            for child in result.unwrap_or([])
            if isinstance(child, dict) and child.get("type") == "file" and child.get("name")
        ]
