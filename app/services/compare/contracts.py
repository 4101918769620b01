"""Code-signal contracts shared by extraction, prompting and fallback synthesis."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional


StackCategory = Literal["frontend", "backend", "database", "deployment", "tools"]

STACK_CATEGORIES: tuple[StackCategory, ...] = ("frontend", "backend", "database", "deployment", "tools")


@dataclass(frozen=True)
class TechnologyStack:
    """Labels per stack bucket. Labels may repeat when several signals agree."""

    frontend: tuple[str, ...] = ()
    backend: tuple[str, ...] = ()
    database: tuple[str, ...] = ()
    deployment: tuple[str, ...] = ()
    tools: tuple[str, ...] = ()

    def bucket(self, category: StackCategory) -> tuple[str, ...]:
        return getattr(self, category)

    @property
    def breadth(self) -> int:
        """Entry count over the four scored buckets; deployment is not counted."""
        return len(self.frontend) + len(self.backend) + len(self.database) + len(self.tools)

    def all_labels(self) -> list[str]:
        """Distinct labels across every bucket, first occurrence order."""
        seen: list[str] = []
        for category in STACK_CATEGORIES:
            for label in self.bucket(category):
                if label not in seen:
                    seen.append(label)
        return seen

    def to_dict(self) -> dict[str, list[str]]:
        return {category: list(self.bucket(category)) for category in STACK_CATEGORIES}


@dataclass(frozen=True)
class AnalyzedFile:
    """One fetched file with its content capped for prompt size."""

    filename: str
    content: str
    size: int
    extension: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "content": self.content,
            "size": self.size,
            "extension": self.extension,
        }


@dataclass(frozen=True)
class CodeAnalysis:
    """Best-effort summary of a repository built from a bounded file sample.

    Built once per repository per request and never mutated afterwards.
    """

    package_manifest: Optional[dict[str, str]] = None
    """Dependency name -> version spec, when a manifest was found and parsed."""

    actual_code: tuple[AnalyzedFile, ...] = ()
    """Fetched files in priority order, at most the configured sample size."""

    project_purpose: str = ""
    project_title: str = ""
    key_features: tuple[str, ...] = ()
    technology_stack: TechnologyStack = field(default_factory=TechnologyStack)
    components: tuple[str, ...] = ()
    api_routes: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> "CodeAnalysis":
        return cls()

    @property
    def feature_count(self) -> int:
        return len(self.key_features)

    @property
    def file_count(self) -> int:
        return len(self.actual_code)

    @property
    def has_purpose(self) -> bool:
        return bool(self.project_purpose.strip())

    def to_dict(self) -> dict[str, Any]:
        return {
            "packageManifest": dict(self.package_manifest) if self.package_manifest is not None else None,
            "actualCode": [item.to_dict() for item in self.actual_code],
            "projectPurpose": self.project_purpose,
            "projectTitle": self.project_title,
            "keyFeatures": list(self.key_features),
            "technologyStack": self.technology_stack.to_dict(),
            "components": list(self.components),
            "apiRoutes": list(self.api_routes),
        }
