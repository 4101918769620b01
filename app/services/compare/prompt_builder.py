"""Prompt assembly for the project comparison generation call."""

from __future__ import annotations

from dataclasses import dataclass
import json
from typing import Any

from app.config.settings import settings
from app.crawlers.github.contracts import RepositorySummary
from app.services.compare.contracts import CodeAnalysis

SYSTEM_INSTRUCTION = (
    "You are a senior software architect and product manager who compares "
    "GitHub projects by reading their actual code."
)

_DIMENSION_EXAMPLE = {
    "score": 7,
    "breakdown": {
        "summary": "One or two sentences grounded in the code signals",
        "signals": ["Concrete evidence from files, dependencies or README"],
        "next_step": "The single most valuable improvement for this dimension",
    },
}

_PROJECT_EXAMPLE = {
    "name": "repository name",
    "purpose": "Specific problem it solves, based on code analysis",
    "value_proposition": "Why a user or employer would care",
    "tech_stack": ["React", "Express", "MongoDB"],
    "key_features": ["Real-time chat", "User authentication"],
    "strengths": ["Clean component architecture"],
    "improvement_areas": ["No automated tests"],
    "market_relevance": _DIMENSION_EXAMPLE,
    "user_experience_complexity": _DIMENSION_EXAMPLE,
    "technical_depth": _DIMENSION_EXAMPLE,
    "innovation_gap": _DIMENSION_EXAMPLE,
    "expert_recommendations": ["Add CI with linting and tests"],
    "learning_opportunities": ["Study its WebSocket state handling"],
    "innovation_level": "Basic | Intermediate | Advanced | Innovative",
}

_HEAD_TO_HEAD_EXAMPLE = {
    "project1_analysis": "How project 1 does in this category",
    "project2_analysis": "How project 2 does in this category",
    "winner": "repository name of the stronger project",
}

OUTPUT_SCHEMA_EXAMPLE = {
    "project1": _PROJECT_EXAMPLE,
    "project2": _PROJECT_EXAMPLE,
    "winner": {
        "name": "repository name",
        "reasoning": "Why it wins, citing concrete signals",
        "score": 82,
    },
    "head_to_head_analysis": {
        "market_relevance": _HEAD_TO_HEAD_EXAMPLE,
        "user_experience": _HEAD_TO_HEAD_EXAMPLE,
        "technical_depth": _HEAD_TO_HEAD_EXAMPLE,
        "innovation": _HEAD_TO_HEAD_EXAMPLE,
    },
    "comparative_learning_opportunities": ["What each project can borrow from the other"],
    "overall_recommendation": "Actionable portfolio advice covering both projects",
}


@dataclass(frozen=True)
class GenerationRequest:
    """Prompt text plus the fixed generation parameters."""

    prompt: str
    system_instruction: str
    temperature: float
    max_output_tokens: int


class ComparisonPromptBuilder:
    """Pure builder; the same inputs always produce the same request."""

    def __init__(
        self,
        *,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
    ) -> None:
        self._temperature = settings.LLM_TEMPERATURE if temperature is None else temperature
        self._max_output_tokens = max_output_tokens or settings.LLM_MAX_TOKENS

    def build(
        self,
        summary1: RepositorySummary,
        analysis1: CodeAnalysis,
        summary2: RepositorySummary,
        analysis2: CodeAnalysis,
    ) -> GenerationRequest:
        payload = {
            "project1": self._project_payload(summary1, analysis1),
            "project2": self._project_payload(summary2, analysis2),
        }
        payload_json = json.dumps(payload, indent=2, ensure_ascii=False)
        schema_json = json.dumps(OUTPUT_SCHEMA_EXAMPLE, indent=2)

        prompt = (
            "Compare these two GitHub projects deeply. Judge PURPOSE, UNIQUENESS and "
            "TECHNICAL IMPLEMENTATION from the actual code, dependencies and README "
            "excerpts below, not from descriptions alone.\n\n"
            f"Project Comparison Data:\n{payload_json}\n\n"
            "Score every dimension as an integer from 0 to 10:\n"
            "- market_relevance: does it solve a real, current problem?\n"
            "- user_experience_complexity: sophistication of the interface and interactions\n"
            "- technical_depth: architecture, backend, data layer, tooling\n"
            "- innovation_gap: how far it goes beyond a typical project of its kind\n"
            "The winner score is an integer from 0 to 100.\n"
            "Use the repository names exactly as given for `name` and `winner` fields.\n\n"
            "OUTPUT FORMAT (JSON only, every field required):\n"
            f"{schema_json}\n\n"
            "Only return JSON."
        )
        return GenerationRequest(
            prompt=prompt,
            system_instruction=SYSTEM_INSTRUCTION,
            temperature=self._temperature,
            max_output_tokens=self._max_output_tokens,
        )

    @staticmethod
    def _project_payload(summary: RepositorySummary, analysis: CodeAnalysis) -> dict[str, Any]:
        return {
            "name": summary.name,
            "description": summary.description,
            "language": summary.language,
            "languages": summary.languages,
            "stars": summary.stars,
            "forks": summary.forks,
            "size": summary.size,
            "topics": list(summary.topics),
            "homepage": summary.homepage,
            "created_at": summary.created_at,
            "updated_at": summary.updated_at,
            "commit_count": summary.commit_count,
            "recent_commits": [dict(commit) for commit in summary.recent_commits],
            "root_contents": [str(item.get("name")) for item in summary.contents if item.get("name")],
            "code_analysis": analysis.to_dict(),
        }
