"""Deterministic, network-free comparison synthesis from code signals.

Used whenever the generation call fails or its answer does not validate.
Every number is computed from counts in the two CodeAnalysis and
RepositorySummary records and every sentence is a template over those same
counts, so identical inputs always give an identical ComparisonResult.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from app.crawlers.github.contracts import RepositorySummary
from app.services.compare.contracts import CodeAnalysis
from app.services.compare.schema import (
    ComparisonResult,
    DimensionScore,
    HeadToHeadAnalysis,
    HeadToHeadCategory,
    InnovationLevel,
    ProjectAnalysis,
    ScoreBreakdown,
    Winner,
)
from app.utils.helpers import clamp, mentions_any

logger = logging.getLogger(__name__)

BASE_SCORE = 4
MAX_DIMENSION_SCORE = 10
WINNING_SCORE_BASE = 60
WINNING_SCORE_CAP = 95

REACT_FAMILY_LABELS = ("React", "React Native", "Preact")
META_FRAMEWORK_LABELS = ("Next.js", "Nuxt.js", "Remix", "Gatsby", "SvelteKit")
UTILITY_CSS_LABELS = ("Tailwind CSS", "UnoCSS", "Windi CSS")
STYLE_EXTENSIONS = (".css", ".scss", ".sass", ".less", ".styl")


@dataclass(frozen=True)
class DimensionSignals:
    """A clamped 0-10 score and the reasons that raised it above base."""

    score: int
    reasons: tuple[str, ...]


def _has_react(analysis: CodeAnalysis) -> bool:
    return any(label in REACT_FAMILY_LABELS for label in analysis.technology_stack.frontend)


def _has_styling_file(analysis: CodeAnalysis) -> bool:
    for item in analysis.actual_code:
        lowered = item.filename.lower()
        if item.extension in STYLE_EXTENSIONS or "style" in lowered or lowered.startswith("tailwind.config"):
            return True
    return False


def _dimension(bonuses: list[tuple[bool, int, str]]) -> DimensionSignals:
    score = BASE_SCORE
    reasons: list[str] = []
    for applies, points, reason in bonuses:
        if applies:
            score += points
            reasons.append(reason)
    return DimensionSignals(score=clamp(score, 0, MAX_DIMENSION_SCORE), reasons=tuple(reasons))


def score_market_relevance(analysis: CodeAnalysis, summary: RepositorySummary) -> DimensionSignals:
    return _dimension([
        (analysis.feature_count > 3, 2, f"{analysis.feature_count} key features identified"),
        (analysis.has_purpose, 1, "README states a clear purpose"),
        (summary.has_homepage, 1, "Live homepage or demo is linked"),
        (summary.stars > 10, 1, f"{summary.stars} stars show community interest"),
        (summary.forks > 5, 1, f"{summary.forks} forks show reuse by others"),
    ])


def score_ux_complexity(analysis: CodeAnalysis) -> DimensionSignals:
    stack = analysis.technology_stack
    every_label = stack.frontend + stack.backend + stack.database + stack.deployment + stack.tools
    return _dimension([
        (_has_react(analysis), 2, "React-based component UI"),
        (any(label in META_FRAMEWORK_LABELS for label in stack.frontend), 1, "Meta-framework for routing and rendering"),
        (_has_styling_file(analysis), 1, "Dedicated styling files"),
        (mentions_any(analysis.key_features, ("ui", "interface")), 1, "Interface-focused features"),
        (any(label in UTILITY_CSS_LABELS for label in every_label), 1, "Utility-first CSS framework"),
    ])


def score_technical_depth(analysis: CodeAnalysis) -> DimensionSignals:
    stack = analysis.technology_stack
    return _dimension([
        (bool(stack.backend), 2, f"Backend layer: {', '.join(_distinct(stack.backend))}"),
        (bool(stack.database), 1, f"Data layer: {', '.join(_distinct(stack.database))}"),
        (len(stack.tools) > 2, 1, f"{len(stack.tools)} development tools configured"),
        (analysis.file_count > 5, 1, f"{analysis.file_count} substantive files analyzed"),
        (mentions_any(analysis.key_features, ("api", "database")), 1, "API or database features"),
    ])


def score_innovation_gap(analysis: CodeAnalysis) -> DimensionSignals:
    return _dimension([
        (analysis.feature_count > 5, 2, f"Broad scope with {analysis.feature_count} features"),
        (_has_react(analysis), 1, "Modern React frontend"),
        (mentions_any([analysis.project_purpose], ("ai", "machine learning")), 2, "AI or machine learning focus"),
        (mentions_any(analysis.key_features, ("real-time", "interactive")), 1, "Real-time or interactive capabilities"),
    ])


def winner_points(analysis: CodeAnalysis, summary: RepositorySummary) -> int:
    """Weighted signal sum used only to pick the winner."""
    stack = analysis.technology_stack
    points = 2 * (len(stack.frontend) + len(stack.backend))
    points += len(stack.database) + len(stack.tools)
    points += 3 * analysis.feature_count
    points += 2 * analysis.file_count
    points += 5 if analysis.has_purpose else 0
    points += min(summary.stars, 20)
    points += min(summary.forks, 10)
    points += 5 if summary.has_homepage else 0
    return points


def winning_score(analysis1: CodeAnalysis, analysis2: CodeAnalysis) -> int:
    score = WINNING_SCORE_BASE
    score += 3 * max(analysis1.feature_count, analysis2.feature_count)
    score += 2 * max(analysis1.technology_stack.breadth, analysis2.technology_stack.breadth)
    score += 2 * max(analysis1.file_count, analysis2.file_count)
    return min(score, WINNING_SCORE_CAP)


def innovation_level(score: int) -> InnovationLevel:
    if score <= 4:
        return "Basic"
    if score <= 6:
        return "Intermediate"
    if score <= 8:
        return "Advanced"
    return "Innovative"


def _distinct(labels: tuple[str, ...] | list[str]) -> list[str]:
    seen: list[str] = []
    for label in labels:
        if label not in seen:
            seen.append(label)
    return seen


def _joined(labels: list[str], empty: str = "none detected") -> str:
    return ", ".join(labels) if labels else empty


@dataclass(frozen=True)
class _ProjectView:
    """Everything the templates need for one side of the comparison."""

    name: str
    summary: RepositorySummary
    analysis: CodeAnalysis
    market: DimensionSignals
    ux: DimensionSignals
    depth: DimensionSignals
    innovation: DimensionSignals
    points: int

    @property
    def labels(self) -> list[str]:
        return self.analysis.technology_stack.all_labels()

    @property
    def features(self) -> list[str]:
        return _distinct(self.analysis.key_features)


class FallbackSynthesizer:
    """Build a complete ComparisonResult from code signals alone; never raises on valid input."""

    def synthesize(
        self,
        summary1: RepositorySummary,
        analysis1: CodeAnalysis,
        summary2: RepositorySummary,
        analysis2: CodeAnalysis,
    ) -> ComparisonResult:
        first = self._view(summary1, analysis1, "Project 1")
        second = self._view(summary2, analysis2, "Project 2")

        # Ties resolve to the first project
        if second.points > first.points:
            leader, trailer = second, first
        else:
            leader, trailer = first, second
        score = winning_score(analysis1, analysis2)

        logger.info(
            f"Fallback comparison: {first.name}={first.points} vs {second.name}={second.points}, "
            f"winner={leader.name} ({score})"
        )

        return ComparisonResult(
            project1=self._project_analysis(first),
            project2=self._project_analysis(second),
            winner=Winner(
                name=leader.name,
                reasoning=self._winner_reasoning(leader, trailer, tie=first.points == second.points),
                score=score,
            ),
            head_to_head_analysis=HeadToHeadAnalysis(
                market_relevance=self._head_to_head(first, second, "market", "market relevance"),
                user_experience=self._head_to_head(first, second, "ux", "user experience complexity"),
                technical_depth=self._head_to_head(first, second, "depth", "technical depth"),
                innovation=self._head_to_head(first, second, "innovation", "innovation"),
            ),
            comparative_learning_opportunities=self._comparative_learning(first, second),
            overall_recommendation=self._overall_recommendation(leader, trailer, score),
        )

    @staticmethod
    def _view(summary: RepositorySummary, analysis: CodeAnalysis, default_name: str) -> _ProjectView:
        return _ProjectView(
            name=summary.name.strip() or default_name,
            summary=summary,
            analysis=analysis,
            market=score_market_relevance(analysis, summary),
            ux=score_ux_complexity(analysis),
            depth=score_technical_depth(analysis),
            innovation=score_innovation_gap(analysis),
            points=winner_points(analysis, summary),
        )

    def _project_analysis(self, view: _ProjectView) -> ProjectAnalysis:
        analysis = view.analysis
        stack = analysis.technology_stack
        tech_stack = view.labels or _distinct(list(view.summary.languages) or ([view.summary.language] if view.summary.language else []))

        purpose = analysis.project_purpose.strip() or view.summary.description.strip()
        if not purpose:
            language = view.summary.language or "software"
            purpose = f"{view.name} is a {language} project; its purpose is not documented in the analyzed files."

        if view.labels:
            value_proposition = (
                f"{view.name} combines {len(view.labels)} detected technologies "
                f"({_joined(view.labels[:4])}) with {len(view.features)} identified features."
            )
        else:
            value_proposition = (
                f"{view.name} shows no recognizable framework signals; its value rests on "
                f"{len(view.features)} identified features and {analysis.file_count} analyzed files."
            )

        improvement_areas = self._improvement_areas(view)
        dimensions = {
            "market relevance": view.market,
            "user experience complexity": view.ux,
            "technical depth": view.depth,
            "innovation": view.innovation,
        }
        weakest = min(dimensions, key=lambda label: dimensions[label].score)

        recommendations = [f"Prioritize {weakest}, currently the lowest-scoring dimension at {dimensions[weakest].score}/10."]
        recommendations.extend(improvement_areas[:2])

        if view.labels:
            learning = [f"Deepen expertise in {label} as used in {view.name}." for label in view.labels[:3]]
        else:
            learning = [f"Introduce a documented framework or library stack to {view.name}."]
        if not stack.backend:
            learning.append("Practice building a backend API to pair with this project.")

        return ProjectAnalysis(
            name=view.name,
            purpose=purpose,
            value_proposition=value_proposition,
            tech_stack=tech_stack,
            key_features=view.features[:10],
            strengths=self._strengths(view),
            improvement_areas=improvement_areas,
            market_relevance=self._dimension_score(
                view, view.market, "market relevance",
                "Document the target audience and link a live demo.",
            ),
            user_experience_complexity=self._dimension_score(
                view, view.ux, "user experience complexity",
                "Invest in a component-based UI with consistent styling.",
            ),
            technical_depth=self._dimension_score(
                view, view.depth, "technical depth",
                "Add a backend or data layer with automated tests and tooling.",
            ),
            innovation_gap=self._dimension_score(
                view, view.innovation, "innovation",
                "Add a distinctive capability such as real-time collaboration or AI assistance.",
            ),
            expert_recommendations=recommendations,
            learning_opportunities=learning,
            innovation_level=innovation_level(view.innovation.score),
        )

    @staticmethod
    def _dimension_score(view: _ProjectView, signals: DimensionSignals, label: str, next_step: str) -> DimensionScore:
        return DimensionScore(
            score=signals.score,
            breakdown=ScoreBreakdown(
                summary=(
                    f"{view.name} scores {signals.score}/10 for {label} "
                    f"from a base of {BASE_SCORE} and {len(signals.reasons)} supporting signals."
                ),
                signals=list(signals.reasons) or ["Base score only; no additional signals detected."],
                next_step=next_step,
            ),
        )

    @staticmethod
    def _strengths(view: _ProjectView) -> list[str]:
        stack = view.analysis.technology_stack
        strengths: list[str] = []
        if stack.frontend:
            strengths.append(f"Frontend built with {_joined(_distinct(stack.frontend))}.")
        if stack.backend:
            strengths.append(f"Server-side implementation using {_joined(_distinct(stack.backend))}.")
        if stack.database:
            strengths.append(f"Persistent data layer with {_joined(_distinct(stack.database))}.")
        if stack.deployment:
            strengths.append(f"Deployment configuration for {_joined(_distinct(stack.deployment))}.")
        if view.analysis.feature_count > 3:
            strengths.append(f"Rich feature set with {view.analysis.feature_count} identified capabilities.")
        if view.analysis.has_purpose:
            strengths.append("README clearly documents the project's purpose.")
        if view.summary.stars > 10:
            strengths.append(f"Community traction with {view.summary.stars} stars.")
        return strengths or ["Compact codebase that is easy to review end to end."]

    @staticmethod
    def _improvement_areas(view: _ProjectView) -> list[str]:
        stack = view.analysis.technology_stack
        areas: list[str] = []
        if not view.analysis.has_purpose:
            areas.append("Add a README section describing the project's purpose and audience.")
        if not stack.backend:
            areas.append("No backend layer detected; consider adding an API or server component.")
        if not stack.database:
            areas.append("No persistent storage detected; a database would broaden the project's scope.")
        if len(stack.tools) <= 2:
            areas.append("Limited development tooling; add linting, type checking and tests.")
        if not stack.deployment:
            areas.append("No deployment configuration detected; containerize or add a hosting config.")
        if not view.summary.has_homepage:
            areas.append("Link a live demo from the repository homepage field.")
        return areas or ["Keep dependencies current and expand automated test coverage."]

    @staticmethod
    def _winner_reasoning(leader: _ProjectView, trailer: _ProjectView, *, tie: bool) -> str:
        if tie:
            return (
                f"Both projects earn {leader.points} signal points; {leader.name} is selected as the tie-break. "
                f"Each shows {leader.analysis.feature_count} vs {trailer.analysis.feature_count} features and "
                f"{leader.analysis.technology_stack.breadth} vs {trailer.analysis.technology_stack.breadth} stack entries."
            )
        return (
            f"{leader.name} earns {leader.points} signal points against {trailer.points} for {trailer.name}, "
            f"with {leader.analysis.feature_count} features, {leader.analysis.technology_stack.breadth} stack entries "
            f"and {leader.analysis.file_count} analyzed files versus {trailer.analysis.feature_count}, "
            f"{trailer.analysis.technology_stack.breadth} and {trailer.analysis.file_count}."
        )

    @staticmethod
    def _head_to_head(first: _ProjectView, second: _ProjectView, attribute: str, label: str) -> HeadToHeadCategory:
        first_signals: DimensionSignals = getattr(first, attribute)
        second_signals: DimensionSignals = getattr(second, attribute)

        def describe(view: _ProjectView, signals: DimensionSignals) -> str:
            if signals.reasons:
                return f"{view.name} scores {signals.score}/10 on {label}: {'; '.join(signals.reasons)}."
            return f"{view.name} scores {signals.score}/10 on {label} with no signals beyond the base score."

        if first_signals.score > second_signals.score:
            winner = first.name
        elif second_signals.score > first_signals.score:
            winner = second.name
        else:
            winner = "Tie"

        return HeadToHeadCategory(
            project1_analysis=describe(first, first_signals),
            project2_analysis=describe(second, second_signals),
            winner=winner,
        )

    @staticmethod
    def _comparative_learning(first: _ProjectView, second: _ProjectView) -> list[str]:
        opportunities: list[str] = []
        for source, target in ((first, second), (second, first)):
            unique_labels = [label for label in source.labels if label not in target.labels]
            for label in unique_labels[:2]:
                opportunities.append(f"{target.name} can learn {label} from {source.name}.")
            unique_features = [feature for feature in source.features if feature not in target.features]
            if unique_features:
                opportunities.append(f"{target.name} could adopt {source.name}'s {unique_features[0]} feature.")

        if not opportunities:
            opportunities.append(
                f"{first.name} and {second.name} share the same detected signals; "
                f"compare their code organization and documentation directly."
            )
        return opportunities

    @staticmethod
    def _overall_recommendation(leader: _ProjectView, trailer: _ProjectView, score: int) -> str:
        trailer_gaps = FallbackSynthesizer._improvement_areas(trailer)
        return (
            f"{leader.name} is the stronger portfolio piece with a winning score of {score}/100. "
            f"Lead with it when presenting your work. To close the gap, {trailer.name} should start here: "
            f"{trailer_gaps[0]}"
        )
