from __future__ import annotations

from app.crawlers.github.contracts import RepositorySummary
from app.services.compare.contracts import AnalyzedFile, CodeAnalysis, TechnologyStack
from app.services.compare.fallback import (
    FallbackSynthesizer,
    innovation_level,
    score_innovation_gap,
    score_market_relevance,
    score_technical_depth,
    score_ux_complexity,
    winner_points,
    winning_score,
)


def _files(*names: str) -> tuple[AnalyzedFile, ...]:
    return tuple(
        AnalyzedFile(filename=name, content="x", size=1, extension="." + name.rsplit(".", 1)[-1] if "." in name else "")
        for name in names
    )


def _rich_analysis() -> CodeAnalysis:
    return CodeAnalysis(
        package_manifest={"react": "18.2.0"},
        actual_code=_files("package.json", "README.md", "index.js", "App.jsx", "styles.css", "server.js", "db.js", "api.js"),
        project_purpose="An AI study companion built with machine learning models.",
        project_title="Study Buddy",
        key_features=(
            "Real-time Communication",
            "REST API Endpoints",
            "Interactive UI Components",
            "User Authentication",
            "Data Visualization",
            "Payment Processing",
            "AI Integration",
        ),
        technology_stack=TechnologyStack(
            frontend=("React", "Next.js", "Tailwind CSS"),
            backend=("Express",),
            database=("MongoDB",),
            deployment=("Docker",),
            tools=("TypeScript", "ESLint", "Jest"),
        ),
        components=("Board.tsx",),
        api_routes=("cards.ts",),
    )


def _popular_summary(name: str) -> RepositorySummary:
    return RepositorySummary(name=name, stars=120, forks=40, homepage="https://demo.example", language="TypeScript")


def _modest_analysis() -> CodeAnalysis:
    return CodeAnalysis(
        actual_code=_files("package.json", "README.md", "index.js"),
        key_features=("Client-side Routing", "Responsive Design"),
        technology_stack=TechnologyStack(frontend=("Vue.js",), tools=("Vite",)),
    )


def test_react_only_manifest_scores_ux_six() -> None:
    analysis = CodeAnalysis(
        package_manifest={"react": "*"},
        actual_code=_files("package.json"),
        technology_stack=TechnologyStack(frontend=("React",)),
    )

    assert score_ux_complexity(analysis).score == 6
    assert score_market_relevance(analysis, RepositorySummary(name="solo")).score == 4
    assert score_technical_depth(analysis).score == 4
    assert score_innovation_gap(analysis).score == 5


def test_every_bonus_clamps_at_ten() -> None:
    analysis = _rich_analysis()
    summary = _popular_summary("study-buddy")

    assert score_market_relevance(analysis, summary).score == 10
    assert score_ux_complexity(analysis).score == 10
    assert score_technical_depth(analysis).score == 10
    assert score_innovation_gap(analysis).score == 10
    assert innovation_level(10) == "Innovative"


def test_technical_depth_needs_more_than_two_tools() -> None:
    analysis = CodeAnalysis(technology_stack=TechnologyStack(backend=("Flask",), tools=("Pytest", "ESLint")))

    depth = score_technical_depth(analysis)

    assert depth.score == 6
    assert depth.reasons == ("Backend layer: Flask",)


def test_ai_purpose_counts_words_and_compounds_but_not_substrings() -> None:
    daily = CodeAnalysis(project_purpose="Maintains a daily journal")
    ai = CodeAnalysis(project_purpose="An AI tutor for kids")
    compound = CodeAnalysis(project_purpose="An OpenAI-powered resume reviewer")

    assert score_innovation_gap(daily).score == 4
    assert score_innovation_gap(ai).score == 6
    assert score_innovation_gap(compound).score == 6


def test_plural_api_and_ui_features_earn_bonuses() -> None:
    assert score_technical_depth(CodeAnalysis(key_features=("RESTful APIs for boards",))).score == 5
    assert score_ux_complexity(CodeAnalysis(key_features=("Animated UIs",))).score == 5
    assert score_technical_depth(CodeAnalysis(key_features=("Rapid prototyping",))).score == 4


def test_winner_points_follow_weighted_sum() -> None:
    analysis = _modest_analysis()
    summary = RepositorySummary(name="vue-app", stars=50, forks=2, homepage="")

    # 2*1 frontend + 1 tool + 3*2 features + 2*3 files + 20 capped stars + 2 forks
    assert winner_points(analysis, summary) == 2 + 1 + 6 + 6 + 20 + 2


def test_identical_signals_resolve_to_first_project() -> None:
    analysis = _modest_analysis()
    summary1 = RepositorySummary(name="alpha", stars=3)
    summary2 = RepositorySummary(name="beta", stars=3)

    result = FallbackSynthesizer().synthesize(summary1, analysis, summary2, analysis)

    assert result.winner.name == "alpha"
    assert result.winner.score == 60 + 3 * 2 + 2 * 2 + 2 * 3
    assert "tie-break" in result.winner.reasoning
    assert result.head_to_head_analysis.technical_depth.winner == "Tie"


def test_stronger_second_project_wins() -> None:
    result = FallbackSynthesizer().synthesize(
        RepositorySummary(name="alpha"),
        _modest_analysis(),
        _popular_summary("study-buddy"),
        _rich_analysis(),
    )

    assert result.winner.name == "study-buddy"
    assert result.winner.score == 95
    assert result.head_to_head_analysis.innovation.winner == "study-buddy"
    assert result.project2.innovation_level == "Innovative"
    assert any("alpha can learn" in item for item in result.comparative_learning_opportunities)


def test_synthesis_is_deterministic() -> None:
    inputs = (_popular_summary("study-buddy"), _rich_analysis(), RepositorySummary(name="alpha"), _modest_analysis())

    first = FallbackSynthesizer().synthesize(*inputs)
    second = FallbackSynthesizer().synthesize(*inputs)

    assert first.model_dump_json() == second.model_dump_json()


def test_empty_inputs_still_produce_complete_bounded_result() -> None:
    empty = CodeAnalysis.empty()

    result = FallbackSynthesizer().synthesize(RepositorySummary(name=""), empty, RepositorySummary(name=""), empty)

    assert result.project1.name == "Project 1"
    assert result.project2.name == "Project 2"
    assert result.winner.name == "Project 1"
    assert result.winner.score == 60
    for project in (result.project1, result.project2):
        for dimension in (
            project.market_relevance,
            project.user_experience_complexity,
            project.technical_depth,
            project.innovation_gap,
        ):
            assert dimension.score == 4
            assert dimension.breakdown.signals
        assert project.strengths
        assert project.improvement_areas
        assert project.innovation_level == "Basic"
    assert result.comparative_learning_opportunities
    assert result.overall_recommendation


def test_winning_score_is_capped() -> None:
    assert winning_score(_rich_analysis(), CodeAnalysis.empty()) == 95
    assert winning_score(CodeAnalysis.empty(), CodeAnalysis.empty()) == 60
