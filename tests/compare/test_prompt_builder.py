from __future__ import annotations

import json

from app.crawlers.github.contracts import RepositorySummary
from app.services.compare.contracts import AnalyzedFile, CodeAnalysis, TechnologyStack
from app.services.compare.prompt_builder import ComparisonPromptBuilder


def _inputs():
    summary1 = RepositorySummary(
        name="alpha",
        description="Sprint planner",
        stars=7,
        contents=({"name": "package.json", "type": "file"}, {"name": "src", "type": "dir"}),
        languages={"TypeScript": 9000},
    )
    analysis1 = CodeAnalysis(
        package_manifest={"react": "18.2.0"},
        actual_code=(AnalyzedFile(filename="package.json", content="{}", size=2, extension=".json"),),
        key_features=("Real-time Communication",),
        technology_stack=TechnologyStack(frontend=("React",)),
    )
    return summary1, analysis1, RepositorySummary(name="beta"), CodeAnalysis.empty()


def test_build_embeds_both_projects_and_output_schema() -> None:
    request = ComparisonPromptBuilder(temperature=0.1, max_output_tokens=2048).build(*_inputs())

    assert request.temperature == 0.1
    assert request.max_output_tokens == 2048
    assert '"name": "alpha"' in request.prompt
    assert '"name": "beta"' in request.prompt
    assert '"Real-time Communication"' in request.prompt
    assert '"root_contents": [\n      "package.json",\n      "src"\n    ]' in request.prompt
    assert '"head_to_head_analysis"' in request.prompt
    assert request.prompt.rstrip().endswith("Only return JSON.")


def test_build_is_pure() -> None:
    builder = ComparisonPromptBuilder()

    assert builder.build(*_inputs()) == builder.build(*_inputs())


def test_payload_is_valid_json_block() -> None:
    request = ComparisonPromptBuilder().build(*_inputs())
    start = request.prompt.index("Project Comparison Data:\n") + len("Project Comparison Data:\n")
    end = request.prompt.index("\n\nScore every dimension")

    payload = json.loads(request.prompt[start:end])

    assert payload["project1"]["code_analysis"]["technologyStack"]["frontend"] == ["React"]
    assert payload["project2"]["code_analysis"]["actualCode"] == []
