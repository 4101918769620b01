from app.services.compare.signal_rules import SIGNAL_RULES, SignalMatch, SignalRule, match_signals


def test_dependency_rule_fires_once_for_aliases() -> None:
    matches = match_signals("dependency", ["react", "react-dom"])

    assert matches == [SignalMatch(category="frontend", label="React")]


def test_dependency_rules_require_exact_names() -> None:
    assert match_signals("dependency", ["reactive-store", "nextra"]) == []


def test_content_rules_are_case_insensitive_substrings() -> None:
    matches = match_signals("content", ["const socket = new WebSocket(URL);"])

    assert SignalMatch(category="feature", label="Real-time Communication") in matches


def test_filename_rules_only_see_their_kind() -> None:
    matches = match_signals("filename", ["Dockerfile", "vercel.json"])

    assert [match.label for match in matches] == ["Docker", "Vercel"]
    assert all(match.category == "deployment" for match in matches)


def test_custom_rule_table_is_honored() -> None:
    rules = (SignalRule(kind="content", patterns=("graphql",), category="backend", label="GraphQL"),)

    assert match_signals("content", ["type Query { graphql }"], rules=rules) == [
        SignalMatch(category="backend", label="GraphQL"),
    ]


def test_rule_table_uses_known_categories_and_lowercase_patterns() -> None:
    for rule in SIGNAL_RULES:
        assert rule.category in {"frontend", "backend", "database", "deployment", "tools", "feature"}
        assert all(pattern == pattern.lower() for pattern in rule.patterns)
