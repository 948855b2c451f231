from app.models.prompt_models import PromptRecord
from app.services.tagging_services import (
    TAG_DIMENSIONS,
    classify_prompt,
    extract_features,
    tags_for_prompt,
    taxonomy,
)


def make_prompt(**overrides):
    values = {"title": "Untitled", "prompt": "Hello", "category": "Uncategorized"}
    values.update(overrides)
    return PromptRecord(**values)


class TestExtractFeatures:
    def test_counts_curly_placeholders(self):
        features = extract_features(make_prompt(prompt="Compare {a} with {b}"))
        assert features.placeholder_count == 2
        assert features.length == len("Compare {a} with {b}")

    def test_text_is_lower_cased(self):
        features = extract_features(make_prompt(title="BIG Title", prompt="Body"))
        assert "big title" in features.text


class TestClassifyPrompt:
    def test_mechanical_template(self):
        prompt = make_prompt(
            title="Weekly report template",
            prompt="Use this template as a checklist for the weekly status",
            category="Writing",
        )
        assert tags_for_prompt(prompt) == [
            "repetitive", "mechanical", "skills-heavy", "single-turn", "communication",
        ]

    def test_reasoning_dashboard(self):
        prompt = make_prompt(title="Dashboard audit", prompt="Analyze the dashboard and consider each step")
        assert classify_prompt(prompt) == {
            "USAGE_PATTERN": "one-off",
            "COGNITIVE_TYPE": "reasoning",
            "INTERACTION_STYLE": "ui-heavy",
            "TURN_COMPLEXITY": "extended",
            "DOMAIN_CATEGORY": "analysis",
        }

    def test_placeholder_count_drives_turn_complexity(self):
        prompt = make_prompt(title="Options", prompt="Compare {a} {b} {c}")
        assert classify_prompt(prompt)["TURN_COMPLEXITY"] == "multi-turn"

    def test_hard_prompts_are_skills_heavy(self):
        prompt = make_prompt(title="Plain", prompt="Tell me a joke", difficulty="hard")
        assert classify_prompt(prompt)["INTERACTION_STYLE"] == "skills-heavy"

    def test_same_prompt_same_tags(self):
        prompt = make_prompt(title="Roadmap", prompt="Draft a strategy for next year", category="Strategy & Vision")
        assert tags_for_prompt(prompt) == tags_for_prompt(prompt)


class TestTaxonomy:
    def test_every_dimension_listed(self):
        assert list(taxonomy()) == [dimension.key for dimension in TAG_DIMENSIONS]

    def test_defaults_belong_to_their_dimension(self):
        for dimension in TAG_DIMENSIONS:
            assert dimension.default in dimension.tags
            for rule in dimension.rules:
                assert rule.tag in dimension.tags
