from app.services.prompt_text_services import (
    extract_placeholders,
    fill_placeholders,
    find_placeholders,
    format_placeholder,
    generate_summary,
    placeholder_labels,
    placeholder_mapping,
    unfilled_placeholders,
    validate_prompt_text,
)


class TestExtractPlaceholders:
    def test_curly_placeholders_sorted_and_unique(self):
        assert extract_placeholders("Analyze {company} for {quarter} and {company}") == ["company", "quarter"]

    def test_no_text(self):
        assert extract_placeholders("") == []
        assert extract_placeholders(None) == []

    def test_label_colon_uses_line_label(self):
        text = "Company name: [Acme Corp]"
        assert extract_placeholders(text) == ["Acme Corp"]
        assert placeholder_mapping(text) == {"Company name": "Acme Corp"}

    def test_short_square_not_duplicated_by_label_colon(self):
        matches = find_placeholders("- Audience: [Developers]")
        assert [m.value for m in matches] == ["Developers"]
        assert matches[0].label == "Audience"

    def test_descriptive_square_label_is_first_clause(self):
        text = "Describe [the target audience, including age and region]"
        assert placeholder_labels(text) == ["the target audience"]

    def test_short_square_formats_label(self):
        assert placeholder_mapping("Write about [topicName]") == {"Topic Name": "topicName"}


class TestFormatPlaceholder:
    def test_camel_case(self):
        assert format_placeholder("targetAudience") == "Target Audience"

    def test_snake_case(self):
        assert format_placeholder("target_audience") == "Target Audience"


class TestFillPlaceholders:
    def test_fills_by_raw_name(self):
        text = "Analyze {company} for {quarter}"
        assert fill_placeholders(text, {"company": "Acme", "quarter": "Q3"}) == "Analyze Acme for Q3"

    def test_fills_by_label(self):
        assert fill_placeholders("Analyze {company}", {"Company": "Acme"}) == "Analyze Acme"

    def test_blank_values_leave_slot(self):
        text = "Analyze {company} for {quarter}"
        assert fill_placeholders(text, {"company": "Acme", "quarter": "  "}) == "Analyze Acme for {quarter}"

    def test_backslashes_kept_literal(self):
        assert fill_placeholders("Path: {dir}", {"dir": r"C:\temp"}) == r"Path: C:\temp"

    def test_unknown_keys_ignored(self):
        assert fill_placeholders("Hello {name}", {"other": "x"}) == "Hello {name}"

    def test_unfilled_lists_missing_labels(self):
        text = "Analyze {company} for {quarter}"
        assert unfilled_placeholders(text, {"company": "Acme"}) == ["Quarter"]


class TestValidatePromptText:
    def test_valid_text(self):
        assert validate_prompt_text("Analyze {company} in [region]") == []

    def test_unmatched_braces(self):
        assert validate_prompt_text("Hello {name") == ["Unmatched curly braces detected in prompt"]

    def test_unmatched_brackets(self):
        assert validate_prompt_text("Hello [name") == ["Unmatched square brackets detected in prompt"]

    def test_empty_placeholder(self):
        errors = validate_prompt_text("Fill in { } please")
        assert errors == ["Empty placeholders {} or [] found - please provide placeholder names"]


class TestGenerateSummary:
    def test_intent_and_topic(self):
        assert generate_summary("Please analyze our project timeline") == "Analyze project"

    def test_defaults(self):
        assert generate_summary("hello world") == "Process content"

    def test_falls_back_to_title(self):
        assert generate_summary("", "My title") == "My title"
        assert generate_summary(None) == "Untitled prompt"
