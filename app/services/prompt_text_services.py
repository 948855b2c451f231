# app/services/prompt_text_services.py
"""
Placeholder detection, filling and validation for prompt bodies, plus the
keyword summary shown next to each prompt in listings.

Detection runs a fixed table of patterns over the text. Each hit yields a
(label, value) pair: the value is the raw slot text between the delimiters,
the label is the human-facing name the UI shows next to the input box.
"""
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

LABEL_MAX_LENGTH = 50


@dataclass(frozen=True)
class PlaceholderMatch:
    label: str
    value: str


@dataclass(frozen=True)
class PlaceholderPattern:
    name: str
    regex: re.Pattern
    value_group: int
    label: Callable[[re.Match], str]
    # Only keep the hit when no earlier pattern captured the same value
    only_if_new: bool = False


def format_placeholder(placeholder: str) -> str:
    """camelCase / snake_case -> Title Case."""
    spaced = re.sub(r"([a-z])([A-Z])", r"\1 \2", placeholder)
    spaced = spaced.replace("_", " ")
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


def _short_label(value: str) -> str:
    label = re.split(r"[,;.]", value.strip())[0].strip()
    if len(label) > LABEL_MAX_LENGTH:
        return label[:LABEL_MAX_LENGTH] + "..."
    return label


PLACEHOLDER_PATTERNS: List[PlaceholderPattern] = [
    # "Company name: [Acme]" (leading bullets and stars are not part of the label)
    PlaceholderPattern(
        name="label_colon",
        regex=re.compile(r"^[\s*\-]*(.+?):\s*\[([^\]]+)\]", re.MULTILINE),
        value_group=2,
        label=lambda m: re.sub(r"^[*\-\s]+", "", m.group(1).strip()),
    ),
    # "**Section:**" header followed later by a "- [value]" bullet
    PlaceholderPattern(
        name="section_header",
        regex=re.compile(r"\*\*([^:]+):\*\*[\s\S]*?-\s*\[([^\]]+)\]"),
        value_group=2,
        label=lambda m: m.group(1).strip(),
    ),
    # Long bracketed descriptions; the label is the first clause
    PlaceholderPattern(
        name="descriptive_square",
        regex=re.compile(r"\[([^\]]{20,})\]"),
        value_group=1,
        label=lambda m: _short_label(m.group(1)),
    ),
    PlaceholderPattern(
        name="curly",
        regex=re.compile(r"\{([^}]+)\}"),
        value_group=1,
        label=lambda m: format_placeholder(m.group(1).strip()),
    ),
    PlaceholderPattern(
        name="short_square",
        regex=re.compile(r"\[([^\]]{1,19})\]"),
        value_group=1,
        label=lambda m: format_placeholder(m.group(1).strip()),
        only_if_new=True,
    ),
]


def find_placeholders(text: Optional[str]) -> List[PlaceholderMatch]:
    """Every placeholder hit in pattern order, duplicates included."""
    if not text:
        return []

    matches: List[PlaceholderMatch] = []
    for pattern in PLACEHOLDER_PATTERNS:
        for hit in pattern.regex.finditer(text):
            value = hit.group(pattern.value_group).strip()
            if not value:
                continue
            if pattern.only_if_new and any(m.value == value for m in matches):
                continue
            matches.append(PlaceholderMatch(label=pattern.label(hit), value=value))
    return matches


def extract_placeholders(text: Optional[str]) -> List[str]:
    """Distinct placeholder names in sorted order, e.g. ['company', 'quarter']."""
    return sorted({m.value for m in find_placeholders(text)})


def placeholder_labels(text: Optional[str]) -> List[str]:
    return sorted({m.label for m in find_placeholders(text) if m.label})


def placeholder_mapping(text: Optional[str]) -> Dict[str, str]:
    mapping: Dict[str, str] = {}
    for match in find_placeholders(text):
        if match.label:
            mapping[match.label] = match.value
    return mapping


def fill_placeholders(text: str, values: Dict[str, str]) -> str:
    """
    Substitute user input into the prompt body.

    Keys may be either display labels or raw placeholder names. Blank
    inputs leave the slot untouched.
    """
    mapping = placeholder_mapping(text)
    raw_names = {m.value for m in find_placeholders(text)}
    filled = text
    for key, user_value in values.items():
        if user_value is None or not str(user_value).strip():
            continue
        original = mapping.get(key)
        if original is None and key in raw_names:
            original = key
        if original is None:
            continue
        escaped = re.escape(original)
        # Lambdas keep backslashes in user input literal
        filled = re.sub(r"\[" + escaped + r"\]", lambda _: str(user_value), filled)
        filled = re.sub(r"\{" + escaped + r"\}", lambda _: str(user_value), filled)
    return filled


def unfilled_placeholders(text: str, values: Dict[str, str]) -> List[str]:
    provided = {key for key, value in values.items() if value is not None and str(value).strip()}
    missing = []
    for label, value in placeholder_mapping(text).items():
        if label not in provided and value not in provided:
            missing.append(label)
    return sorted(missing)


def validate_prompt_text(text: str) -> List[str]:
    errors = []
    if text.count("{") != text.count("}"):
        errors.append("Unmatched curly braces detected in prompt")
    if text.count("[") != text.count("]"):
        errors.append("Unmatched square brackets detected in prompt")
    if re.search(r"\{\s*\}", text) or re.search(r"\[\s*\]", text):
        errors.append("Empty placeholders {} or [] found - please provide placeholder names")
    return errors


SUMMARY_INTENTS = [
    ("Analyze", ["analyze", "analysis", "examine", "review", "assess", "evaluate", "study"]),
    ("Plan", ["plan", "strategy", "roadmap", "schedule", "organize", "outline"]),
    ("Write", ["write", "create", "draft", "compose", "generate", "produce"]),
    ("Optimize", ["optimize", "improve", "enhance", "refine", "streamline"]),
    ("Debug", ["debug", "fix", "troubleshoot", "resolve", "solve"]),
    ("Design", ["design", "architect", "structure", "layout", "framework"]),
]

SUMMARY_TOPICS = [
    ("project", ["project", "initiative", "program"]),
    ("team", ["team", "group", "staff", "personnel"]),
    ("strategy", ["strategy", "approach", "methodology"]),
    ("process", ["process", "workflow", "procedure"]),
    ("product", ["product", "feature", "functionality"]),
    ("marketing", ["marketing", "campaign", "promotion"]),
    ("code", ["code", "programming", "development", "software"]),
]

DEFAULT_INTENT = "Process"
DEFAULT_TOPIC = "content"


def _first_match(text: str, table, default: str) -> str:
    for name, keywords in table:
        if any(keyword in text for keyword in keywords):
            return name
    return default


def generate_summary(prompt_text: Optional[str], title: Optional[str] = None) -> str:
    """Two-word gist such as 'Analyze project' built from keyword hits."""
    if not prompt_text or not isinstance(prompt_text, str):
        return title or "Untitled prompt"

    cleaned = re.sub(r"[^\w\s]", " ", prompt_text.lower()).strip()
    intent = _first_match(cleaned, SUMMARY_INTENTS, DEFAULT_INTENT)
    topic = _first_match(cleaned, SUMMARY_TOPICS, DEFAULT_TOPIC)
    return f"{intent} {topic}"
