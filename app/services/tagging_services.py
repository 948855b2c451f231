# app/services/tagging_services.py
"""
Keyword classifier that assigns one tag per taxonomy dimension.

Each dimension is an ordered rule table; the first rule whose test passes
wins and the dimension default applies when none do. The same prompt always
receives the same tags for a given table.
"""
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from app.models.prompt_models import PromptRecord


@dataclass(frozen=True)
class PromptFeatures:
    text: str
    body: str
    category: str
    difficulty: str
    placeholder_count: int

    @property
    def length(self) -> int:
        return len(self.body)


@dataclass(frozen=True)
class ClassificationRule:
    tag: str
    test: Callable[[PromptFeatures], bool]


@dataclass(frozen=True)
class TagDimension:
    key: str
    tags: Dict[str, str]
    default: str
    rules: List[ClassificationRule] = field(default_factory=list)

    def classify(self, features: PromptFeatures) -> str:
        for rule in self.rules:
            if rule.test(features):
                return rule.tag
        return self.default


def _mentions(*keywords: str) -> Callable[[PromptFeatures], bool]:
    return lambda features: any(keyword in features.text for keyword in keywords)


REPETITIVE_KEYWORDS = ("framework", "template", "process", "workflow", "system", "method", "approach", "strategy")
ONE_OFF_KEYWORDS = ("analyze", "review", "evaluate", "assess", "create", "write", "design")
MECHANICAL_KEYWORDS = ("template", "format", "structure", "checklist", "steps", "procedure")
REASONING_KEYWORDS = ("analyze", "evaluate", "assess", "think", "consider", "compare", "strategy", "decision")
UI_HEAVY_KEYWORDS = ("interface", "dashboard", "form", "input", "interaction", "user", "click", "navigate")
SKILLS_HEAVY_KEYWORDS = ("expertise", "knowledge", "specialized", "technical", "advanced", "professional", "expert")
ITERATION_KEYWORDS = ("iterate", "refine", "improve")
MULTI_STEP_KEYWORDS = ("step", "phase", "stage")

CATEGORY_DOMAINS = {
    "Strategy & Vision": "strategy",
    "Competitive Intelligence": "analysis",
    "Content Creation": "creative",
    "Programming": "technical",
    "Data Analysis": "analysis",
    "Writing": "communication",
    "Education": "education",
    "Project Management": "management",
    "Marketing": "marketing",
    "Personal Productivity": "personal",
    "Research": "analysis",
    "Design": "creative",
    "Business Development": "marketing",
}

_has_mechanical = _mentions(*MECHANICAL_KEYWORDS)
_has_reasoning = _mentions(*REASONING_KEYWORDS)


def _in_domain(domain: str) -> Callable[[PromptFeatures], bool]:
    return lambda features: CATEGORY_DOMAINS.get(features.category) == domain


USAGE_PATTERN = TagDimension(
    key="USAGE_PATTERN",
    tags={
        "one-off": "Single-use task or decision",
        "repetitive": "Recurring task or workflow",
    },
    default="one-off",
    rules=[
        ClassificationRule("repetitive", _mentions(*REPETITIVE_KEYWORDS)),
        ClassificationRule("one-off", _mentions(*ONE_OFF_KEYWORDS)),
    ],
)

COGNITIVE_TYPE = TagDimension(
    key="COGNITIVE_TYPE",
    tags={
        "mechanical": "Rule-based or procedural task",
        "reasoning": "Analysis or complex thinking required",
        "mech+reason": "Both procedural and analytical elements",
    },
    default="reasoning",
    rules=[
        ClassificationRule("mech+reason", lambda f: _has_mechanical(f) and _has_reasoning(f)),
        ClassificationRule("reasoning", _has_reasoning),
        ClassificationRule("mechanical", _has_mechanical),
    ],
)

INTERACTION_STYLE = TagDimension(
    key="INTERACTION_STYLE",
    tags={
        "ui-heavy": "Multiple interactions or interface-dependent",
        "skills-heavy": "Domain expertise or specialized knowledge",
    },
    default="skills-heavy",
    rules=[
        ClassificationRule("ui-heavy", _mentions(*UI_HEAVY_KEYWORDS)),
        ClassificationRule("skills-heavy", lambda f: _mentions(*SKILLS_HEAVY_KEYWORDS)(f) or f.difficulty == "hard"),
    ],
)

TURN_COMPLEXITY = TagDimension(
    key="TURN_COMPLEXITY",
    tags={
        "single-turn": "Complete in 1-2 exchanges",
        "multi-turn": "Requires 3-5 exchanges",
        "extended": "Requires 6+ exchanges or ongoing interaction",
    },
    default="single-turn",
    rules=[
        ClassificationRule(
            "extended",
            lambda f: (
                _mentions(*ITERATION_KEYWORDS)(f)
                or _mentions(*MULTI_STEP_KEYWORDS)(f)
                or f.placeholder_count > 5
                or f.length > 2000
            ),
        ),
        ClassificationRule("multi-turn", lambda f: f.placeholder_count > 2 or f.length > 800),
    ],
)

DOMAIN_CATEGORY = TagDimension(
    key="DOMAIN_CATEGORY",
    tags={
        "strategy": "Strategic planning and decision making",
        "analysis": "Data analysis and research",
        "creative": "Content creation and creative tasks",
        "technical": "Programming and technical implementation",
        "communication": "Writing and communication tasks",
        "education": "Learning and teaching content",
        "management": "Project and team management",
        "marketing": "Marketing and business development",
        "personal": "Personal productivity and self-improvement",
    },
    default="analysis",
    rules=[
        ClassificationRule(domain, _in_domain(domain))
        for domain in dict.fromkeys(CATEGORY_DOMAINS.values())
    ],
)

TAG_DIMENSIONS: List[TagDimension] = [
    USAGE_PATTERN,
    COGNITIVE_TYPE,
    INTERACTION_STYLE,
    TURN_COMPLEXITY,
    DOMAIN_CATEGORY,
]


def extract_features(prompt: PromptRecord) -> PromptFeatures:
    body = prompt.prompt or ""
    text = f"{body} {prompt.title or ''} {prompt.description or ''}".lower()
    difficulty = prompt.difficulty.value if hasattr(prompt.difficulty, "value") else str(prompt.difficulty)
    return PromptFeatures(
        text=text,
        body=body,
        category=prompt.category or "",
        difficulty=difficulty,
        placeholder_count=len(re.findall(r"\{[^}]+\}", body)),
    )


def classify_prompt(prompt: PromptRecord, dimensions: Optional[List[TagDimension]] = None) -> Dict[str, str]:
    """Dimension key -> tag, in taxonomy order."""
    features = extract_features(prompt)
    return {dimension.key: dimension.classify(features) for dimension in dimensions or TAG_DIMENSIONS}


def tags_for_prompt(prompt: PromptRecord) -> List[str]:
    return list(classify_prompt(prompt).values())


def taxonomy() -> Dict[str, Dict[str, str]]:
    return {dimension.key: dict(dimension.tags) for dimension in TAG_DIMENSIONS}
