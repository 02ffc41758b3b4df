"""Keyword tables used to classify chat messages and policy text.

The tables are plain data so callers can inject fixtures or load an
override from YAML without touching the classifiers themselves.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from nexusone.app.config import get_settings

logger = logging.getLogger(__name__)


class PolicyKeywords(BaseModel):
    """Keyword tables for policy relevance decisions.

    Attributes:
        policy_terms: Substrings that mark a chat message as policy-related
        topics: Topic name -> keywords matched against messages and filenames
        general_phrases: Phrases that force inclusion of every policy file
        section_triggers: Query substring -> keywords used to pick document sections
    """

    model_config = ConfigDict(frozen=True)

    policy_terms: tuple[str, ...] = Field(default_factory=tuple)
    topics: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    general_phrases: tuple[str, ...] = Field(default_factory=tuple)
    section_triggers: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    @field_validator("policy_terms", "general_phrases")
    @classmethod
    def _lowercase_terms(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(term.lower() for term in value)

    @field_validator("topics")
    @classmethod
    def _lowercase_topic_keywords(
        cls, value: dict[str, tuple[str, ...]]
    ) -> dict[str, tuple[str, ...]]:
        return {topic: tuple(word.lower() for word in words) for topic, words in value.items()}

    @field_validator("section_triggers")
    @classmethod
    def _lowercase_triggers(cls, value: dict[str, tuple[str, ...]]) -> dict[str, tuple[str, ...]]:
        # Triggers are matched against the lowercased query
        return {
            trigger.lower(): tuple(word.lower() for word in words)
            for trigger, words in value.items()
        }


DEFAULT_KEYWORDS = PolicyKeywords(
    policy_terms=(
        "policy",
        "benefit",
        "handbook",
        "code of conduct",
        "privacy",
        "safe",
        "manual",
        "guide",
    ),
    topics={
        "handbook": ("handbook", "manual", "guide", "employee guide", "employee handbook"),
        "benefits": (
            "benefit",
            "benefits",
            "compensation",
            "salary",
            "insurance",
            "vacation",
            "pto",
            "leave",
            "health",
            "dental",
            "retirement",
            "401k",
        ),
        "conduct": ("conduct", "behavior", "ethics", "code", "code of conduct"),
        "privacy": ("privacy", "data", "confidential", "privacy policy"),
        "safety": ("safety", "safe", "security", "emergency", "workplace safety"),
        "hr": ("hr", "human resources", "personnel", "employee"),
        "policy": ("policy", "policies", "procedure", "procedures"),
    },
    general_phrases=("tell me about", "what are", "show me", "policies", "documents"),
    section_triggers={
        "benefit": ("benefit", "health", "insurance", "vacation", "pto", "medical", "dental"),
        "policy": ("policy", "procedure", "rule", "guideline"),
        "leave": ("leave", "vacation", "pto", "sick", "maternity", "paternity"),
    },
)


def load_keywords(path: str | Path) -> PolicyKeywords:
    """Load keyword tables from a YAML file.

    Tables missing from the file keep their default values. Keywords are
    lowercased, since every classifier compares against lowercased text.

    Raises:
        OSError: If the file cannot be read
        yaml.YAMLError: If the file is not valid YAML
        ValueError: If the document is not a mapping of table names
        pydantic.ValidationError: If a table has the wrong shape
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(
            f"Keyword file {path} must map table names to keywords, got {type(data).__name__}"
        )

    merged = DEFAULT_KEYWORDS.model_dump()
    merged.update(data)
    return PolicyKeywords.model_validate(merged)


def get_keywords() -> PolicyKeywords:
    """Return the configured keyword tables (YAML override or defaults)."""
    path = get_settings().policy_keywords_path
    if not path:
        return DEFAULT_KEYWORDS

    logger.info(f"Loading policy keyword tables from {path}")
    return load_keywords(path)
