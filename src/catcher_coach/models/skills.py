"""
Skill categories, proficiency levels and assessment snapshots.

The 13 rated skills are grouped into four categories. Category and
subcategory weights are static constants bundled in ``SkillsConfig`` so the
analyzer can be constructed with alternate tables in tests.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple
import math


class SkillCategoryCode(str, Enum):
    """The four skill categories, in canonical order."""
    RECEIVING = "receiving"
    THROWING = "throwing"
    BLOCKING = "blocking"
    EDUCATION = "education"


class AssessmentType(str, Enum):
    """Who produced the ratings."""
    SELF_RATED = "self_rated"
    COACH = "coach"


@dataclass(frozen=True)
class SkillDefinition:
    """A single rated skill (subcategory) inside a category."""
    code: str
    name: str
    weight: float = 1.0


@dataclass(frozen=True)
class SkillCategory:
    """A named grouping of skills with an importance weight."""
    code: str
    name: str
    description: str
    importance_weight: float
    skills: Tuple[SkillDefinition, ...]

    @property
    def skill_codes(self) -> Tuple[str, ...]:
        return tuple(skill.code for skill in self.skills)


@dataclass(frozen=True)
class ProficiencyLevel:
    """Presentational label for an integer score."""
    score: int
    level: str
    color: str
    description: str

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "level": self.level,
            "color": self.color,
            "description": self.description,
        }


SKILL_CATEGORIES: Tuple[SkillCategory, ...] = (
    SkillCategory(
        code=SkillCategoryCode.RECEIVING.value,
        name="Receiving",
        description="Fundamental catching and framing skills",
        importance_weight=1.2,
        skills=(
            SkillDefinition("receiving_glove_move", "Glove Movement", 1.0),
            SkillDefinition("receiving_glove_load", "Glove Loading", 1.0),
            SkillDefinition("receiving_setups", "Setup Position", 1.0),
            SkillDefinition("receiving_presentation", "Pitch Presentation", 1.0),
        ),
    ),
    SkillCategory(
        code=SkillCategoryCode.THROWING.value,
        name="Throwing",
        description="Throwing mechanics and base-running prevention",
        importance_weight=1.1,
        skills=(
            SkillDefinition("throwing_footwork", "Throwing Footwork", 1.1),
            SkillDefinition("throwing_exchange", "Glove-to-Hand Exchange", 1.2),
            SkillDefinition("throwing_arm_strength", "Arm Strength", 0.9),
            SkillDefinition("throwing_accuracy", "Throwing Accuracy", 1.1),
        ),
    ),
    SkillCategory(
        code=SkillCategoryCode.BLOCKING.value,
        name="Blocking",
        description="Ability to stop balls in the dirt",
        importance_weight=1.0,
        skills=(
            SkillDefinition("blocking_overall", "Overall Blocking", 1.0),
        ),
    ),
    SkillCategory(
        code=SkillCategoryCode.EDUCATION.value,
        name="Education & Mental Game",
        description="Game management and communication skills",
        importance_weight=0.9,
        skills=(
            SkillDefinition("education_pitch_calling", "Pitch Calling", 1.1),
            SkillDefinition("education_scouting_reports", "Scouting Usage", 0.9),
            SkillDefinition("education_umpire_relations", "Umpire Relations", 0.8),
            SkillDefinition("education_pitcher_relations", "Pitcher Relations", 1.2),
        ),
    ),
)

_RED, _ORANGE, _YELLOW, _GREEN, _BLUE = "#dc2626", "#ea580c", "#ca8a04", "#16a34a", "#0284c7"

PROFICIENCY_LEVELS: Dict[int, ProficiencyLevel] = {
    1: ProficiencyLevel(1, "Needs Major Work", _RED, "Fundamental skills missing"),
    2: ProficiencyLevel(2, "Needs Major Work", _RED, "Basic understanding lacking"),
    3: ProficiencyLevel(3, "Needs Improvement", _ORANGE, "Some fundamentals present"),
    4: ProficiencyLevel(4, "Needs Improvement", _ORANGE, "Developing basic skills"),
    5: ProficiencyLevel(5, "Average", _YELLOW, "Meets basic expectations"),
    6: ProficiencyLevel(6, "Average", _YELLOW, "Solid fundamental base"),
    7: ProficiencyLevel(7, "Good", _GREEN, "Above average performance"),
    8: ProficiencyLevel(8, "Good", _GREEN, "Strong skill development"),
    9: ProficiencyLevel(9, "Excellent", _BLUE, "High-level performance"),
    10: ProficiencyLevel(10, "Excellent", _BLUE, "Elite/college level"),
}

SKILL_CODES: Tuple[str, ...] = tuple(
    code for category in SKILL_CATEGORIES for code in category.skill_codes
)

NEUTRAL_SCORE = 5


@dataclass(frozen=True)
class SkillsConfig:
    """Static tables and thresholds used by the assessment analyzer."""
    categories: Tuple[SkillCategory, ...] = SKILL_CATEGORIES
    proficiency_levels: Mapping[int, ProficiencyLevel] = field(
        default_factory=lambda: dict(PROFICIENCY_LEVELS)
    )
    min_score: int = 1
    max_score: int = 10
    neutral_score: int = NEUTRAL_SCORE
    uniform_score_threshold: int = 9
    high_score_cutoff: int = 8
    low_score_cutoff: int = 4
    confidence_pattern_ratio: float = 0.7

    @classmethod
    def from_settings(cls, settings: Any) -> "SkillsConfig":
        """Build a config from ``Settings``, keeping the default tables."""
        return cls(
            min_score=settings.min_score,
            max_score=settings.max_score,
            neutral_score=settings.neutral_score,
            uniform_score_threshold=settings.uniform_score_threshold,
            high_score_cutoff=settings.high_score_cutoff,
            low_score_cutoff=settings.low_score_cutoff,
            confidence_pattern_ratio=settings.confidence_pattern_ratio,
        )

    @property
    def skill_codes(self) -> Tuple[str, ...]:
        return tuple(code for category in self.categories for code in category.skill_codes)

    def category(self, code: str) -> SkillCategory:
        for category in self.categories:
            if category.code == code:
                return category
        raise KeyError(code)

    def skill(self, code: str) -> SkillDefinition:
        for category in self.categories:
            for skill in category.skills:
                if skill.code == code:
                    return skill
        raise KeyError(code)

    def proficiency_for(self, value: float) -> ProficiencyLevel:
        """Round half-up, clamp to the score range, then look up the label."""
        index = clamp(round_half_up(value), self.min_score, self.max_score)
        return self.proficiency_levels[index]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(math.floor(value + 0.5))


def round_tenth(value: float) -> float:
    """Round to one decimal place with .05 going up."""
    return math.floor(value * 10 + 0.5) / 10


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def coerce_score(value: Any) -> Optional[int]:
    """
    Coerce a raw score to an int.

    Accepts ints, integral floats and numeric strings ("7", " 7 ").
    Returns None when the value is missing or not a whole number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            return None
    return None


def normalize_scores(
    raw: Optional[Mapping[str, Any]],
    skill_codes: Tuple[str, ...] = SKILL_CODES,
    default: int = NEUTRAL_SCORE,
) -> Dict[str, int]:
    """
    Coerce-or-default every skill score in one place.

    Missing or unparseable scores become ``default``. This is the only place
    where the neutral default is applied.
    """
    raw = raw or {}
    scores: Dict[str, int] = {}
    for code in skill_codes:
        score = coerce_score(raw.get(code))
        scores[code] = default if score is None else score
    return scores


@dataclass(frozen=True)
class Assessment:
    """
    Immutable snapshot of one skills assessment.

    Progress is computed by diffing two snapshots; a snapshot is never
    mutated after creation.
    """
    scores: Mapping[str, int]
    created_at: Optional[datetime] = None
    assessment_id: Optional[str] = None
    user_id: Optional[str] = None
    notes: Optional[str] = None
    assessment_type: AssessmentType = AssessmentType.SELF_RATED
    coach_input: bool = False

    def __post_init__(self):
        if isinstance(self.assessment_type, str):
            object.__setattr__(self, "assessment_type", AssessmentType(self.assessment_type))

    @classmethod
    def from_mapping(
        cls,
        raw: Mapping[str, Any],
        skill_codes: Tuple[str, ...] = SKILL_CODES,
        default: int = NEUTRAL_SCORE,
    ) -> "Assessment":
        """Build a snapshot from a raw persistence record."""
        created_at = raw.get("created_at")
        if isinstance(created_at, str):
            created_at = parse_timestamp(created_at)
        assessment_type = raw.get("assessment_type") or AssessmentType.SELF_RATED
        return cls(
            scores=normalize_scores(raw, skill_codes, default),
            created_at=created_at,
            assessment_id=_optional_str(raw.get("assessment_id")),
            user_id=_optional_str(raw.get("user_id")),
            notes=raw.get("notes"),
            assessment_type=assessment_type,
            coach_input=bool(raw.get("coach_input", False)),
        )

    @classmethod
    def default(cls, user_id: Optional[str] = None, score: int = NEUTRAL_SCORE) -> "Assessment":
        """All-neutral assessment used for new users with no history."""
        return cls(
            scores={code: score for code in SKILL_CODES},
            user_id=user_id,
            notes="Default assessment",
        )

    def score(self, code: str) -> int:
        return self.scores[code]

    def to_dict(self) -> dict:
        """Flatten back to the raw record shape."""
        data: Dict[str, Any] = dict(self.scores)
        data.update({
            "assessment_id": self.assessment_id,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "notes": self.notes,
            "assessment_type": self.assessment_type.value,
            "coach_input": self.coach_input,
        })
        return data


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z'."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)
