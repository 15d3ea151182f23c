"""
Drill catalog.

The workout generator depends on a catalog only through
``get_drills_for_category``. Two implementations are provided:

- ``SampleDrillCatalog``: the fixed sample set, each drill sized as a
  fraction of the requested minutes.
- ``StaticDrillCatalog``: filters real ``Drill`` records by equipment,
  difficulty and age, then packs them into the requested minutes.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Protocol, Tuple
import logging
import math

from ..models.workouts import Drill, EquipmentTier, PlanDrill

logger = logging.getLogger(__name__)


EQUIPMENT_REQUIREMENTS: Dict[EquipmentTier, FrozenSet[str]] = {
    EquipmentTier.MINIMAL: frozenset(),
    EquipmentTier.BASIC: frozenset({"tennis_balls"}),
    EquipmentTier.INTERMEDIATE: frozenset({"tennis_balls", "catchers_gear"}),
    EquipmentTier.ADVANCED: frozenset({"tennis_balls", "catchers_gear", "home_plate"}),
    EquipmentTier.PREMIUM: frozenset(
        {"tennis_balls", "catchers_gear", "home_plate", "l_screen", "cones"}
    ),
}

# Highest drill difficulty offered at each experience level.
# "maintenance" is used for secondary work on non-focus categories.
DIFFICULTY_CAPS: Dict[str, int] = {
    "beginner": 2,
    "intermediate": 3,
    "advanced": 4,
    "expert": 5,
    "maintenance": 3,
}
DEFAULT_DIFFICULTY_CAP = 3


class DrillCatalog(Protocol):
    """Anything that can supply plan drills for a category."""

    def get_drills_for_category(
        self,
        category: str,
        duration: int,
        equipment_level: EquipmentTier,
        experience_level: str,
    ) -> List[PlanDrill]:
        ...


# =============================================================================
# Sample catalog
# =============================================================================

@dataclass(frozen=True)
class SampleDrill:
    """A sample drill whose length is a fraction of the phase minutes."""
    code: str
    name: str
    fraction: float
    rounding: str                   # "ceil", "floor" or "full"
    instructions: str
    coaching_points: Tuple[str, ...]

    def minutes(self, duration: int) -> int:
        if self.rounding == "full":
            return duration
        if self.rounding == "ceil":
            return math.ceil(duration * self.fraction)
        return math.floor(duration * self.fraction)

    def to_plan_drill(self, category: str, duration: int) -> PlanDrill:
        return PlanDrill(
            code=self.code,
            name=self.name,
            duration=self.minutes(duration),
            instructions=self.instructions,
            coaching_points=list(self.coaching_points),
            category=category,
        )


SAMPLE_DRILLS: Dict[str, Tuple[SampleDrill, ...]] = {
    "receiving": (
        SampleDrill(
            "basic_receiving", "Basic Receiving Mechanics", 0.6, "ceil",
            "Practice proper glove positioning and movement",
            ("Keep glove relaxed", "Move glove to ball", "Present strikes confidently"),
        ),
        SampleDrill(
            "framing_practice", "Pitch Framing", 0.4, "floor",
            "Practice subtle movements to help umpire see strikes",
            ("Minimal glove movement", "Hold the zone", "Stay quiet with body"),
        ),
    ),
    "throwing": (
        SampleDrill(
            "exchange_drill", "Quick Exchange", 0.5, "ceil",
            "Practice getting ball from glove to throwing hand quickly",
            ("Two hands to the ball", "Quick, clean transfer", "Keep hands close to body"),
        ),
        SampleDrill(
            "footwork_drill", "Throwing Footwork", 0.5, "floor",
            "Practice proper foot positioning for throwing to second",
            ("Right foot replaces left", "Stay low", "Direct line to target"),
        ),
    ),
    "blocking": (
        SampleDrill(
            "basic_blocking", "Basic Blocking Stance", 0.7, "ceil",
            "Practice proper blocking position and technique",
            ("Chest over the ball", "Keep ball in front", "Stay low and athletic"),
        ),
        SampleDrill(
            "blocking_angles", "Blocking Different Angles", 0.3, "floor",
            "Practice blocking balls to different sides",
            ("Angle body to keep ball in front", "Use whole body, not just glove"),
        ),
    ),
    "education": (
        SampleDrill(
            "game_situations", "Game Situation Practice", 1.0, "full",
            "Think through different game scenarios and appropriate responses",
            ("Know the count", "Communicate with pitcher", "Anticipate plays"),
        ),
    ),
}


class SampleDrillCatalog:
    """The fixed sample set; ignores equipment and experience."""

    def __init__(self, drills: Optional[Mapping[str, Tuple[SampleDrill, ...]]] = None) -> None:
        self._drills = dict(drills or SAMPLE_DRILLS)

    def get_drills_for_category(
        self,
        category: str,
        duration: int,
        equipment_level: EquipmentTier = EquipmentTier.BASIC,
        experience_level: str = "beginner",
    ) -> List[PlanDrill]:
        return [drill.to_plan_drill(category, duration) for drill in self._drills.get(category, ())]


# =============================================================================
# Static catalog
# =============================================================================

CATALOG_DRILLS: Tuple[Drill, ...] = (
    Drill(
        code="receiving_001",
        name="Tennis Ball Wall Bounces",
        category="receiving",
        subcategory="glove_move",
        difficulty=1,
        duration=3,
        equipment_required=("tennis_balls",),
        equipment_tier=EquipmentTier.BASIC,
        age_range=(12, 25),
        instructions=(
            "Stand 3 feet from a wall in proper catching stance.",
            "Throw tennis ball against wall with moderate force.",
            "Catch ball with proper glove positioning as it bounces back.",
        ),
        coaching_points=(
            "Keep glove relaxed and fingers pointing up for high balls",
            "Turn glove down with fingers pointing down for low balls",
            "Keep body quiet and let glove do the work",
        ),
        common_mistakes=(
            "Moving entire body instead of just glove",
            "Stabbing at ball instead of smooth glove movement",
        ),
    ),
    Drill(
        code="receiving_003",
        name="Glove Load Drill",
        category="receiving",
        subcategory="glove_load",
        difficulty=2,
        duration=3,
        equipment_required=("tennis_balls",),
        equipment_tier=EquipmentTier.BASIC,
        age_range=(12, 25),
        instructions=(
            "Start in proper catching stance with glove extended.",
            "Partner tosses ball to glove location.",
            "Close the glove smoothly around the ball and hold for 1 second.",
        ),
        coaching_points=(
            "Close glove from outside fingers inward",
            "Don't snap glove shut - smooth closure",
            "Feel ball settle into pocket of glove",
        ),
        common_mistakes=("Snapping glove shut too quickly",),
    ),
    Drill(
        code="receiving_011",
        name="Soft Hands Development",
        category="receiving",
        subcategory="glove_load",
        difficulty=2,
        duration=3,
        equipment_required=("tennis_balls",),
        equipment_tier=EquipmentTier.BASIC,
        age_range=(12, 25),
        instructions=(
            "Partner tosses balls with varying speeds and locations.",
            "Receive each ball with maximum softness, giving with the ball on impact.",
        ),
        coaching_points=(
            "Relax hands and arms before ball arrives",
            "Let ball come to glove - don't attack it",
            "Think of hands as shock absorbers",
        ),
        common_mistakes=("Tense hands and arms", "No give or absorption upon contact"),
    ),
    Drill(
        code="receiving_002",
        name="Knee Down Framing",
        category="receiving",
        subcategory="presentation",
        difficulty=2,
        duration=4,
        equipment_required=("tennis_balls", "catchers_gear"),
        equipment_tier=EquipmentTier.INTERMEDIATE,
        age_range=(14, 25),
        instructions=(
            "Get in one-knee-down position with the throwing side knee up.",
            "Partner tosses tennis balls around the strike zone.",
            "Present each pitch to an imaginary umpire for 2 seconds.",
        ),
        coaching_points=(
            "Receive ball with soft hands - let ball come to glove",
            "Hold presentation position to show umpire the strike",
            "Minimize glove movement during presentation",
        ),
        common_mistakes=("Pulling glove back immediately after catch",),
    ),
    Drill(
        code="receiving_004",
        name="Setup Position Practice",
        category="receiving",
        subcategory="setups",
        difficulty=1,
        duration=4,
        equipment_required=("catchers_gear", "home_plate"),
        equipment_tier=EquipmentTier.ADVANCED,
        age_range=(12, 25),
        instructions=(
            "Set up behind home plate in proper catching stance.",
            "Transition between balanced, inside and outside setups.",
            "Hold each position for 30 seconds.",
        ),
        coaching_points=(
            "Feet shoulder-width apart with weight on balls of feet",
            "Maintain straight back with slight forward lean",
        ),
        common_mistakes=("Sitting back on heels instead of balls of feet",),
    ),
    Drill(
        code="throwing_001",
        name="Quick Release Drill",
        category="throwing",
        subcategory="exchange",
        difficulty=2,
        duration=4,
        equipment_required=("tennis_balls", "catchers_gear"),
        equipment_tier=EquipmentTier.INTERMEDIATE,
        age_range=(13, 25),
        instructions=(
            "Start in receiving position with ball in glove.",
            "Practice quick transfer from glove to bare hand.",
            "Emphasize speed without sacrificing control.",
        ),
        coaching_points=(
            "Find ball with bare hand, don't dump it out",
            "Grip ball across seams for better control",
            "Keep transfer close to body",
        ),
        common_mistakes=("Taking too long to find ball in glove",),
    ),
    Drill(
        code="throwing_005",
        name="Arm Strength Building",
        category="throwing",
        subcategory="arm_strength",
        difficulty=3,
        duration=6,
        equipment_required=("tennis_balls", "catchers_gear"),
        equipment_tier=EquipmentTier.INTERMEDIATE,
        age_range=(15, 25),
        instructions=(
            "Progressive throwing at increasing distances.",
            "Start close and gradually move back.",
            "Include long toss if space permits.",
        ),
        coaching_points=(
            "Don't sacrifice form for distance",
            "Build up intensity gradually",
        ),
        common_mistakes=("Sacrificing mechanics for distance",),
    ),
    Drill(
        code="throwing_002",
        name="Footwork Fundamentals",
        category="throwing",
        subcategory="footwork",
        difficulty=2,
        duration=4,
        equipment_required=("catchers_gear", "home_plate"),
        equipment_tier=EquipmentTier.ADVANCED,
        age_range=(13, 25),
        instructions=(
            "Practice basic throwing footwork without ball.",
            "Right foot steps toward second base, left foot follows and plants.",
        ),
        coaching_points=(
            "Right foot steps first, directly toward target",
            "Keep steps short and quick",
            "Maintain balance throughout footwork",
        ),
        common_mistakes=("Taking too big of steps", "Wrong foot leading to second base"),
    ),
    Drill(
        code="blocking_004",
        name="Bare Hand Blocking",
        category="blocking",
        subcategory="blocking_overall",
        difficulty=2,
        duration=3,
        equipment_required=("tennis_balls", "catchers_gear"),
        equipment_tier=EquipmentTier.INTERMEDIATE,
        age_range=(13, 25),
        instructions=(
            "Practice blocking with bare hand behind back.",
            "Use chest protector and shins to block balls in various locations.",
        ),
        coaching_points=(
            "Keep bare hand behind back and protected",
            "Use chest and shins as primary blocking tools",
        ),
        common_mistakes=("Exposing bare hand to ball", "Relying too much on glove"),
    ),
    Drill(
        code="blocking_001",
        name="Basic Blocking Position",
        category="blocking",
        subcategory="blocking_overall",
        difficulty=1,
        duration=3,
        equipment_required=("catchers_gear", "home_plate"),
        equipment_tier=EquipmentTier.ADVANCED,
        age_range=(12, 25),
        instructions=(
            "Drop to knees with shins perpendicular to ground.",
            "Keep back straight and chest up, glove between legs.",
            "Hold position for 30 seconds at a time.",
        ),
        coaching_points=(
            "Quick drop to knees, don't fall backward",
            "Chin down to protect neck",
            "Glove fills space between legs",
        ),
        common_mistakes=("Falling backward instead of dropping straight down",),
    ),
    Drill(
        code="blocking_002",
        name="Tennis Ball Blocking",
        category="blocking",
        subcategory="blocking_overall",
        difficulty=2,
        duration=4,
        equipment_required=("tennis_balls", "catchers_gear", "home_plate"),
        equipment_tier=EquipmentTier.ADVANCED,
        age_range=(13, 25),
        instructions=(
            "Partner bounces tennis balls in the dirt.",
            "Get body in front of ball and recover after each block.",
        ),
        coaching_points=(
            "Get body behind ball, not glove",
            "Quick recovery to receiving position",
        ),
        common_mistakes=("Trying to catch ball instead of block",),
    ),
    Drill(
        code="education_001",
        name="Pitch Recognition Study",
        category="education",
        subcategory="pitch_calling",
        difficulty=2,
        duration=5,
        equipment_required=("tennis_balls",),
        equipment_tier=EquipmentTier.BASIC,
        age_range=(14, 25),
        instructions=(
            "Partner throws different pitch types at various speeds.",
            "Identify pitch type and location before the ball arrives.",
        ),
        coaching_points=(
            "Watch pitcher's hand and release point",
            "Identify spin and movement early",
        ),
        common_mistakes=("Not watching release point closely enough",),
    ),
    Drill(
        code="education_003",
        name="Scouting Report Application",
        category="education",
        subcategory="scouting_reports",
        difficulty=3,
        duration=4,
        equipment_required=("tennis_balls", "catchers_gear"),
        equipment_tier=EquipmentTier.INTERMEDIATE,
        age_range=(15, 25),
        instructions=(
            "Study imaginary scouting reports on different batter types.",
            "Adjust pitch calling based on the scouting info.",
        ),
        coaching_points=(
            "Use scouting info to influence pitch selection",
            "Remember tendencies but be ready to adapt",
        ),
        common_mistakes=("Over-relying on reports without adapting",),
    ),
    Drill(
        code="education_004",
        name="Umpire Communication",
        category="education",
        subcategory="umpire_relations",
        difficulty=2,
        duration=3,
        equipment_required=("catchers_gear", "home_plate"),
        equipment_tier=EquipmentTier.ADVANCED,
        age_range=(14, 25),
        instructions=(
            "Practice setup positioning that gives the umpire a clear view.",
            "Practice respectful communication about calls.",
        ),
        coaching_points=(
            "Give umpire best possible view of pitch",
            "Never argue balls and strikes",
        ),
        common_mistakes=("Blocking umpire's view of pitch",),
    ),
)


class StaticDrillCatalog:
    """
    Catalog backed by ``Drill`` records.

    Args:
        drills: Catalog records to select from
        equipment_requirements: Equipment each tier guarantees
        athlete_age: When set, drills outside their age range are excluded
        fallback: Catalog used when filtering leaves nothing
    """

    def __init__(
        self,
        drills: Iterable[Drill] = CATALOG_DRILLS,
        equipment_requirements: Optional[Mapping[EquipmentTier, FrozenSet[str]]] = None,
        athlete_age: Optional[int] = None,
        fallback: Optional[DrillCatalog] = None,
    ) -> None:
        self._drills: Tuple[Drill, ...] = tuple(drills)
        self._equipment = dict(equipment_requirements or EQUIPMENT_REQUIREMENTS)
        self.athlete_age = athlete_age
        self._fallback = fallback or SampleDrillCatalog()

    def __len__(self) -> int:
        return len(self._drills)

    def get_drill(self, code: str) -> Optional[Drill]:
        for drill in self._drills:
            if drill.code == code:
                return drill
        return None

    def find_drills(
        self,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
        equipment_level: Optional[EquipmentTier] = None,
        max_difficulty: Optional[int] = None,
        age: Optional[int] = None,
    ) -> List[Drill]:
        """Drills matching every given criterion, easiest and shortest first."""
        available = None
        if equipment_level is not None:
            available = self._equipment.get(EquipmentTier(equipment_level), frozenset())

        matches = [
            drill for drill in self._drills
            if (category is None or drill.category == category)
            and (subcategory is None or drill.subcategory == subcategory)
            and (available is None or set(drill.equipment_required) <= available)
            and (max_difficulty is None or drill.difficulty <= max_difficulty)
            and drill.suits_age(age)
        ]
        return sorted(matches, key=lambda d: (d.difficulty, d.duration))

    def get_drills_for_category(
        self,
        category: str,
        duration: int,
        equipment_level: EquipmentTier,
        experience_level: str,
    ) -> List[PlanDrill]:
        if duration <= 0:
            return []

        candidates = self.find_drills(
            category=category,
            equipment_level=equipment_level,
            max_difficulty=DIFFICULTY_CAPS.get(experience_level, DEFAULT_DIFFICULTY_CAP),
            age=self.athlete_age,
        )
        if not candidates:
            logger.debug(
                f"No catalog drills for {category} at {EquipmentTier(equipment_level).value}/"
                f"{experience_level}; using sample drills"
            )
            return self._fallback.get_drills_for_category(
                category, duration, equipment_level, experience_level
            )

        return pack_drills(candidates, duration)


def pack_drills(candidates: List[Drill], duration: int) -> List[PlanDrill]:
    """
    Fill ``duration`` minutes with drills in the given order.

    Drills that no longer fit are skipped. Left-over minutes extend the last
    packed drill so the phase total is always ``duration``. When not even the
    first drill fits it is shortened to ``duration``.
    """
    packed: List[PlanDrill] = []
    remaining = duration
    for drill in candidates:
        if drill.duration <= remaining:
            packed.append(drill.to_plan_drill())
            remaining -= drill.duration

    if not packed:
        return [candidates[0].to_plan_drill(duration)]

    packed[-1].duration += remaining
    return packed
