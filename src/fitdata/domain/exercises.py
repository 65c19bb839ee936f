"""Canonical exercise records."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DEFAULT_EQUIPMENT = "bodyweight"
DEFAULT_DIFFICULTY = "intermediate"


class ExerciseCategory(StrEnum):
    """Training split an exercise is grouped under."""

    PUSH = "Push"
    PULL = "Pull"
    LEGS = "Legs"
    CORE = "Core"
    CARDIO = "Cardio"
    FULL_BODY = "Full Body"


class CanonicalExercise(BaseModel):
    """Normalized exercise record built from an ExerciseDB entry."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    name: str
    description: str
    gif_url: str | None = None
    image_url: str | None = None
    target_muscles: list[str]
    secondary_muscles: list[str]
    body_parts: list[str]
    equipment: str = DEFAULT_EQUIPMENT
    category: ExerciseCategory = ExerciseCategory.FULL_BODY
    # ExerciseDB has no difficulty signal.
    difficulty: str = DEFAULT_DIFFICULTY
    form_analysis_url: str
