"""
Exercise models — breathing and guided (grounding, visualization, mindfulness) variants.

Wire format matches the exercise JSON exchanged with the recommendation oracle:
breathing steps carry `seconds`, guided steps carry a `prompt`.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class ExerciseCategory:
    BREATHING = "breathing"
    GROUNDING = "grounding"
    VISUALIZATION = "visualization"
    MINDFULNESS = "mindfulness"

    ALL = (BREATHING, GROUNDING, VISUALIZATION, MINDFULNESS)


class BreathingStep(BaseModel):
    """One timed phase of a breathing exercise."""
    label: str = Field(min_length=1)
    duration: int = Field(alias="seconds", ge=1, strict=True)
    instruction: str = ""
    scale: float = 1.0
    color: str = "#6ee7b7"

    model_config = {"frozen": True, "populate_by_name": True}


class GuidedStep(BaseModel):
    """One untimed step, advanced only by explicit navigation."""
    label: str = Field(min_length=1)
    instruction: str = ""
    prompt: str = ""

    model_config = {"frozen": True}


class BreathingExercise(BaseModel):
    key: str = Field(min_length=1)
    type: Literal["breathing"] = ExerciseCategory.BREATHING
    title: str = Field(min_length=1)
    description: str = ""
    steps: tuple[BreathingStep, ...] = Field(min_length=1)
    note: Optional[str] = None
    tips: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def timed(self) -> bool:
        return True


class GuidedExercise(BaseModel):
    key: str = Field(min_length=1)
    type: Literal["grounding", "visualization", "mindfulness"]
    title: str = Field(min_length=1)
    description: str = ""
    steps: tuple[GuidedStep, ...] = Field(min_length=1)
    note: Optional[str] = None
    tips: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def timed(self) -> bool:
        return False


Exercise = Annotated[Union[BreathingExercise, GuidedExercise], Field(discriminator="type")]
