"""Schemas that enhancement results must satisfy to replace a rule decision."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


class EnhancementModel(BaseModel):
    """Base for enhancement payloads; accepts snake_case or camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class RecoveryEnhancement(EnhancementModel):
    """Recovery status assessment."""

    status: str = Field(..., min_length=1, description="e.g. 'Green (Primed)'")
    category: str = Field(..., description="green, yellow or red")
    reasoning: List[str] = Field(default_factory=list)

    @field_validator("category")
    @classmethod
    def known_category(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in {"green", "yellow", "red"}:
            raise ValueError(f"unknown recovery category: {value}")
        return value


class TrainingGapEnhancement(EnhancementModel):
    """Training gap interpretation."""

    interpretation: str = Field(..., min_length=1)
    intensity_modifier: float = Field(..., ge=0.5, le=1.05)
    recommendation: str = Field(..., min_length=1)
    reasoning: List[str] = Field(default_factory=list)


class PhaseEnhancement(EnhancementModel):
    """Periodization phase override."""

    phase_name: str = Field(..., min_length=1)
    focus: str = Field(..., min_length=1)
    reasoning: Optional[str] = None
