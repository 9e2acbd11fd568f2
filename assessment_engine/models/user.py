"""User profile as supplied by the identity layer (read-only here)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from assessment_engine.taxonomy.learning_taxonomy import AgeGroup


class UserProfile(BaseModel):
    """Learner profile fields needed to personalise a report."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    username: str
    age: int
    age_group: AgeGroup
    avatar_id: str = "avatar-1"

    @field_validator("age")
    @classmethod
    def validate_age(cls, v: int) -> int:
        if not 5 <= v <= 18:
            raise ValueError(f"age must be in [5, 18], got {v}.")
        return v
