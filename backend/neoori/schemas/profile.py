"""Pydantic schemas for profile requests.

Create schemas mirror the stored entry models minus the generated fields;
update schemas make every field optional and are applied with
``exclude_unset`` so only the keys a client sent are merged.
"""

from typing import Any

from pydantic import Field

from neoori.models.profile import Location, Preferences
from neoori.schemas.base import CamelModel


class ProfileUpdate(CamelModel):
    bio: str | None = None
    location: Location | None = None
    career_path: str | None = None
    phone: str | None = None


class PreferencesUpdate(CamelModel):
    preferences: Preferences


class EducationCreate(CamelModel):
    degree: str = Field(min_length=1)
    school: str = Field(min_length=1)
    year: str = Field(min_length=1)
    field: str = ""
    description: str = ""


class EducationUpdate(CamelModel):
    degree: str | None = None
    school: str | None = None
    year: str | None = None
    field: str | None = None
    description: str | None = None


class ExperienceCreate(CamelModel):
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    period: str = Field(min_length=1)
    description: str = ""
    location: str = ""
    type: str = ""


class ExperienceUpdate(CamelModel):
    title: str | None = None
    company: str | None = None
    period: str | None = None
    description: str | None = None
    location: str | None = None
    type: str | None = None


class SkillCreate(CamelModel):
    name: str = Field(min_length=1)
    level: int = Field(ge=0, le=100)
    category: str = ""


class SkillUpdate(CamelModel):
    name: str | None = None
    level: int | None = Field(default=None, ge=0, le=100)
    category: str | None = None


class GameProgressUpdate(CamelModel):
    game_type: str | None = None
    current_question: int | None = None
    total_questions: int | None = None
    answers: dict[str, Any] | None = None
    game_data: Any = None
    completed: bool | None = None
    score: float | None = None
