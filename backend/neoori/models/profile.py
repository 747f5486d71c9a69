"""Profile document models: one MongoDB document per account.

Storage uses the snake_case field names; the API serialises the same models
in camelCase through the alias generator.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MAX_RECENT_ACTIVITIES = 10


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Location(DocumentModel):
    city: str | None = None
    country: str | None = None
    address: str | None = None


class Education(DocumentModel):
    id: str = Field(default_factory=new_id)
    degree: str
    school: str
    year: str
    field: str = ""
    description: str = ""
    created_at: datetime = Field(default_factory=utcnow)


class Experience(DocumentModel):
    id: str = Field(default_factory=new_id)
    title: str
    company: str
    period: str
    description: str = ""
    location: str = ""
    type: str = ""
    created_at: datetime = Field(default_factory=utcnow)


class Skill(DocumentModel):
    id: str = Field(default_factory=new_id)
    name: str
    level: int = Field(ge=0, le=100)
    category: str = ""
    created_at: datetime = Field(default_factory=utcnow)


class StoredDocument(DocumentModel):
    id: str = Field(default_factory=new_id)
    name: str
    type: str = ""
    size: int = 0
    path: str
    url: str
    category: str = "other"
    mime_type: str | None = None
    uploaded_at: datetime = Field(default_factory=utcnow)


class Notifications(DocumentModel):
    email: bool = True
    push: bool = True


class Privacy(DocumentModel):
    public_profile: bool = True
    show_email: bool = False


class Preferences(DocumentModel):
    notifications: Notifications = Field(default_factory=Notifications)
    privacy: Privacy = Field(default_factory=Privacy)
    theme: Literal["light", "dark", "auto"] = "auto"
    language: str = "fr"


class GameProgress(DocumentModel):
    game_id: str
    game_type: str = ""
    current_question: int | None = None
    total_questions: int | None = None
    answers: dict[str, Any] = Field(default_factory=dict)
    game_data: Any = None
    started_at: datetime = Field(default_factory=utcnow)
    last_updated_at: datetime = Field(default_factory=utcnow)
    completed: bool = False
    score: float | None = None


class Achievement(DocumentModel):
    id: str = Field(default_factory=new_id)
    title: str
    description: str = ""
    icon: str = ""
    unlocked_at: datetime = Field(default_factory=utcnow)


class Activity(DocumentModel):
    id: str = Field(default_factory=new_id)
    text: str
    time: str = Field(default_factory=lambda: utcnow().isoformat())
    type: str = "credits"
    created_at: datetime = Field(default_factory=utcnow)


class Awards(DocumentModel):
    """Credit awards already granted, one flag per rule."""

    first_document: bool = False
    profile_complete: bool = False
    games: list[str] = Field(default_factory=list)


class Profile(DocumentModel):
    id: str
    user_id: str
    bio: str | None = None
    location: Location | None = None
    career_path: str | None = None
    phone: str | None = None
    credits: int = 0
    education: list[Education] = Field(default_factory=list)
    experiences: list[Experience] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)
    documents: list[StoredDocument] = Field(default_factory=list)
    preferences: Preferences = Field(default_factory=Preferences)
    game_progress: list[GameProgress] = Field(default_factory=list)
    achievements: list[Achievement] = Field(default_factory=list)
    recent_activities: list[Activity] = Field(default_factory=list)
    awards: Awards = Field(default_factory=Awards)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, doc: dict) -> "Profile":
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        # Fields stored as null fall back to their defaults
        return cls.model_validate({key: value for key, value in data.items() if value is not None})

    def to_document(self) -> dict:
        data = self.model_dump(exclude={"id"})
        data["_id"] = self.id
        return data
