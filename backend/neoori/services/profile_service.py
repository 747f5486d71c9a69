"""Profile store: per-account profile documents in MongoDB.

Every operation is keyed by the account id (``user_id``), never by the
document ``_id``. Entries are validated by the pydantic models in
``neoori.models.profile`` before they are written, so what comes back out of
the collection always matches the schema.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import DuplicateKeyError

from neoori.exceptions import NotFound, ValidationError
from neoori.models.profile import (
    MAX_RECENT_ACTIVITIES,
    Education,
    Experience,
    GameProgress,
    Preferences,
    Profile,
    Skill,
    StoredDocument,
)
from neoori.services.credits import AwardResult, evaluate_awards

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ProfileStore:
    def __init__(self, collection):
        self.collection = collection

    def _new_profile(self, user_id: str, profile_id: str | None = None) -> Profile:
        now = _now()
        return Profile(id=profile_id or user_id, user_id=user_id, created_at=now, updated_at=now)

    async def _find(self, user_id: str) -> dict | None:
        return await self.collection.find_one({"user_id": user_id})

    async def _insert(self, doc: dict) -> None:
        await self.collection.insert_one(doc)

    async def get(self, user_id: str) -> Profile:
        raw = await self._find(user_id)
        if not raw:
            raise NotFound("Profile not found")
        return Profile.from_document(raw)

    async def get_or_create(self, user_id: str, profile_id: str | None = None) -> Profile:
        raw = await self._find(user_id)
        if raw:
            return Profile.from_document(raw)

        profile = self._new_profile(user_id, profile_id)
        try:
            await self._insert(profile.to_document())
        except DuplicateKeyError:
            # Created concurrently by another request
            return await self.get(user_id)

        logger.info("Created profile %s for account %s", profile.id, user_id)
        return profile

    async def _set_fields(self, user_id: str, fields: dict[str, Any]) -> Profile:
        """``$set`` top-level fields, creating the profile when it is missing."""
        raw = await self._find(user_id)
        if not raw:
            doc = self._new_profile(user_id).to_document()
            doc.update(fields)
            await self._insert(doc)
        else:
            await self.collection.update_one(
                {"user_id": user_id},
                {"$set": {**fields, "updated_at": _now()}},
            )
        return await self.get(user_id)

    async def update(self, user_id: str, fields: dict[str, Any]) -> Profile:
        """Partial update of bio, location, career_path and phone."""
        allowed = {"bio", "location", "career_path", "phone"}
        return await self._set_fields(user_id, {k: v for k, v in fields.items() if k in allowed})

    async def update_preferences(self, user_id: str, preferences: Preferences) -> Profile:
        return await self._set_fields(user_id, {"preferences": preferences.model_dump()})

    # --- Sub-resource collections ---

    async def _add_entry(self, user_id: str, field: str, entry: BaseModel) -> Profile:
        raw = await self._find(user_id)
        if not raw:
            profile = self._new_profile(user_id)
            setattr(profile, field, [entry])
            await self._insert(profile.to_document())
            return profile

        await self.collection.update_one(
            {"user_id": user_id},
            {"$push": {field: entry.model_dump()}, "$set": {"updated_at": _now()}},
        )
        return await self.get(user_id)

    async def _update_entry(
        self,
        user_id: str,
        field: str,
        entry_id: str,
        patch: dict[str, Any],
        label: str,
    ) -> Profile:
        profile = await self.get(user_id)
        entries = getattr(profile, field)

        index = next((i for i, entry in enumerate(entries) if entry.id == entry_id), None)
        if index is None:
            raise NotFound(f"{label} not found")

        current = entries[index]
        patch = {k: v for k, v in patch.items() if k not in ("id", "created_at")}
        try:
            updated = type(current).model_validate({**current.model_dump(), **patch})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid {label.lower()} data: {e.errors()[0]['msg']}")

        result = await self.collection.update_one(
            {"user_id": user_id, f"{field}.id": entry_id},
            {"$set": {f"{field}.$": updated.model_dump(), "updated_at": _now()}},
        )
        if result.matched_count == 0:
            raise NotFound(f"{label} not found")
        return await self.get(user_id)

    async def _delete_entry(self, user_id: str, field: str, entry_id: str, label: str) -> Profile:
        profile = await self.get(user_id)
        if not any(entry.id == entry_id for entry in getattr(profile, field)):
            raise NotFound(f"{label} not found")

        await self.collection.update_one(
            {"user_id": user_id},
            {"$pull": {field: {"id": entry_id}}, "$set": {"updated_at": _now()}},
        )
        return await self.get(user_id)

    async def add_education(self, user_id: str, education: Education) -> Profile:
        return await self._add_entry(user_id, "education", education)

    async def update_education(self, user_id: str, education_id: str, patch: dict[str, Any]) -> Profile:
        return await self._update_entry(user_id, "education", education_id, patch, "Education")

    async def delete_education(self, user_id: str, education_id: str) -> Profile:
        return await self._delete_entry(user_id, "education", education_id, "Education")

    async def add_experience(self, user_id: str, experience: Experience) -> Profile:
        return await self._add_entry(user_id, "experiences", experience)

    async def update_experience(self, user_id: str, experience_id: str, patch: dict[str, Any]) -> Profile:
        return await self._update_entry(user_id, "experiences", experience_id, patch, "Experience")

    async def delete_experience(self, user_id: str, experience_id: str) -> Profile:
        return await self._delete_entry(user_id, "experiences", experience_id, "Experience")

    async def add_skill(self, user_id: str, skill: Skill) -> Profile:
        return await self._add_entry(user_id, "skills", skill)

    async def update_skill(self, user_id: str, skill_id: str, patch: dict[str, Any]) -> Profile:
        return await self._update_entry(user_id, "skills", skill_id, patch, "Skill")

    async def delete_skill(self, user_id: str, skill_id: str) -> Profile:
        return await self._delete_entry(user_id, "skills", skill_id, "Skill")

    async def add_document(self, user_id: str, document: StoredDocument) -> Profile:
        return await self._add_entry(user_id, "documents", document)

    async def delete_document(self, user_id: str, document_id: str) -> Profile:
        return await self._delete_entry(user_id, "documents", document_id, "Document")

    # --- Games and credits ---

    async def save_game_progress(self, user_id: str, game_id: str, progress: dict[str, Any]) -> Profile:
        """Create or update the progress entry for ``game_id``."""
        raw = await self._find(user_id)
        profile = Profile.from_document(raw) if raw else self._new_profile(user_id)

        index = next((i for i, g in enumerate(profile.game_progress) if g.game_id == game_id), None)
        base = profile.game_progress[index].model_dump() if index is not None else {}
        try:
            entry = GameProgress.model_validate({**base, **progress, "game_id": game_id, "last_updated_at": _now()})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid game progress: {e.errors()[0]['msg']}")

        if not raw:
            profile.game_progress = [entry]
            await self._insert(profile.to_document())
        elif index is None:
            await self.collection.update_one(
                {"user_id": user_id},
                {"$push": {"game_progress": entry.model_dump()}, "$set": {"updated_at": _now()}},
            )
        else:
            await self.collection.update_one(
                {"user_id": user_id, "game_progress.game_id": game_id},
                {"$set": {"game_progress.$": entry.model_dump(), "updated_at": _now()}},
            )

        if entry.completed:
            await self.check_and_award_credits(user_id)
        return await self.get(user_id)

    async def check_and_award_credits(self, user_id: str) -> AwardResult:
        """Grant any milestone credits the profile is owed and log them in the activity feed."""
        raw = await self._find(user_id)
        if not raw:
            return AwardResult()

        profile = Profile.from_document(raw)
        result = evaluate_awards(profile)
        if not result.credits and result.awards == profile.awards:
            return result

        activities = result.activities + profile.recent_activities
        await self.collection.update_one(
            {"user_id": user_id},
            {
                "$inc": {"credits": result.credits},
                "$set": {
                    "recent_activities": [a.model_dump() for a in activities[:MAX_RECENT_ACTIVITIES]],
                    "awards": result.awards.model_dump(),
                    "updated_at": _now(),
                },
            },
        )
        if result.credits:
            logger.info("Awarded %d credits to account %s", result.credits, user_id)
        return result
