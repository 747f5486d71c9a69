"""Credit award rules for profile milestones."""

from dataclasses import dataclass, field

from neoori.models.profile import Activity, Awards, Profile

FIRST_DOCUMENT_CREDITS = 15
PROFILE_COMPLETE_CREDITS = 20
GAME_COMPLETED_CREDITS = 15

FIRST_DOCUMENT_TEXT = "Vous avez gagné 15 crédits pour avoir téléchargé un document"
PROFILE_COMPLETE_TEXT = "Vous avez gagné 20 crédits pour avoir complété votre profil"
GAME_COMPLETED_TEXT = 'Vous avez gagné 15 crédits pour avoir complété le test "{name}"'


@dataclass
class AwardResult:
    credits: int = 0
    activities: list[Activity] = field(default_factory=list)
    awards: Awards = field(default_factory=Awards)


def _legacy_task_awarded(profile: Profile, marker: str) -> bool:
    """Awards granted before the flags existed only left an activity behind."""
    return any(a.type == "task" and marker in a.text for a in profile.recent_activities)


def _legacy_game_awarded(profile: Profile, game_id: str, game_type: str) -> bool:
    for activity in profile.recent_activities:
        if activity.type != "game" or "test" not in activity.text:
            continue
        if game_id in activity.text or (game_type and game_type in activity.text):
            return True
    return False


def is_profile_complete(profile: Profile) -> bool:
    has_location = bool(profile.location and (profile.location.city or profile.location.address))
    return all([
        profile.bio,
        has_location,
        profile.education,
        profile.experiences,
        profile.skills,
        profile.documents,
    ])


def evaluate_awards(profile: Profile) -> AwardResult:
    """Work out which milestone credits the profile is owed right now.

    Returns the credits to add, the activities to prepend (newest first) and
    the updated award flags. Nothing is owed twice.
    """
    awards = profile.awards.model_copy(deep=True)
    result = AwardResult(awards=awards)

    if profile.documents and not awards.first_document:
        if not _legacy_task_awarded(profile, "document"):
            result.credits += FIRST_DOCUMENT_CREDITS
            result.activities.append(Activity(text=FIRST_DOCUMENT_TEXT, type="task"))
        awards.first_document = True

    if is_profile_complete(profile) and not awards.profile_complete:
        if not _legacy_task_awarded(profile, "profil complet"):
            result.credits += PROFILE_COMPLETE_CREDITS
            result.activities.append(Activity(text=PROFILE_COMPLETE_TEXT, type="task"))
        awards.profile_complete = True

    for game in profile.game_progress:
        if not game.completed or game.game_id in awards.games:
            continue
        if not _legacy_game_awarded(profile, game.game_id, game.game_type):
            result.credits += GAME_COMPLETED_CREDITS
            result.activities.append(
                Activity(text=GAME_COMPLETED_TEXT.format(name=game.game_type or game.game_id), type="game")
            )
        awards.games.append(game.game_id)

    return result
