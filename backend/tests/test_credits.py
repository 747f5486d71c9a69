from __future__ import annotations

from neoori.models.profile import (
    Activity,
    Awards,
    Education,
    Experience,
    GameProgress,
    Location,
    Profile,
    Skill,
    StoredDocument,
)
from neoori.services.credits import (
    FIRST_DOCUMENT_TEXT,
    PROFILE_COMPLETE_TEXT,
    evaluate_awards,
    is_profile_complete,
)


def _document() -> StoredDocument:
    return StoredDocument(name="cv.pdf", path="documents/u1/cv/x.pdf", url="http://h/api/files/documents/u1/cv/x.pdf")


def _complete_profile(**overrides) -> Profile:
    fields = dict(
        id="p1",
        user_id="u1",
        bio="Hello",
        location=Location(city="Dakar"),
        education=[Education(degree="BSc", school="UCAD", year="2020")],
        experiences=[Experience(title="Dev", company="Acme", period="2021")],
        skills=[Skill(name="Python", level=70)],
        documents=[_document()],
    )
    fields.update(overrides)
    return Profile(**fields)


def test_empty_profile_is_owed_nothing() -> None:
    result = evaluate_awards(Profile(id="p1", user_id="u1"))

    assert result.credits == 0
    assert result.activities == []
    assert result.awards == Awards()


def test_first_document_is_awarded() -> None:
    result = evaluate_awards(Profile(id="p1", user_id="u1", documents=[_document()]))

    assert result.credits == 15
    assert [a.text for a in result.activities] == [FIRST_DOCUMENT_TEXT]
    assert result.awards.first_document


def test_first_document_flag_prevents_repeat() -> None:
    profile = Profile(id="p1", user_id="u1", documents=[_document()], awards=Awards(first_document=True))

    assert evaluate_awards(profile).credits == 0


def test_legacy_document_activity_prevents_repeat() -> None:
    profile = Profile(
        id="p1",
        user_id="u1",
        documents=[_document()],
        recent_activities=[Activity(text=FIRST_DOCUMENT_TEXT, type="task")],
    )

    result = evaluate_awards(profile)

    assert result.credits == 0
    assert result.activities == []
    assert result.awards.first_document


def test_complete_profile_is_awarded_with_first_document() -> None:
    result = evaluate_awards(_complete_profile())

    assert result.credits == 35
    assert [a.text for a in result.activities] == [FIRST_DOCUMENT_TEXT, PROFILE_COMPLETE_TEXT]
    assert result.awards.profile_complete


def test_profile_completeness_needs_every_section() -> None:
    assert is_profile_complete(_complete_profile())
    assert not is_profile_complete(_complete_profile(bio=""))
    assert not is_profile_complete(_complete_profile(location=Location(country="SN")))
    assert not is_profile_complete(_complete_profile(skills=[]))
    assert is_profile_complete(_complete_profile(location=Location(address="1 rue X")))


def test_completed_game_is_awarded_once_per_game() -> None:
    profile = Profile(
        id="p1",
        user_id="u1",
        game_progress=[
            GameProgress(game_id="riasec", game_type="orientation", completed=True),
            GameProgress(game_id="mbti", game_type="personality", completed=False),
        ],
    )

    result = evaluate_awards(profile)

    assert result.credits == 15
    assert result.awards.games == ["riasec"]
    assert result.activities[0].type == "game"

    profile.awards = result.awards
    assert evaluate_awards(profile).credits == 0


def test_legacy_game_activity_prevents_repeat() -> None:
    profile = Profile(
        id="p1",
        user_id="u1",
        game_progress=[GameProgress(game_id="riasec", game_type="orientation", completed=True)],
        recent_activities=[Activity(text='Vous avez terminé le test "orientation"', type="game")],
    )

    result = evaluate_awards(profile)

    assert result.credits == 0
    assert result.awards.games == ["riasec"]


def test_evaluate_awards_does_not_mutate_profile() -> None:
    profile = Profile(id="p1", user_id="u1", documents=[_document()])

    evaluate_awards(profile)

    assert profile.awards == Awards()
