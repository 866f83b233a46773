"""Recommender: category heuristic, oracle failures, feedback, affirmations, sounds and journal insights."""

import json

import pytest

from zensoul.catalog import ExerciseCatalog
from zensoul.client import AsyncZenSoul
from zensoul.config import Settings
from zensoul.errors import OracleError
from zensoul.models.exercise import ExerciseCategory
from zensoul.models.session import SessionStatus
from zensoul.recommend import (
    DEFAULT_FEEDBACK,
    DEFAULT_SUGGESTION,
    FALLBACK_AFFIRMATIONS,
    Recommender,
    SoundRecommendation,
    choose_category,
    format_feedback,
)
from zensoul.sounds import DEFAULT_SOUNDS

GROUNDING_REPLY = json.dumps({
    "key": "custom",
    "type": "grounding",
    "title": "Feet on the Floor",
    "description": "Notice your body's contact with the ground.",
    "steps": [
        {"label": "Feet", "instruction": "Press your feet down.", "prompt": "I notice..."},
        {"label": "Seat", "instruction": "Feel the chair under you.", "prompt": "I feel..."},
    ],
    "tips": "Slow down and notice.",
})


class TestChooseCategory:
    @pytest.mark.parametrize(
        "mood, rotation, expected",
        [
            ("calm", 0, ExerciseCategory.BREATHING),
            ("calm", 1, ExerciseCategory.GROUNDING),
            ("calm", 6, ExerciseCategory.VISUALIZATION),
            ("I'm so anxious", 0, ExerciseCategory.GROUNDING),
            ("Restless tonight", 3, ExerciseCategory.MINDFULNESS),
            ("sad and stressed", 2, ExerciseCategory.MINDFULNESS),
            ("sad", 1, ExerciseCategory.GROUNDING),
            ("my chest is tight", 0, ExerciseCategory.MINDFULNESS),
            ("scared of tomorrow", 4, ExerciseCategory.VISUALIZATION),
        ],
    )
    def test_category(self, mood, rotation, expected):
        assert choose_category(mood, rotation) == expected

    def test_first_matching_keyword_group_wins(self):
        # "sad" is checked before "anxious"; breathing is only swapped for visualization there.
        assert choose_category("sad and anxious", 0) == ExerciseCategory.BREATHING


class TestRecommend:
    @pytest.mark.asyncio
    async def test_success_appends_and_rotates(self, make_oracle):
        oracle = make_oracle(GROUNDING_REPLY)
        catalog = ExerciseCatalog()
        recommender = Recommender(oracle, catalog)

        result = await recommender.recommend("anxious about work")

        assert result.ok
        assert result.category == ExerciseCategory.GROUNDING
        assert result.message == "Slow down and notice."
        assert len(catalog) == 3
        assert catalog[2] is result.exercise
        assert recommender.rotation_index == 1
        assert '"grounding"' in oracle.prompts[0]
        assert "4-7-8 Breathing" in oracle.prompts[0]

    @pytest.mark.asyncio
    async def test_garbled_reply_leaves_catalog_untouched(self, make_oracle):
        catalog = ExerciseCatalog()
        recommender = Recommender(make_oracle("Here's a nice exercise: breathe!"), catalog)

        result = await recommender.recommend("tense")

        assert not result.ok
        assert result.message == "Invalid exercise format. Try again."
        assert len(catalog) == 2
        assert recommender.rotation_index == 0

    @pytest.mark.asyncio
    async def test_deeply_nested_reply_is_rejected(self, make_oracle):
        reply = '{"key": "custom", "type": "breathing", "title": "X", "steps": ' + "[" * 100000 + "]" * 100000 + "}"
        catalog = ExerciseCatalog()

        result = await Recommender(make_oracle(reply), catalog).recommend("anxious")

        assert result.message == "Invalid exercise format. Try again."
        assert len(catalog) == 2

    @pytest.mark.asyncio
    async def test_oracle_error_becomes_message(self, make_oracle):
        catalog = ExerciseCatalog()
        recommender = Recommender(make_oracle(OracleError("HTTP 503")), catalog)

        result = await recommender.recommend("restless")

        assert not result.ok
        assert result.message == "Error loading exercise. Please try again."
        assert len(catalog) == 2

    @pytest.mark.asyncio
    async def test_blank_mood_skips_oracle(self, make_oracle):
        oracle = make_oracle()
        result = await Recommender(oracle, ExerciseCatalog()).recommend("   ")
        assert not result.ok
        assert oracle.prompts == []

    @pytest.mark.asyncio
    async def test_client_switches_to_new_exercise(self, make_oracle, loop):
        client = AsyncZenSoul(oracle=make_oracle(GROUNDING_REPLY), settings=Settings(), loop=loop)
        client.session.start()

        result = await client.recommend("anxious")

        assert client.session.exercise is result.exercise
        assert client.session.status == SessionStatus.IDLE
        assert client.session.step_index == 0
        await client.close()

    @pytest.mark.asyncio
    async def test_client_keeps_session_on_failure(self, make_oracle, loop):
        client = AsyncZenSoul(oracle=make_oracle("nope"), settings=Settings(), loop=loop)
        client.session.start()
        loop.advance(2)

        await client.recommend("anxious")

        assert client.session.exercise.key == "breathing-478"
        assert client.session.status == SessionStatus.RUNNING
        assert client.session.remaining == 2
        await client.close()


class TestFeedback:
    def test_format_feedback(self):
        raw = (
            "**Positive Feedback**\n"
            "What a wonderful job noticing your surroundings.\n"
            "**Psychological Suggestions**\n"
            "* Sensory anchors: keep a smooth stone in your pocket.\n"
            "* Try naming colors around you:\n"
            "* Focus on slow exhales.\n"
            "* Journal for five minutes.\n"
        )
        assert format_feedback(raw) == (
            "What a wonderful job noticing your surroundings.\n\n"
            "Suggestions:\n"
            "- Sensory anchors: keep a smooth stone in your pocket.\n"
            "- Try naming colors around you\n"
            "- Focus on slow exhales."
        )

    def test_format_feedback_positive_line_and_bullets(self):
        raw = "GREAT focus on the sounds today.\nTry a short walk after lunch."
        assert format_feedback(raw) == (
            "GREAT focus on the sounds today.\n\n"
            "Suggestions:\n"
            "- Try a short walk after lunch."
        )

    def test_format_feedback_fallbacks(self):
        assert format_feedback("ok.") == f"{DEFAULT_FEEDBACK}\n\nSuggestions:\n{DEFAULT_SUGGESTION}"

    @pytest.mark.asyncio
    async def test_feedback_uses_recorded_answers(self, make_oracle):
        oracle = make_oracle("That's great work.\n* Try a short walk.")
        catalog = ExerciseCatalog()
        recommender = Recommender(oracle, catalog)

        text = await recommender.feedback(catalog[1], {2: "birds", 0: "a lamp"})

        assert text.startswith("That's great work.")
        assert "- Try a short walk." in text
        assert '"a lamp\nbirds"' in oracle.prompts[0]
        assert "5-4-3-2-1 Grounding" in oracle.prompts[0]

    @pytest.mark.asyncio
    async def test_feedback_without_answers(self, make_oracle):
        oracle = make_oracle()
        assert await Recommender(oracle, ExerciseCatalog()).feedback(ExerciseCatalog()[1], {0: "  "}) is None
        assert oracle.prompts == []

    @pytest.mark.asyncio
    async def test_feedback_oracle_error(self, make_oracle):
        recommender = Recommender(make_oracle(OracleError("down")), ExerciseCatalog())
        text = await recommender.feedback(ExerciseCatalog()[1], {0: "a lamp"})
        assert text == "Sorry, there was an error getting the AI response."


class TestAffirmation:
    @pytest.mark.asyncio
    async def test_affirmation_strips_quotes(self, make_oracle):
        oracle = make_oracle('  "I am steady and safe."\n')
        text = await Recommender(oracle, ExerciseCatalog()).affirmation("nervous")
        assert text == "I am steady and safe."
        assert "feeling nervous" in oracle.prompts[0]

    @pytest.mark.asyncio
    async def test_affirmation_defaults_to_neutral(self, make_oracle):
        oracle = make_oracle("I am here.")
        await Recommender(oracle, ExerciseCatalog()).affirmation()
        assert "feeling neutral" in oracle.prompts[0]

    @pytest.mark.asyncio
    async def test_affirmation_fallback(self, make_oracle):
        recommender = Recommender(make_oracle(OracleError("down")), ExerciseCatalog())
        assert await recommender.affirmation("sad") in FALLBACK_AFFIRMATIONS


SOUNDS_REPLY = "```json\n" + json.dumps([
    {
        "section": "Ocean",
        "tracks": [
            {
                "title": "Night Surf",
                "description": "Slow waves on a quiet beach.",
                "youtube": "https://youtu.be/1ZYbU82GVz4",
            },
        ],
    },
]) + "\n```"


class TestSounds:
    @pytest.mark.asyncio
    async def test_sounds_success(self, make_oracle):
        oracle = make_oracle(SOUNDS_REPLY)

        result = await Recommender(oracle, ExerciseCatalog()).sounds("ocean waves")

        assert isinstance(result, SoundRecommendation)
        assert result.ok
        assert result.message is None
        assert [c.section for c in result.categories] == ["Ocean"]
        assert result.categories[0].tracks[0].video_id == "1ZYbU82GVz4"
        assert '"ocean waves"' in oracle.prompts[0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "reply, message",
        [
            ("Try some rain sounds!", "Failed to parse AI response. Showing default sounds."),
            ('[{"section": "Ocean", "tracks": [{"title": "Surf"}]}]',
             "Invalid sound format received from AI. Showing default sounds."),
            (OracleError("HTTP 500"), "Error loading sounds. Showing default sounds."),
        ],
    )
    async def test_sounds_fall_back_to_defaults(self, make_oracle, reply, message):
        result = await Recommender(make_oracle(reply), ExerciseCatalog()).sounds("stressed")
        assert not result.ok
        assert result.message == message
        assert result.categories == DEFAULT_SOUNDS

    @pytest.mark.asyncio
    async def test_blank_mood_skips_oracle(self, make_oracle):
        oracle = make_oracle()
        result = await Recommender(oracle, ExerciseCatalog()).sounds("  ")
        assert result.categories == DEFAULT_SOUNDS
        assert oracle.prompts == []


class TestJournal:
    @pytest.mark.asyncio
    async def test_analyze_journal(self, make_oracle):
        oracle = make_oracle("  You sound tired but hopeful.\n")

        text = await Recommender(oracle, ExerciseCatalog()).analyze_journal("Long day, but the walk helped.")

        assert text == "You sound tired but hopeful."
        assert oracle.prompts[0] == (
            "Analyze the following journal entry and provide insights:\nLong day, but the walk helped."
        )

    @pytest.mark.asyncio
    async def test_blank_entry(self, make_oracle):
        oracle = make_oracle()
        assert await Recommender(oracle, ExerciseCatalog()).analyze_journal("\n ") is None
        assert oracle.prompts == []

    @pytest.mark.asyncio
    async def test_oracle_error(self, make_oracle):
        recommender = Recommender(make_oracle(OracleError("down")), ExerciseCatalog())
        text = await recommender.analyze_journal("Today was hard.")
        assert text == "Sorry, there was an error getting the AI response."
