"""
Recommendations — ask the oracle for new exercises, feedback, affirmations,
relaxing sounds and journal insights.

Every oracle failure or garbled reply ends up as a short user-facing message;
nothing here raises for bad oracle output, and the catalog only grows when a
reply validates.
"""

import logging
import random
from typing import Optional

from zensoul.catalog import BUILTIN_TITLES, AnyExercise, ExerciseCatalog
from zensoul.errors import OracleError
from zensoul.models.exercise import ExerciseCategory
from zensoul.models.sound import SoundCategory
from zensoul.sounds import DEFAULT_SOUNDS, parse_sounds
from zensoul.transport.http import TextOracle

logger = logging.getLogger(__name__)

CATEGORY_ROTATION = ExerciseCategory.ALL

# (mood keywords, rotated category, replacement). First matching keyword group wins.
MOOD_SUBSTITUTIONS = (
    (("sad", "stressed"), ExerciseCategory.VISUALIZATION, ExerciseCategory.MINDFULNESS),
    (("anxious", "restless"), ExerciseCategory.BREATHING, ExerciseCategory.GROUNDING),
    (("tense", "tight"), ExerciseCategory.BREATHING, ExerciseCategory.MINDFULNESS),
    (("scared", "afraid"), ExerciseCategory.BREATHING, ExerciseCategory.VISUALIZATION),
)

FALLBACK_AFFIRMATIONS = (
    "I am stronger than I know and capable of handling whatever comes my way.",
    "I deserve peace, happiness, and all the good things life has to offer.",
    "Every breath I take fills me with calm and centers my mind.",
    "I trust myself to make choices that honor my wellbeing.",
    "I am worthy of love, respect, and compassion - especially from myself.",
)

DEFAULT_FEEDBACK = "Great job with your exercise!"
DEFAULT_SUGGESTION = "- Try a calming activity like deep breathing."
_POSITIVE_WORDS = ("wonderful", "great", "fantastic")
_SUGGESTION_WORDS = ("suggest", "try", "focus")
_FEEDBACK_HEADERS = ("**Positive Feedback**", "**Psychological Suggestions**")


class Recommendation:
    __slots__ = ("exercise", "message", "category")

    def __init__(self, category: str, message: str, exercise: Optional[AnyExercise] = None):
        self.category = category
        self.message = message
        self.exercise = exercise

    @property
    def ok(self) -> bool:
        return self.exercise is not None

    def __repr__(self) -> str:
        key = self.exercise.key if self.exercise else None
        return f"Recommendation(category={self.category!r}, exercise={key!r})"


class SoundRecommendation:
    """Sound categories to show. Falls back to `DEFAULT_SOUNDS` with a message when the oracle fails."""

    __slots__ = ("categories", "message")

    def __init__(self, categories: tuple[SoundCategory, ...], message: Optional[str] = None):
        self.categories = categories
        self.message = message

    @property
    def ok(self) -> bool:
        return self.message is None

    def __repr__(self) -> str:
        return f"SoundRecommendation(sections={len(self.categories)}, message={self.message!r})"


def choose_category(mood: str, rotation_index: int) -> str:
    """Rotate through categories, nudged away from poor fits for the described mood."""
    preferred = CATEGORY_ROTATION[rotation_index % len(CATEGORY_ROTATION)]
    mood_lower = mood.lower()
    for keywords, rotated, replacement in MOOD_SUBSTITUTIONS:
        if any(word in mood_lower for word in keywords):
            return replacement if preferred == rotated else preferred
    return preferred


def build_exercise_prompt(mood: str, category: str, avoid_titles: tuple[str, ...]) -> str:
    avoid = " and ".join(f'"{t}"' for t in avoid_titles)
    return (
        f'Based on the user\'s feeling: "{mood}". Suggest a unique anxiety relief exercise of type '
        f'"{category}", different from {avoid}. For breathing, each step must include label, '
        f'seconds (number), instruction, scale (number like 1.3), color (hex like "#6ee7b7"). '
        f"For others, each step must include label, instruction, prompt. Include a short tip "
        f"(50 characters or less). Respond strictly with a JSON object: "
        f'{{"key": "custom", "type": "{category}", "title": "Title here", "description": '
        f'"Description here", "steps": [array of step objects], "note": "Optional note", '
        f'"tips": "Short tip"}}'
    )


def build_feedback_prompt(exercise: AnyExercise, responses: list[str]) -> str:
    joined = "\n".join(responses)
    return (
        f'Analyze the user\'s responses in the "{exercise.title}" exercise: "{joined}". '
        f"Provide concise positive feedback and 2-3 psychological suggestions for anxiety relief "
        f"based on their input. For visualization exercises, suggest alternatives (e.g., sensory "
        f"anchors, daily integrations) for when the user can't access their peaceful place. "
        f"Return plain text with one positive feedback sentence and bullet points for suggestions."
    )


def build_affirmation_prompt(mood: Optional[str]) -> str:
    return (
        f"Generate a personalized, uplifting affirmation for someone who might be feeling "
        f"{mood or 'neutral'}.\n"
        "Make it personal, positive, and empowering.\n\n"
        "Guidelines:\n"
        '- Use "I am" or "I" statements\n'
        "- Focus on inner strength and self-worth\n"
        "- Be specific to the mood if provided\n"
        "- Keep it under 25 words\n"
        "- Make it feel genuine and meaningful\n"
        "- Avoid clichés\n\n"
        "Return only the affirmation text, no quotes or extra formatting."
    )


def build_sounds_prompt(mood: str) -> str:
    return (
        f'Based on the user\'s input: "{mood}". Suggest a curated list of relaxing sound categories '
        f"and tracks to help with relaxation, focus, or sleep. Each category should have a section "
        f"name and a list of tracks, where each track includes a title, description, and a valid "
        f"YouTube URL. Respond strictly with a JSON array, no other text or explanations: "
        f'[{{"section": "Category name", "tracks": [{{"title": "Track title", '
        f'"description": "Track description", "youtube": "Valid YouTube URL"}}]}}]'
    )


def build_journal_prompt(entry: str) -> str:
    return f"Analyze the following journal entry and provide insights:\n{entry}"


def format_feedback(raw: str) -> str:
    """Condense free-form feedback into one positive line plus up to three bullets."""
    lines = [
        line.strip() for line in raw.splitlines()
        if line.strip() and not any(h in line for h in _FEEDBACK_HEADERS)
    ]
    positive = next(
        (line for line in lines if any(w in line.lower() for w in _POSITIVE_WORDS)),
        DEFAULT_FEEDBACK,
    )
    suggestions = []
    for line in lines:
        if line == positive:
            continue
        if line.startswith("*") or any(w in line.lower() for w in _SUGGESTION_WORDS):
            text = line.lstrip("*").strip().rstrip(":").rstrip()
            suggestions.append(f"- {text}")
        if len(suggestions) == 3:
            break
    return f"{positive}\n\nSuggestions:\n" + ("\n".join(suggestions) or DEFAULT_SUGGESTION)


class Recommender:
    def __init__(self, oracle: TextOracle, catalog: ExerciseCatalog):
        self._oracle = oracle
        self._catalog = catalog
        self._rotation = 0

    @property
    def rotation_index(self) -> int:
        return self._rotation

    async def recommend(self, mood: str) -> Recommendation:
        """Ask for a new exercise matching `mood` and append it to the catalog on success."""
        category = choose_category(mood, self._rotation)
        if not mood.strip():
            return Recommendation(category, "Describe how you are feeling first.")

        avoid = tuple(sorted(BUILTIN_TITLES))
        try:
            reply = await self._oracle.generate(build_exercise_prompt(mood.strip(), category, avoid))
        except OracleError as e:
            logger.warning("Exercise recommendation failed: %s", e)
            return Recommendation(category, "Error loading exercise. Please try again.")

        result = self._catalog.add(reply)
        if not result.ok:
            return Recommendation(category, "Invalid exercise format. Try again.")

        self._rotation += 1
        exercise = result.exercise
        message = exercise.tips or f"Try {exercise.title}."  # type: ignore[union-attr]
        return Recommendation(category, message, exercise)

    async def feedback(self, exercise: AnyExercise, responses: dict[int, str]) -> Optional[str]:
        """Feedback on guided-exercise answers. None when there is nothing to analyze."""
        answers = [responses[i] for i in sorted(responses) if responses[i].strip()]
        if not answers:
            return None
        try:
            reply = await self._oracle.generate(build_feedback_prompt(exercise, answers))
        except OracleError as e:
            logger.warning("Feedback request failed: %s", e)
            return "Sorry, there was an error getting the AI response."
        return format_feedback(reply)

    async def affirmation(self, mood: Optional[str] = None) -> str:
        try:
            reply = await self._oracle.generate(build_affirmation_prompt(mood))
        except OracleError as e:
            logger.warning("Affirmation request failed: %s", e)
            return random.choice(FALLBACK_AFFIRMATIONS)
        return reply.strip().strip('"').strip()

    async def sounds(self, mood: str) -> SoundRecommendation:
        """Relaxing sound categories for `mood`, or the defaults with a message explaining why."""
        if not mood.strip():
            return SoundRecommendation(DEFAULT_SOUNDS, "Describe the sounds or mood you want first.")
        try:
            reply = await self._oracle.generate(build_sounds_prompt(mood.strip()))
        except OracleError as e:
            logger.warning("Sound recommendation failed: %s", e)
            return SoundRecommendation(DEFAULT_SOUNDS, "Error loading sounds. Showing default sounds.")

        result = parse_sounds(reply)
        if not result.ok:
            logger.info("Rejected sound payload: %s", result.reason)
            if not result.decoded:
                return SoundRecommendation(DEFAULT_SOUNDS, "Failed to parse AI response. Showing default sounds.")
            return SoundRecommendation(DEFAULT_SOUNDS, "Invalid sound format received from AI. Showing default sounds.")
        return SoundRecommendation(result.categories)  # type: ignore[arg-type]

    async def analyze_journal(self, entry: str) -> Optional[str]:
        """Insights on a journal entry. None when the entry is blank."""
        if not entry.strip():
            return None
        try:
            reply = await self._oracle.generate(build_journal_prompt(entry.strip()))
        except OracleError as e:
            logger.warning("Journal analysis failed: %s", e)
            return "Sorry, there was an error getting the AI response."
        return reply.strip()
