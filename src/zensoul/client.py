"""
AsyncZenSoul / ZenSoul — main entry points.

Wires the exercise catalog, the session controller and the Gemini-backed
recommender together.
"""

import asyncio
from typing import Any, Optional, Union

from zensoul.catalog import AnyExercise, ExerciseCatalog
from zensoul.config import Settings, load_settings
from zensoul.errors import ConfigError
from zensoul.recommend import Recommendation, Recommender, SoundRecommendation
from zensoul.session import SessionController
from zensoul.timer import Scheduler
from zensoul.transport.http import GeminiClient, TextOracle


class AsyncZenSoul:
    """Async ZenSoul client (primary)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        oracle: Optional[TextOracle] = None,
        catalog: Optional[ExerciseCatalog] = None,
        settings: Optional[Settings] = None,
        loop: Optional[Scheduler] = None,
    ):
        self._settings = settings or load_settings()
        self._api_key = api_key or self._settings.gemini_api_key
        self._model = model or self._settings.gemini_model
        self._base_url = base_url or self._settings.base_url
        self._oracle = oracle
        self._owns_oracle = False

        self.catalog = catalog if catalog is not None else ExerciseCatalog()
        self.session = SessionController(
            self.catalog,
            loop=loop,
            tick_interval=self._settings.tick_interval,
            settle_delay=self._settings.settle_delay,
        )
        self._recommender: Optional[Recommender] = None

    @property
    def recommender(self) -> Recommender:
        if self._recommender is None:
            self._recommender = Recommender(self._get_oracle(), self.catalog)
        return self._recommender

    def _get_oracle(self) -> TextOracle:
        if self._oracle is None:
            if not self._api_key:
                raise ConfigError("GEMINI_API_KEY is not set. Run `zensoul config set-key` first.")
            self._oracle = GeminiClient(api_key=self._api_key, model=self._model, base_url=self._base_url)
            self._owns_oracle = True
        return self._oracle

    async def recommend(self, mood: str, switch: bool = True) -> Recommendation:
        """Fetch a custom exercise for `mood`; on success optionally make it the active one."""
        result = await self.recommender.recommend(mood)
        if result.ok and switch:
            self.session.switch_exercise(result.exercise.key)  # type: ignore[union-attr]
        return result

    async def feedback(self) -> Optional[str]:
        """Feedback on the answers recorded for the active guided exercise."""
        return await self.recommender.feedback(self.session.exercise, self.session.responses)

    async def affirmation(self, mood: Optional[str] = None) -> str:
        return await self.recommender.affirmation(mood)

    async def sounds(self, mood: str) -> SoundRecommendation:
        return await self.recommender.sounds(mood)

    async def analyze_journal(self, entry: str) -> Optional[str]:
        return await self.recommender.analyze_journal(entry)

    def switch_exercise(self, exercise: Union[str, int]) -> AnyExercise:
        return self.session.switch_exercise(exercise)

    async def close(self) -> None:
        self.session.close()
        if self._owns_oracle and isinstance(self._oracle, GeminiClient):
            await self._oracle.close()
        self._oracle = None
        self._recommender = None


class ZenSoul:
    """Sync wrapper around AsyncZenSoul. Runs the event loop internally.

    Session timers are scheduled on the wrapper's private loop and only fire
    while that loop runs, i.e. during oracle calls or `wait()`.
    """

    def __init__(self, **kwargs: Any):
        self._loop = asyncio.new_event_loop()
        kwargs.setdefault("loop", self._loop)
        self._async = AsyncZenSoul(**kwargs)

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def catalog(self) -> ExerciseCatalog:
        return self._async.catalog

    @property
    def session(self) -> SessionController:
        return self._async.session

    def recommend(self, mood: str, switch: bool = True) -> Recommendation:
        return self._run(self._async.recommend(mood, switch=switch))

    def feedback(self) -> Optional[str]:
        return self._run(self._async.feedback())

    def affirmation(self, mood: Optional[str] = None) -> str:
        return self._run(self._async.affirmation(mood))

    def sounds(self, mood: str) -> SoundRecommendation:
        return self._run(self._async.sounds(mood))

    def analyze_journal(self, entry: str) -> Optional[str]:
        return self._run(self._async.analyze_journal(entry))

    def switch_exercise(self, exercise: Union[str, int]) -> AnyExercise:
        return self._async.switch_exercise(exercise)

    def wait(self, seconds: float) -> None:
        """Let the session countdown run for `seconds` of wall-clock time."""
        self._run(asyncio.sleep(seconds))

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()
