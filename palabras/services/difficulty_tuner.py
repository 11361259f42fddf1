import logging
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence

from palabras.models.config import CONFIG, FONT_SIZE_TOKENS, DYSLEXIA_TOKEN
from palabras.models.schemas import DifficultySettings, GameSession, utcnow

logger = logging.getLogger(__name__)


class HintState(str, Enum):
    """Показ нидерландского перевода для текущего слова."""
    HIDDEN = "hidden"
    SHOWN = "shown"


class DifficultyTuner:
    """Подстраивает параметры сессии под последние ответы ученика."""

    def __init__(self):
        self.ease_window = CONFIG["EASE_WINDOW"]
        self.ease_threshold = CONFIG["EASE_ACCURACY_THRESHOLD"]
        self.escalate_window = CONFIG["ESCALATE_WINDOW"]
        self.escalate_threshold = CONFIG["ESCALATE_ACCURACY_THRESHOLD"]
        self.min_options = CONFIG["MIN_OPTIONS"]
        self.max_options = CONFIG["MAX_OPTIONS"]
        self.extra_time_factor = CONFIG["EXTRA_TIME_FACTOR"]
        self.mistakes_for_hint = CONFIG["MISTAKES_FOR_DUTCH_HINT"]

    def default_settings(self) -> DifficultySettings:
        return DifficultySettings()

    @staticmethod
    def _accuracy(outcomes: Sequence[bool]) -> float:
        return sum(1 for o in outcomes if o) / len(outcomes)

    def adjust(self, current: DifficultySettings, recent_outcomes: Sequence[bool]) -> DifficultySettings:
        """
        Облегчает сессию при точности < 70% на последних 5 ответах,
        усложняет при точности > 90% на последних 10. Иначе возвращает current.
        """
        if len(recent_outcomes) < self.ease_window:
            return current

        acc5 = self._accuracy(recent_outcomes[-self.ease_window:])
        if acc5 < self.ease_threshold:
            logger.info(f"Easing session: last-{self.ease_window} accuracy {acc5:.2f}")
            return current.model_copy(update={
                "max_options": max(self.min_options, current.max_options - 1),
                "show_hints": True,
                "extra_time": True,
            })

        if len(recent_outcomes) >= self.escalate_window:
            acc10 = self._accuracy(recent_outcomes[-self.escalate_window:])
            if acc10 > self.escalate_threshold:
                logger.info(f"Escalating session: last-{self.escalate_window} accuracy {acc10:.2f}")
                return current.model_copy(update={
                    "max_options": min(self.max_options, current.max_options + 1),
                    "show_hints": False,
                    "extra_time": False,
                })

        return current

    def should_ease(self, recent_outcomes: Sequence[bool]) -> bool:
        """Нужен ли ободряющий баннер: зависит только от последних 5 ответов."""
        if len(recent_outcomes) < self.ease_window:
            return False
        return self._accuracy(recent_outcomes[-self.ease_window:]) < self.ease_threshold

    def time_limit(self, settings: DifficultySettings, base):
        # base - число секунд или timedelta
        return base * self.extra_time_factor if settings.extra_time else base

    def font_size_token(self, settings: DifficultySettings) -> str:
        return FONT_SIZE_TOKENS.get(settings.font_size, FONT_SIZE_TOKENS["normal"])

    def dyslexia_token(self, settings: DifficultySettings) -> Optional[str]:
        return DYSLEXIA_TOKEN if settings.dyslexia_friendly else None

    # --- Попытки по текущему слову ---

    def create_session(self, word_id: str, now: Optional[datetime] = None) -> GameSession:
        return GameSession(word_id=word_id, start_time=now or utcnow())

    def update_session(self, session: GameSession, correct: bool) -> GameSession:
        if correct:
            return session.model_copy(update={
                "attempts": session.attempts + [True],
                "current_streak": session.current_streak + 1,
            })
        return session.model_copy(update={
            "attempts": session.attempts + [False],
            "current_streak": 0,
            "mistake_count": session.mistake_count + 1,
        })

    def should_show_dutch_hint(self, session: GameSession) -> bool:
        return session.mistake_count >= self.mistakes_for_hint

    def next_hint_state(self, state: HintState, session: GameSession,
                        settings: DifficultySettings, correct: bool) -> HintState:
        """
        Hidden -> Shown: вторая ошибка на слове и включён show_dutch_on_second_mistake.
        Shown -> Hidden: правильный ответ. Переход к новому слову сбрасывает в Hidden.
        """
        if correct:
            return HintState.HIDDEN
        if (state == HintState.HIDDEN
                and settings.show_dutch_on_second_mistake
                and self.should_show_dutch_hint(session)):
            return HintState.SHOWN
        return state
