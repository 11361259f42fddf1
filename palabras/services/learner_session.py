import logging
from typing import Dict, Iterable, List, Optional

from palabras.db.blob_store import (
    BlobStore, InMemoryBlobStore, SettingsRepository, RecordRepository, OutcomeRepository
)
from palabras.models.messages import SUCCESS_MESSAGES, RESULT_MESSAGES
from palabras.models.schemas import (
    AnswerFeedback, DifficultySettings, GameSession, ReviewStats, SchedulingRecord
)
from palabras.services.difficulty_tuner import DifficultyTuner, HintState
from palabras.services.scheduler import SpacedRepetitionScheduler

logger = logging.getLogger(__name__)


class LearnerSession:
    """
    Состояние одного ученика: записи повторения, окно ответов, настройки
    и попытки по текущему слову. Планировщик и тюнер друг о друге не знают;
    этот класс передаёт каждый ответ обоим и сохраняет результат.
    """

    def __init__(self, learner_id: str, store: BlobStore,
                 scheduler: SpacedRepetitionScheduler = None, tuner: DifficultyTuner = None):
        self.learner_id = learner_id
        self.scheduler = scheduler or SpacedRepetitionScheduler()
        self.tuner = tuner or DifficultyTuner()

        self._settings_repo = SettingsRepository(store, learner_id)
        self._records_repo = RecordRepository(store, learner_id)
        self._outcomes_repo = OutcomeRepository(store, learner_id)

        self.settings: DifficultySettings = self._settings_repo.load()
        self.records: Dict[str, SchedulingRecord] = self._records_repo.load()
        self.outcomes: List[bool] = self._outcomes_repo.load()

        self.current: Optional[GameSession] = None
        self.hint_state = HintState.HIDDEN

    def _record_for(self, item_id: str) -> SchedulingRecord:
        record = self.records.get(item_id)
        if record is None:
            record = self.scheduler.create_record(item_id)
            self.records[item_id] = record
        return record

    def start_batch(self, item_ids: Iterable[str], limit: int = None) -> List[SchedulingRecord]:
        """Записи к повторению среди известных слов; новые слова получают запись лениво."""
        known = list(dict.fromkeys(item_ids))
        for item_id in known:
            self._record_for(item_id)

        # Записи удалённых из словаря слов не выдаём
        known_set = set(known)
        candidates = [r for r in self.records.values() if r.item_id in known_set]
        batch = self.scheduler.select_due(candidates, limit)
        logger.info(f"Learner {self.learner_id}: {len(batch)} of {len(candidates)} items due")
        return batch

    def begin_item(self, item_id: str) -> GameSession:
        self.current = self.tuner.create_session(item_id)
        self.hint_state = HintState.HIDDEN
        return self.current

    def record_answer(self, item_id: str, correct: bool) -> AnswerFeedback:
        record = self.scheduler.update_record(self._record_for(item_id), correct)
        self.records[item_id] = record

        self.outcomes.append(correct)
        previous = self.settings
        self.settings = self.tuner.adjust(previous, self.outcomes)

        if self.current is None or self.current.word_id != item_id:
            self.begin_item(item_id)
        self.current = self.tuner.update_session(self.current, correct)
        self.hint_state = self.tuner.next_hint_state(
            self.hint_state, self.current, self.settings, correct
        )

        settings_changed = self.settings != previous
        self._persist(settings_changed)

        encourage = self.tuner.should_ease(self.outcomes)
        if correct:
            message = SUCCESS_MESSAGES["correct_answer"]
        elif encourage:
            message = RESULT_MESSAGES["encourage"]
        else:
            message = ""

        return AnswerFeedback(
            record=record,
            settings=self.settings,
            settings_changed=settings_changed,
            show_dutch_hint=self.hint_state == HintState.SHOWN,
            encourage=encourage,
            message=message,
        )

    def stats(self) -> ReviewStats:
        window = self.outcomes[-self.tuner.ease_window:]
        return self.scheduler.compute_stats(list(self.records.values()), window)

    def update_settings(self, **changes) -> DifficultySettings:
        changes = {k: v for k, v in changes.items() if v is not None}
        self.settings = DifficultySettings.model_validate(
            {**self.settings.model_dump(), **changes}
        )
        self._settings_repo.save(self.settings)
        return self.settings

    def _persist(self, settings_changed: bool) -> None:
        self._records_repo.save(self.records)
        self._outcomes_repo.save(self.outcomes)
        if settings_changed:
            self._settings_repo.save(self.settings)


class LearnerRegistry:
    """По одной LearnerSession на ученика; данные разных учеников не пересекаются."""

    def __init__(self, store: BlobStore = None):
        self.store = store if store is not None else InMemoryBlobStore()
        self._sessions: Dict[str, LearnerSession] = {}

    def get(self, learner_id: str) -> LearnerSession:
        session = self._sessions.get(learner_id)
        if session is None:
            session = LearnerSession(learner_id, self.store)
            self._sessions[learner_id] = session
        return session
