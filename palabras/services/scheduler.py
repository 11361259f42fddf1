import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from palabras.models.config import CONFIG
from palabras.models.schemas import SchedulingRecord, ReviewStats, utcnow, as_utc

logger = logging.getLogger(__name__)


class SpacedRepetitionScheduler:
    """
    Интервальное повторение по уровням 0..6.
    Все методы чистые: состояние передаётся и возвращается, ввода-вывода нет.
    """

    def __init__(self):
        self.intervals = CONFIG["REVIEW_INTERVALS_DAYS"]
        self.max_level = len(self.intervals) - 1
        self.streak_to_advance = CONFIG["STREAK_TO_ADVANCE"]
        self.mastered_level = CONFIG["MASTERED_LEVEL"]
        self.miss_divisor = CONFIG["MISS_INTERVAL_DIVISOR"]

    def create_record(self, item_id: str, now: Optional[datetime] = None) -> SchedulingRecord:
        """Новая запись: уровень 0, доступна для повторения сразу."""
        now = as_utc(now) if now else utcnow()
        return SchedulingRecord(
            item_id=item_id,
            level=0,
            next_due=now,
            last_seen=now,
            correct_streak=0,
            incorrect_count=0,
            total_attempts=0,
        )

    def update_record(self, record: SchedulingRecord, correct: bool,
                      now: Optional[datetime] = None) -> SchedulingRecord:
        """
        Возвращает новую запись после ответа; исходная не меняется.
        Повышение уровня требует двух правильных подряд, понижение - каждой второй ошибки.
        """
        now = as_utc(now) if now else utcnow()
        level = record.level

        if correct:
            correct_streak = record.correct_streak + 1
            incorrect_count = record.incorrect_count
            if correct_streak >= self.streak_to_advance and level < self.max_level:
                level = min(level + 1, self.max_level)
            next_due = now + timedelta(days=self.intervals[level])
        else:
            correct_streak = 0
            incorrect_count = record.incorrect_count + 1
            if incorrect_count % 2 == 0 and level > 0:
                level = max(level - 1, 0)
            # Короткая перепроверка по интервалу (возможно уже пониженного) уровня
            next_due = now + timedelta(days=max(1, self.intervals[level] // self.miss_divisor))

        return record.model_copy(update={
            "level": level,
            "next_due": next_due,
            "last_seen": now,
            "correct_streak": correct_streak,
            "incorrect_count": incorrect_count,
            "total_attempts": record.total_attempts + 1,
        })

    def select_due(self, records: Iterable[SchedulingRecord], limit: int = None,
                   now: Optional[datetime] = None) -> List[SchedulingRecord]:
        """Записи к повторению: просроченные и новые (уровень 0), сначала самые ранние."""
        now = as_utc(now) if now else utcnow()
        if limit is None:
            limit = CONFIG["SESSION_SIZE"]
        limit = max(0, limit)

        due = [r for r in records if now > r.next_due or r.level == 0]
        # sorted стабилен: при равных ключах сохраняется входной порядок
        due = sorted(due, key=lambda r: (r.next_due, r.level))
        return due[:limit]

    def compute_stats(self, records: Sequence[SchedulingRecord],
                      recent_outcomes: Sequence[bool] = ()) -> ReviewStats:
        total_reviews = sum(r.total_attempts for r in records)
        total_correct = sum(r.total_attempts - r.incorrect_count for r in records)

        accuracy = (total_correct / total_reviews) * 100 if total_reviews > 0 else 0
        if recent_outcomes:
            recent_accuracy = (sum(1 for o in recent_outcomes if o) / len(recent_outcomes)) * 100
        else:
            recent_accuracy = accuracy

        mastered_count = sum(1 for r in records if r.level >= self.mastered_level)

        return ReviewStats(
            accuracy=accuracy,
            recent_accuracy=recent_accuracy,
            total_reviews=total_reviews,
            mastered_count=mastered_count,
        )

    def format_due_label(self, next_due: datetime, now: Optional[datetime] = None) -> str:
        now = as_utc(now) if now else utcnow()
        next_due = as_utc(next_due)
        if now > next_due:
            return "Ready now"
        return f"Due {next_due:%b} {next_due.day}"
