from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional, Literal
from datetime import datetime, timezone
import uuid

FontSize = Literal["normal", "large", "extra-large"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Наивные метки времени считаем UTC (так их пишет клиент в localStorage)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CamelModel(BaseModel):
    # В JSON поля в camelCase, как у веб-клиента
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ValueModel(CamelModel):
    # Значения не меняются на месте: обновление всегда возвращает новый объект
    model_config = ConfigDict(frozen=True)


# --- Ядро: интервальное повторение и сложность ---

class SchedulingRecord(ValueModel):
    item_id: str
    level: int = Field(0, ge=0, le=6)
    next_due: datetime
    last_seen: datetime
    correct_streak: int = Field(0, ge=0)
    incorrect_count: int = Field(0, ge=0)
    total_attempts: int = Field(0, ge=0)

    @field_validator("next_due", "last_seen")
    @classmethod
    def _tz_aware(cls, value: datetime) -> datetime:
        return as_utc(value)


class ReviewStats(CamelModel):
    accuracy: float
    recent_accuracy: float
    total_reviews: int
    mastered_count: int


class DifficultySettings(ValueModel):
    max_options: int = Field(4, ge=2, le=6)
    show_hints: bool = False
    show_dutch_on_second_mistake: bool = False
    extra_time: bool = False
    font_size: FontSize = "normal"
    dyslexia_friendly: bool = False


class GameSession(ValueModel):
    """Попытки по одному слову, пока оно на экране."""
    word_id: str
    attempts: List[bool] = Field(default_factory=list)
    current_streak: int = 0
    mistake_count: int = 0
    start_time: datetime = Field(default_factory=utcnow)


class AnswerFeedback(CamelModel):
    record: SchedulingRecord
    settings: DifficultySettings
    settings_changed: bool
    show_dutch_hint: bool
    encourage: bool
    message: str = ""


# --- Словарь и прогресс ---

class VocabularyWordCreate(CamelModel):
    spanish: str
    dutch: str
    category: str
    image_url: Optional[str] = None
    audio_url: Optional[str] = None
    difficulty: int = Field(1, ge=1, le=3)


class VocabularyWord(VocabularyWordCreate):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))


class CategoryProgress(CamelModel):
    name: str
    title: str
    emoji: str
    total: int
    completed: int
    words: List[VocabularyWord]


class UserProgress(CamelModel):
    id: str
    user_id: str
    word_id: str
    times_correct: int = 0
    times_incorrect: int = 0
    last_seen: Optional[datetime] = None
    mastered: bool = False


class ProgressUpdate(CamelModel):
    user_id: str
    word_id: str
    correct: bool


class ProgressResult(CamelModel):
    progress: UserProgress
    feedback: AnswerFeedback


class UserStats(CamelModel):
    id: str
    user_id: str
    total_stars: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    words_learned: int = 0
    last_play_date: Optional[datetime] = None


class PlaySessionCreate(CamelModel):
    user_id: str
    game_type: str
    score: int = 0
    total_questions: int = 0
    correct_answers: int = 0
    completed_at: Optional[datetime] = None
    duration: int = 0


class PlaySession(PlaySessionCreate):
    id: str


class PlaySessionUpdate(CamelModel):
    score: Optional[int] = None
    total_questions: Optional[int] = None
    correct_answers: Optional[int] = None
    completed_at: Optional[datetime] = None
    duration: Optional[int] = None


# --- Игры и повторение ---

class DueItem(CamelModel):
    record: SchedulingRecord
    label: str
    word: Optional[VocabularyWord] = None


class QuizQuestion(CamelModel):
    word_id: str
    spanish: str
    image_url: Optional[str] = None
    correct_answer: str
    options: List[str]


class MemoryCard(CamelModel):
    id: str
    content: str
    type: Literal["spanish", "image"]
    word_id: str
    matched: bool = False
    flipped: bool = False


class PronunciationAttempt(CamelModel):
    word_id: str
    transcript: str


class SettingsUpdate(CamelModel):
    max_options: Optional[int] = Field(None, ge=2, le=6)
    show_hints: Optional[bool] = None
    show_dutch_on_second_mistake: Optional[bool] = None
    extra_time: Optional[bool] = None
    font_size: Optional[FontSize] = None
    dyslexia_friendly: Optional[bool] = None


class ReviewSummary(ReviewStats):
    should_ease: bool
