import json
import logging
import uuid
from pathlib import Path
from typing import Dict, List, Optional

from palabras.models.config import CONFIG
from palabras.models.schemas import (
    VocabularyWord, VocabularyWordCreate, UserProgress, UserStats,
    PlaySession, PlaySessionCreate, PlaySessionUpdate, utcnow
)

logger = logging.getLogger(__name__)

VOCAB_PATH = Path(__file__).resolve().parent.parent / "data" / "spanish_vocab.json"

# Запасной словарь, если JSON не загрузился
FALLBACK_WORDS = [
    {"spanish": "hola", "dutch": "hallo", "category": "greetings", "image_url": "👋"},
    {"spanish": "adiós", "dutch": "doei", "category": "greetings", "image_url": "👋"},
    {"spanish": "perro", "dutch": "hond", "category": "animals", "image_url": "🐕"},
    {"spanish": "gato", "dutch": "kat", "category": "animals", "image_url": "🐱"},
    {"spanish": "rojo", "dutch": "rood", "category": "colors", "image_url": "🔴"},
    {"spanish": "azul", "dutch": "blauw", "category": "colors", "image_url": "🔵"},
]


class GameSessionNotFound(LookupError):
    pass


class UnknownWord(LookupError):
    pass


def word_id_for(category: str, spanish: str) -> str:
    """Постоянный id слова: записи повторения переживают перезапуск."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"palabras:{category}:{spanish}"))


def get_difficulty_level(spanish: str, item_type: str) -> int:
    """Сложность слова: фразы - 3, иначе по длине."""
    if item_type == "phrase":
        return 3
    if len(spanish) <= 4:
        return 1
    if len(spanish) <= 7:
        return 2
    return 3


class MemStorage:
    """Хранилище в памяти процесса: словарь, прогресс, игровые сессии, статистика."""

    def __init__(self, vocab_path: Optional[Path] = VOCAB_PATH):
        self.vocabulary_words: Dict[str, VocabularyWord] = {}
        self.user_progress: Dict[str, UserProgress] = {}
        self.game_sessions: Dict[str, PlaySession] = {}
        self.user_stats: Dict[str, UserStats] = {}

        self._initialize_vocabulary(vocab_path)

    def _initialize_vocabulary(self, vocab_path: Optional[Path]) -> None:
        try:
            vocab_data = json.loads(Path(vocab_path).read_text(encoding="utf-8"))
            for theme in vocab_data["themes"]:
                for item in theme["items"]:
                    self.create_vocabulary_word(VocabularyWordCreate(
                        spanish=item["es"],
                        dutch=item["nl"],
                        category=theme["id"],
                        image_url=item.get("img"),
                        audio_url=item.get("audio"),
                        difficulty=get_difficulty_level(item["es"], item.get("type", "word")),
                    ))
            logger.info(f"Loaded {len(self.vocabulary_words)} vocabulary words")
        except Exception as e:
            logger.error(f"Failed to load vocabulary data, using fallback: {e}")
            self.vocabulary_words.clear()
            for word in FALLBACK_WORDS:
                self.create_vocabulary_word(VocabularyWordCreate(**word, difficulty=1))

    # Словарь

    def get_vocabulary_words(self) -> List[VocabularyWord]:
        return list(self.vocabulary_words.values())

    def get_vocabulary_words_by_category(self, category: str) -> List[VocabularyWord]:
        return [w for w in self.vocabulary_words.values() if w.category == category]

    def get_vocabulary_word(self, word_id: str) -> Optional[VocabularyWord]:
        return self.vocabulary_words.get(word_id)

    def require_vocabulary_word(self, word_id: str) -> VocabularyWord:
        word = self.vocabulary_words.get(word_id)
        if word is None:
            raise UnknownWord(word_id)
        return word

    def create_vocabulary_word(self, word: VocabularyWordCreate) -> VocabularyWord:
        created = VocabularyWord(id=word_id_for(word.category, word.spanish), **word.model_dump())
        self.vocabulary_words[created.id] = created
        return created

    def get_categories(self) -> List[str]:
        # Уникальные категории в порядке появления
        return list(dict.fromkeys(w.category for w in self.vocabulary_words.values()))

    # Прогресс

    def get_user_progress(self, user_id: str) -> List[UserProgress]:
        return [p for p in self.user_progress.values() if p.user_id == user_id]

    def get_user_progress_for_word(self, user_id: str, word_id: str) -> Optional[UserProgress]:
        for progress in self.user_progress.values():
            if progress.user_id == user_id and progress.word_id == word_id:
                return progress
        return None

    def update_user_progress(self, user_id: str, word_id: str, correct: bool) -> UserProgress:
        existing = self.get_user_progress_for_word(user_id, word_id)

        if existing:
            times_correct = existing.times_correct + (1 if correct else 0)
            progress = existing.model_copy(update={
                "times_correct": times_correct,
                "times_incorrect": existing.times_incorrect + (0 if correct else 1),
                "last_seen": utcnow(),
                "mastered": times_correct >= CONFIG["MASTERED_PROGRESS_CORRECT"],
            })
        else:
            progress = UserProgress(
                id=str(uuid.uuid4()),
                user_id=user_id,
                word_id=word_id,
                times_correct=1 if correct else 0,
                times_incorrect=0 if correct else 1,
                last_seen=utcnow(),
                mastered=False,
            )
        self.user_progress[progress.id] = progress
        return progress

    # Игровые сессии

    def create_game_session(self, session: PlaySessionCreate) -> PlaySession:
        created = PlaySession(id=str(uuid.uuid4()), **session.model_dump())
        self.game_sessions[created.id] = created
        return created

    def get_game_sessions(self, user_id: str) -> List[PlaySession]:
        return [s for s in self.game_sessions.values() if s.user_id == user_id]

    def update_game_session(self, session_id: str, updates: PlaySessionUpdate) -> PlaySession:
        existing = self.game_sessions.get(session_id)
        if not existing:
            raise GameSessionNotFound(session_id)
        updated = existing.model_copy(update=updates.model_dump(exclude_none=True))
        self.game_sessions[session_id] = updated
        return updated

    # Статистика

    def get_user_stats(self, user_id: str) -> UserStats:
        for stats in self.user_stats.values():
            if stats.user_id == user_id:
                return stats

        stats = UserStats(id=str(uuid.uuid4()), user_id=user_id, last_play_date=utcnow())
        self.user_stats[stats.id] = stats
        return stats

    def update_user_stats(self, user_id: str, **updates) -> UserStats:
        existing = self.get_user_stats(user_id)
        updated = existing.model_copy(update=updates)
        self.user_stats[existing.id] = updated
        return updated
