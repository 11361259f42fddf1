import random
import logging
from typing import List, Optional, Sequence

from palabras.models.config import CONFIG
from palabras.models.schemas import (
    DifficultySettings, MemoryCard, QuizQuestion, VocabularyWord
)
from palabras.services.learner_session import LearnerSession

logger = logging.getLogger(__name__)


def select_session_words(session: LearnerSession, vocabulary: Sequence[VocabularyWord],
                         rng: random.Random = None, size: Optional[int] = None) -> List[VocabularyWord]:
    """Слова для сессии: очередь повторения ученика, перемешанная для показа."""
    rng = rng or random.Random()
    by_id = {w.id: w for w in vocabulary}

    batch = session.start_batch(by_id.keys(), size if size is not None else CONFIG["SESSION_SIZE"])
    words = [by_id[record.item_id] for record in batch]

    # Перемешиваем слова перед выдачей
    rng.shuffle(words)
    logger.info(f"Selected {len(words)} words for learner {session.learner_id}")
    return words


def build_quiz(words: Sequence[VocabularyWord], pool: Sequence[VocabularyWord],
               settings: DifficultySettings, rng: random.Random = None) -> List[QuizQuestion]:
    """
    Вопросы с выбором ответа. Число вариантов - settings.max_options
    (меньше, если в словаре не хватает разных переводов).
    """
    rng = rng or random.Random()
    questions = []

    for word in words:
        # Неправильные варианты из других слов, без повторов перевода
        wrong_translations = sorted({w.dutch for w in pool if w.id != word.id and w.dutch != word.dutch})
        wrong_count = min(settings.max_options - 1, len(wrong_translations))
        wrong = rng.sample(wrong_translations, wrong_count)

        # Собираем все варианты для ответа и перемешиваем
        options = [word.dutch] + wrong
        rng.shuffle(options)

        questions.append(QuizQuestion(
            word_id=word.id,
            spanish=word.spanish,
            image_url=word.image_url,
            correct_answer=word.dutch,
            options=options,
        ))

    return questions


def build_memory_deck(words: Sequence[VocabularyWord], rng: random.Random = None,
                      pairs: Optional[int] = None) -> List[MemoryCard]:
    """Колода для игры Memory: к каждому слову карточка с испанским словом и с картинкой."""
    rng = rng or random.Random()
    pairs = CONFIG["MEMORY_PAIRS"] if pairs is None else pairs

    game_words = list(words)
    rng.shuffle(game_words)

    cards = []
    for word in game_words[:max(0, pairs)]:
        cards.append(MemoryCard(id=f"spanish-{word.id}", content=word.spanish,
                                type="spanish", word_id=word.id))
        cards.append(MemoryCard(id=f"image-{word.id}", content=word.image_url or "❓",
                                type="image", word_id=word.id))

    rng.shuffle(cards)
    return cards
