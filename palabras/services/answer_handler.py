# answer_handler.py
# Проверяет ответы ученика (квиз, произношение) и передаёт результат в сессию ученика.

import logging
import re

from palabras.models.schemas import AnswerFeedback, VocabularyWord
from palabras.services.learner_session import LearnerSession

logger = logging.getLogger(__name__)

_PUNCTUATION = re.compile(r"[.,!?]")


def is_correct_option(word: VocabularyWord, chosen: str) -> bool:
    """Выбран ли правильный нидерландский перевод."""
    return chosen.strip() == word.dutch


def is_pronunciation_match(transcript: str, target: str) -> bool:
    """Распознанная речь совпадает со словом или содержит его (и наоборот)."""
    spoken = _PUNCTUATION.sub("", transcript.lower()).strip()
    target = target.lower().strip()
    if not spoken or not target:
        return False
    return spoken == target or target in spoken or spoken in target


def handle_answer(session: LearnerSession, word_id: str, is_correct: bool) -> AnswerFeedback:
    """Обрабатывает ответ ученика и обновляет расписание и сложность."""
    logger.info(f"Handling answer for learner {session.learner_id}, word_id {word_id}, is_correct {is_correct}")

    if not word_id:
        logger.error("Invalid input: word_id is missing")
        raise ValueError("Invalid input parameters")

    feedback = session.record_answer(word_id, bool(is_correct))
    logger.info(f"Answer processed: word_id {word_id}, level {feedback.record.level}")
    return feedback
