from fastapi import APIRouter, HTTPException, Depends, Query, status
from typing import List, Optional
import logging

from palabras.api.dependencies import get_registry, get_storage
from palabras.db.storage import MemStorage, UnknownWord
from palabras.models.messages import ERROR_MESSAGES
from palabras.models.schemas import (
    AnswerFeedback, DifficultySettings, DueItem, MemoryCard, PronunciationAttempt,
    QuizQuestion, ReviewSummary, SettingsUpdate
)
from palabras.services.answer_handler import handle_answer, is_pronunciation_match
from palabras.services.learner_session import LearnerRegistry
from palabras.services.picker import build_memory_deck, build_quiz, select_session_words

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/review/{user_id}/due", response_model=List[DueItem])
async def get_due_items(
    user_id: str,
    limit: Optional[int] = Query(None),
    storage: MemStorage = Depends(get_storage),
    registry: LearnerRegistry = Depends(get_registry),
):
    """Очередь повторения ученика с подписью срока."""
    session = registry.get(user_id)
    words = {w.id: w for w in storage.get_vocabulary_words()}
    batch = session.start_batch(words.keys(), limit)

    return [
        DueItem(
            record=record,
            label=session.scheduler.format_due_label(record.next_due),
            word=words.get(record.item_id),
        )
        for record in batch
    ]


@router.get("/review/{user_id}/quiz", response_model=List[QuizQuestion])
async def get_quiz(
    user_id: str,
    storage: MemStorage = Depends(get_storage),
    registry: LearnerRegistry = Depends(get_registry),
):
    session = registry.get(user_id)
    vocabulary = storage.get_vocabulary_words()
    words = select_session_words(session, vocabulary)

    if not words:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=ERROR_MESSAGES["no_words"]
        )

    logger.info(f"Quiz for learner {user_id}: {len(words)} questions, {session.settings.max_options} options")
    return build_quiz(words, vocabulary, session.settings)


@router.get("/review/{user_id}/memory", response_model=List[MemoryCard])
async def get_memory_deck(
    user_id: str,
    storage: MemStorage = Depends(get_storage),
    registry: LearnerRegistry = Depends(get_registry),
):
    session = registry.get(user_id)
    words = select_session_words(session, storage.get_vocabulary_words())
    return build_memory_deck(words)


@router.post("/review/{user_id}/pronunciation", response_model=AnswerFeedback)
async def submit_pronunciation(
    user_id: str,
    attempt: PronunciationAttempt,
    storage: MemStorage = Depends(get_storage),
    registry: LearnerRegistry = Depends(get_registry),
):
    """Сравнивает распознанную речь со словом и записывает результат."""
    try:
        word = storage.require_vocabulary_word(attempt.word_id)
    except UnknownWord:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=ERROR_MESSAGES["unknown_word"]
        )

    try:
        is_correct = is_pronunciation_match(attempt.transcript, word.spanish)
        storage.update_user_progress(user_id, word.id, is_correct)
        return handle_answer(registry.get(user_id), word.id, is_correct)
    except Exception as e:
        logger.error(f"Error submitting pronunciation: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=ERROR_MESSAGES["general_error"]
        )


@router.get("/review/{user_id}/stats", response_model=ReviewSummary)
async def get_review_stats(user_id: str, registry: LearnerRegistry = Depends(get_registry)):
    session = registry.get(user_id)
    stats = session.stats()
    return ReviewSummary(
        **stats.model_dump(),
        should_ease=session.tuner.should_ease(session.outcomes),
    )


@router.get("/settings/{user_id}", response_model=DifficultySettings)
async def get_settings(user_id: str, registry: LearnerRegistry = Depends(get_registry)):
    return registry.get(user_id).settings


@router.put("/settings/{user_id}", response_model=DifficultySettings)
async def update_settings(
    user_id: str,
    changes: SettingsUpdate,
    registry: LearnerRegistry = Depends(get_registry),
):
    """Явный выбор ученика или родителя: шрифт, дислексия, подсказки."""
    return registry.get(user_id).update_settings(**changes.model_dump())
