from fastapi import APIRouter, HTTPException, Depends, status
from typing import List
import logging

from palabras.api.dependencies import get_registry, get_storage
from palabras.db.storage import MemStorage, GameSessionNotFound, UnknownWord
from palabras.models.config import VOCABULARY_CATEGORIES
from palabras.models.messages import ERROR_MESSAGES
from palabras.models.schemas import (
    CategoryProgress, PlaySession, PlaySessionCreate, PlaySessionUpdate,
    ProgressResult, ProgressUpdate, UserStats, VocabularyWord, utcnow
)
from palabras.services.answer_handler import handle_answer
from palabras.services.learner_session import LearnerRegistry

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/vocabulary", response_model=List[VocabularyWord])
async def get_vocabulary(storage: MemStorage = Depends(get_storage)):
    """Весь словарь."""
    return storage.get_vocabulary_words()


@router.get("/vocabulary/category/{category}", response_model=List[VocabularyWord])
async def get_vocabulary_by_category(category: str, storage: MemStorage = Depends(get_storage)):
    return storage.get_vocabulary_words_by_category(category)


@router.get("/categories/{user_id}", response_model=List[CategoryProgress])
async def get_categories(user_id: str, storage: MemStorage = Depends(get_storage)):
    """Категории с числом выученных слов."""
    mastered_ids = {p.word_id for p in storage.get_user_progress(user_id) if p.mastered}

    result = []
    for category in VOCABULARY_CATEGORIES:
        words = storage.get_vocabulary_words_by_category(category["id"])
        result.append(CategoryProgress(
            name=category["id"],
            title=category["name"],
            emoji=category["emoji"],
            total=len(words),
            completed=sum(1 for w in words if w.id in mastered_ids),
            words=words,
        ))
    return result


@router.post("/progress", response_model=ProgressResult)
async def update_progress(
    update: ProgressUpdate,
    storage: MemStorage = Depends(get_storage),
    registry: LearnerRegistry = Depends(get_registry),
):
    """Записывает ответ: прогресс по слову, звёзды и расписание повторения."""
    try:
        storage.require_vocabulary_word(update.word_id)
    except UnknownWord:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=ERROR_MESSAGES["unknown_word"]
        )

    try:
        previous = storage.get_user_progress_for_word(update.user_id, update.word_id)
        was_mastered = previous is not None and previous.mastered
        progress = storage.update_user_progress(update.user_id, update.word_id, update.correct)

        # Обновляем статистику ученика; выученное слово считаем один раз
        stats = storage.get_user_stats(update.user_id)
        storage.update_user_stats(
            update.user_id,
            total_stars=stats.total_stars + (1 if update.correct else 0),
            words_learned=stats.words_learned + (1 if progress.mastered and not was_mastered else 0),
            last_play_date=utcnow(),
        )

        feedback = handle_answer(registry.get(update.user_id), update.word_id, update.correct)
        return ProgressResult(progress=progress, feedback=feedback)

    except Exception as e:
        logger.error(f"Error updating progress: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=ERROR_MESSAGES["general_error"]
        )


@router.get("/stats/{user_id}", response_model=UserStats)
async def get_user_stats(user_id: str, storage: MemStorage = Depends(get_storage)):
    return storage.get_user_stats(user_id)


@router.post("/game-session", response_model=PlaySession)
async def create_game_session(session: PlaySessionCreate, storage: MemStorage = Depends(get_storage)):
    return storage.create_game_session(session)


@router.patch("/game-session/{session_id}", response_model=PlaySession)
async def update_game_session(
    session_id: str,
    updates: PlaySessionUpdate,
    storage: MemStorage = Depends(get_storage),
):
    try:
        return storage.update_game_session(session_id, updates)
    except GameSessionNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=ERROR_MESSAGES["session_not_found"]
        )
