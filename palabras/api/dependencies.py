from fastapi import Request

from palabras.db.storage import MemStorage
from palabras.services.learner_session import LearnerRegistry


def get_storage(request: Request) -> MemStorage:
    return request.app.state.storage


def get_registry(request: Request) -> LearnerRegistry:
    return request.app.state.registry
