from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
import logging

# Импорт модулей приложения
from palabras.api.review import router as review_router
from palabras.api.words import router as words_router
from palabras.db.blob_store import BlobStore, InMemoryBlobStore, JsonFileBlobStore
from palabras.db.storage import MemStorage
from palabras.models.config import DATA_DIR, LOG_LEVEL
from palabras.services.learner_session import LearnerRegistry

# Настройка логирования
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app(storage: MemStorage = None, store: BlobStore = None) -> FastAPI:
    """Создаёт приложение; хранилища можно подменить в тестах."""
    app = FastAPI(
        title="Palabras",
        description="Spaans leren voor kinderen",
        version="1.0.0"
    )

    # CORS настройки для веб-клиента
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if store is None:
        store = JsonFileBlobStore(DATA_DIR) if DATA_DIR else InMemoryBlobStore()
    app.state.storage = storage if storage is not None else MemStorage()
    app.state.registry = LearnerRegistry(store)
    logger.info(f"Using {type(store).__name__} for learner state")

    # Подключение роутеров API
    app.include_router(words_router, prefix="/api", tags=["words"])
    app.include_router(review_router, prefix="/api", tags=["review"])

    return app


app = create_app()

# Запуск приложения (для отладки)
if __name__ == "__main__":
    uvicorn.run("palabras.main:app", host="0.0.0.0", port=8000, reload=True)
