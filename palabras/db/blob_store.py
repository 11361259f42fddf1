import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol
from urllib.parse import quote

from pydantic import ValidationError

from palabras.models.schemas import DifficultySettings, SchedulingRecord

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    """Хранилище ключ-значение для непрозрачных JSON-строк (аналог localStorage)."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryBlobStore:
    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileBlobStore:
    """Один файл на ключ в каталоге data_dir; запись атомарная."""

    def __init__(self, data_dir):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        # Разные ключи - разные файлы
        safe = quote(key, safe="")
        return self.data_dir / f"{safe}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        fd, tmp = tempfile.mkstemp(dir=self.data_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp, path)
        except Exception:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise


class _Repository:
    suffix = ""

    def __init__(self, store: BlobStore, learner_id: str):
        self.store = store
        self.learner_id = learner_id
        self.key = f"{learner_id}:{self.suffix}"

    def _read(self):
        """Сырые данные или None, если ключа нет либо JSON битый."""
        try:
            raw = self.store.get(self.key)
            if raw is None:
                return None
            return json.loads(raw)
        except Exception as e:
            logger.warning(f"Failed to read {self.key}: {e}")
            return None

    def _write(self, data) -> None:
        # Ошибка записи не должна доходить до вызывающего кода
        try:
            self.store.set(self.key, json.dumps(data, ensure_ascii=False))
        except Exception as e:
            logger.warning(f"Failed to save {self.key}: {e}")


class SettingsRepository(_Repository):
    suffix = "settings"

    def load(self) -> DifficultySettings:
        """Сохранённые настройки поверх значений по умолчанию."""
        saved = self._read()
        defaults = DifficultySettings()
        if saved is None:
            return defaults
        if not isinstance(saved, dict):
            logger.warning(f"Ignoring malformed settings for {self.learner_id}")
            return defaults
        try:
            return DifficultySettings.model_validate({**defaults.model_dump(by_alias=True), **saved})
        except ValidationError as e:
            logger.warning(f"Invalid settings for {self.learner_id}, using defaults: {e}")
            return defaults

    def save(self, settings: DifficultySettings) -> None:
        self._write(settings.model_dump(mode="json", by_alias=True))


class RecordRepository(_Repository):
    suffix = "items"

    def load(self) -> Dict[str, SchedulingRecord]:
        saved = self._read()
        if not isinstance(saved, dict):
            if saved is not None:
                logger.warning(f"Ignoring malformed records for {self.learner_id}")
            return {}

        records = {}
        for item_id, raw in saved.items():
            try:
                record = SchedulingRecord.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"Skipping malformed record {item_id}: {e}")
                continue
            records[record.item_id] = record
        return records

    def save(self, records: Dict[str, SchedulingRecord]) -> None:
        self._write({
            item_id: record.model_dump(mode="json", by_alias=True)
            for item_id, record in records.items()
        })


class OutcomeRepository(_Repository):
    suffix = "outcomes"

    def load(self) -> List[bool]:
        saved = self._read()
        if not isinstance(saved, list) or not all(isinstance(o, bool) for o in saved):
            if saved is not None:
                logger.warning(f"Ignoring malformed outcomes for {self.learner_id}")
            return []
        return saved

    def save(self, outcomes: List[bool]) -> None:
        self._write(list(outcomes))
