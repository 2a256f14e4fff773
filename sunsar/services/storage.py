"""
Storage Service

Per-player key-value storage standing in for the browser's localStorage.
Values are JSON text. ``set_many`` writes several keys as one unit, which the
stats tracker relies on to keep the stats and their update marker together.
"""

import hashlib
import json
import os
import tempfile
import threading
from typing import Dict, Mapping, Optional

from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..utils.game_logger import game_logger

GAME_STATE_KEY = 'gameState'
GAME_STATS_KEY = 'gameStats'
LAST_STAT_UPDATE_KEY = 'lastStatUpdate'


class KeyValueStorage:
    """Interface for one player's storage namespace."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, values: Mapping[str, str]) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    """Dictionary-backed storage for tests and development."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_many(self, values: Mapping[str, str]) -> None:
        self.data.update(values)

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStorage(KeyValueStorage):
    """
    One JSON document per player on disk.

    Every write replaces the whole file through a temp file and
    ``os.replace``, so a crash leaves either the old or the new document.
    """

    _lock = threading.Lock()

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            game_logger.log_error(None, e, 'storage_read')
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path) or '.'
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_many(self, values: Mapping[str, str]) -> None:
        with self._lock:
            data = self._read()
            data.update(values)
            self._write(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)


class MongoStorage(KeyValueStorage):
    """
    One MongoDB document per player; each storage key is a field.

    ``set_many`` is a single ``$set`` update and so atomic per document.
    """

    def __init__(self, collection, player_id: str):
        self.collection = collection
        self.player_id = player_id

    def get(self, key: str) -> Optional[str]:
        document = self.collection.find_one({'_id': self.player_id}, {key: 1})
        if not document:
            return None
        value = document.get(key)
        return value if isinstance(value, str) else None

    def set_many(self, values: Mapping[str, str]) -> None:
        self.collection.update_one({'_id': self.player_id}, {'$set': dict(values)}, upsert=True)

    def remove(self, key: str) -> None:
        self.collection.update_one({'_id': self.player_id}, {'$unset': {key: ''}})


class StorageFactory:
    """Hands out a storage namespace per player according to configuration."""

    def __init__(self, backend: str = 'memory', storage_dir: str = 'data/players',
                 mongo_uri: Optional[str] = None, mongo_db: str = 'sunsar', collection=None):
        if backend not in ('memory', 'file', 'mongo'):
            raise ValueError(f"Unknown storage backend: {backend}")
        self.backend = backend
        self.storage_dir = storage_dir
        self._memory: Dict[str, MemoryStorage] = {}
        self._collection = collection

        if backend == 'mongo' and self._collection is None:
            if not mongo_uri:
                raise ValueError("MONGO_URI is required for the mongo storage backend")
            client = MongoClient(mongo_uri, server_api=ServerApi('1'))
            self._collection = client[mongo_db].players

    @classmethod
    def from_config(cls, config) -> "StorageFactory":
        return cls(
            backend=config.STORAGE_BACKEND,
            storage_dir=config.STORAGE_DIR,
            mongo_uri=config.MONGO_URI,
            mongo_db=config.MONGO_DB,
        )

    def for_player(self, player_id: str) -> KeyValueStorage:
        if self.backend == 'memory':
            return self._memory.setdefault(player_id, MemoryStorage())
        if self.backend == 'file':
            # Hash the id so arbitrary client-supplied ids are safe file names
            digest = hashlib.sha256(player_id.encode('utf-8')).hexdigest()
            return JsonFileStorage(os.path.join(self.storage_dir, f"{digest}.json"))
        return MongoStorage(self._collection, player_id)
