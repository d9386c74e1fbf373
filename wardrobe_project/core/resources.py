# wardrobe_project/core/resources.py
import logging
import threading
from typing import Any, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine

from config.settings import Settings
from ..db.database import build_engine, build_session_factory
from ..services.llm_service import build_classification_provider
from .ai_provider import ClassificationProvider
from .object_store import ObjectStore, build_object_store

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class AppResources:
    """
    Long-lived handles shared by all requests: database engine and session
    factory, classification provider and object store.

    initialize() is idempotent and thread-safe; the first caller builds the
    handles and later callers reuse them. Any handle passed to the
    constructor is used as-is instead of being built from settings.
    """

    def __init__(
        self,
        settings: Settings,
        engine: Optional[AsyncEngine] = None,
        provider: Optional[ClassificationProvider] = _UNSET,
        object_store: Optional[ObjectStore] = None,
    ):
        self.settings = settings
        self.engine = engine
        self.session_factory = None
        self.provider = None if provider is _UNSET else provider
        self.object_store = object_store
        self._provider_given = provider is not _UNSET
        self._lock = threading.Lock()
        self._initialized = False

    def initialize(self) -> "AppResources":
        with self._lock:
            if self._initialized:
                return self
            if self.engine is None:
                self.engine = build_engine(self.settings.DATABASE_URL)
            self.session_factory = build_session_factory(self.engine)
            if not self._provider_given:
                self.provider = build_classification_provider(self.settings)
            if self.object_store is None:
                self.object_store = build_object_store(self.settings)
            self._initialized = True
            logger.info("Application resources initialized.")
        return self


def get_resources(request: Request) -> AppResources:
    return request.app.state.resources


def get_provider(request: Request) -> Optional[ClassificationProvider]:
    return get_resources(request).provider


def get_object_store(request: Request) -> ObjectStore:
    return get_resources(request).object_store
