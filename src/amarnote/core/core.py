from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, cast

from amarnote.config import Config
from amarnote.core.storage import KeyValueStore, create_store

if TYPE_CHECKING:
    from amarnote.core.modules.export.service import ExportService
    from amarnote.core.modules.history.service import HistoryService
    from amarnote.core.modules.note.service import NoteService
    from amarnote.core.modules.privacy.service import PrivacyService
    from amarnote.core.modules.task.service import TaskService
    from amarnote.core.modules.template.service import TemplateService


class Service:
    """Base class for services with direct store access."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    history: HistoryService
    note: NoteService
    task: TaskService
    privacy: PrivacyService
    template: TemplateService
    export: ExportService

    def __init__(self, store: KeyValueStore) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []
        self._store = store

        # Service configuration: (attribute_name, module_path, class_name)
        service_configs = [
            ("history", "amarnote.core.modules.history.service", "HistoryService"),
            ("note", "amarnote.core.modules.note.service", "NoteService"),
            ("task", "amarnote.core.modules.task.service", "TaskService"),
            ("privacy", "amarnote.core.modules.privacy.service", "PrivacyService"),
            ("template", "amarnote.core.modules.template.service", "TemplateService"),
            ("export", "amarnote.core.modules.export.service", "ExportService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(store)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services that have cleanup logic."""
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, the key-value store, and all service instances."""

    config: Config
    store: KeyValueStore
    services: Services

    def __init__(self, config: Config, store: KeyValueStore | None = None) -> None:
        """Initialize core with config and store, and auto-register services."""
        self.config = config
        self.store = store if store is not None else create_store(config)
        self.services = Services(self.store)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close the store."""
        await self.services.stop_all()
        await self.store.close()
