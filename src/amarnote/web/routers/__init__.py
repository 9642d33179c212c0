from amarnote.web.routers.export import router as export_router
from amarnote.web.routers.history import router as history_router
from amarnote.web.routers.notes import router as notes_router
from amarnote.web.routers.privacy import router as privacy_router
from amarnote.web.routers.tasks import router as tasks_router
from amarnote.web.routers.templates import router as templates_router

__all__ = [
    "export_router",
    "history_router",
    "notes_router",
    "privacy_router",
    "tasks_router",
    "templates_router",
]
