"""HTTP API routers."""

from .errors import register_exception_handlers
from .llama import router as llama_router
from .settings import router as settings_router
from .users import router as users_router

__all__ = ["register_exception_handlers", "llama_router", "settings_router", "users_router"]
