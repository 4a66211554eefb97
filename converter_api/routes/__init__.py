from .convert import router as convert_router
from .system import router as system_router

__all__ = ["convert_router", "system_router"]
