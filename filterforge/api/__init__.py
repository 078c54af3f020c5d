from filterforge.api.exclusions import router as exclusions_router
from filterforge.api.health import router as health_router

__all__ = [
    "exclusions_router",
    "health_router",
]
