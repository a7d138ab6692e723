# Subrouters are imported and re-exported for convenience
from .votes import router as votes_router  # noqa: F401
from .judges import router as judges_router  # noqa: F401
from .health import router as health_router  # noqa: F401

__all__ = [
    "votes_router",
    "judges_router",
    "health_router",
]
