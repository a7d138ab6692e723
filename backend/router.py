from fastapi import APIRouter

# Compose modular sub-routers
from api import votes_router, judges_router, health_router


router = APIRouter()

# main.py applies `/api` prefix
router.include_router(votes_router)
router.include_router(judges_router)
router.include_router(health_router)
