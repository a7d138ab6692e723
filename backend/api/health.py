from fastapi import APIRouter

from models.db import get_db_path


router = APIRouter()


@router.get("/health")
def health():
    return {"ok": True, "db": get_db_path().name}
