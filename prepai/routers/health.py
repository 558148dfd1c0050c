from fastapi import APIRouter

from .. import schemas
from ..utils.time import iso_timestamp

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=schemas.HealthOut)
def health():
    return schemas.HealthOut(message="Prep.ai Backend is running", timestamp=iso_timestamp())
