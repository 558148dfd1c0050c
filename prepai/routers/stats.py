from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from .. import schemas
from ..services.stats import get_deck_stats

router = APIRouter(prefix="/api", tags=["stats"])

@router.get("/stats", response_model=schemas.DeckStatsResultOut)
def stats(db: Session = Depends(get_db)):
    return schemas.DeckStatsResultOut(data=get_deck_stats(db))
