from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..database import get_db
from .. import crud, schemas
from ..deps import get_ai_client
from ..errors import InvalidInput, NotFound
from ..services import generation
from ..services.ai_client import GeminiClient
from ..services.validation import is_valid_progress


router = APIRouter(prefix="/api", tags=["decks"])


def parse_deck_id(raw: str) -> str:
    try:
        return UUID(raw).hex
    except ValueError:
        raise InvalidInput("Invalid deck ID")


@router.post(
    "/generate",
    response_model=schemas.DeckResultOut,
    response_model_exclude_none=True,
    responses={201: {"model": schemas.DeckResultOut}},
)
async def generate_deck(
    payload: schemas.GenerateDeckIn,
    response: Response,
    db: Session = Depends(get_db),
    ai_client: GeminiClient = Depends(get_ai_client),
):
    result = await generation.generate(db, ai_client, payload.topic)

    if result.source == "ai":
        response.status_code = status.HTTP_201_CREATED

    return schemas.DeckResultOut(
        source=result.source,
        data=schemas.DeckOut.model_validate(result.deck),
    )


@router.get("/decks", response_model=schemas.DeckListOut)
def list_decks(db: Session = Depends(get_db)):
    decks = [schemas.DeckOut.model_validate(d) for d in crud.list_decks(db)]
    return schemas.DeckListOut(count=len(decks), data=decks)


@router.delete(
    "/decks/{deck_id}",
    response_model=schemas.DeckResultOut,
    response_model_exclude_none=True,
)
def delete_deck(deck_id: str, db: Session = Depends(get_db)):
    deck = crud.get_deck(db, parse_deck_id(deck_id))
    if not deck:
        raise NotFound("Deck not found")

    # snapshot before the row is gone
    data = schemas.DeckOut.model_validate(deck)
    crud.delete_deck(db, deck)

    return schemas.DeckResultOut(message="Deck deleted successfully", data=data)


@router.patch(
    "/decks/{deck_id}/progress",
    response_model=schemas.DeckResultOut,
    response_model_exclude_none=True,
)
def update_progress(deck_id: str, payload: schemas.ProgressIn, db: Session = Depends(get_db)):
    deck_id = parse_deck_id(deck_id)

    if not is_valid_progress(payload.progress):
        raise InvalidInput("Progress must be a number between 0 and 100")

    deck = crud.update_deck_progress(db, deck_id, payload.progress)
    if not deck:
        raise NotFound("Deck not found")

    return schemas.DeckResultOut(
        message="Progress updated",
        data=schemas.DeckOut.model_validate(deck),
    )
