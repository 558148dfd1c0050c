import math
from collections import Counter

from sqlalchemy.orm import Session

from .. import crud, schemas

COMPLETED_AT = 100


def get_deck_stats(db: Session) -> schemas.DeckStatsOut:
    decks = crud.list_decks(db)

    total_decks = len(decks)
    completed_decks = sum(1 for d in decks if (d.progress or 0) >= COMPLETED_AT)
    total_cards = sum(len(d.cards) for d in decks)

    average_progress = 0
    if total_decks:
        # half-up, as the dashboard shows it
        average_progress = math.floor(sum(d.progress or 0 for d in decks) / total_decks + 0.5)

    by_category = Counter(d.category for d in decks)

    return schemas.DeckStatsOut(
        total_decks=total_decks,
        completed_decks=completed_decks,
        total_cards=total_cards,
        average_progress=average_progress,
        categories=[
            schemas.CategoryCountOut(category=name, count=count)
            for name, count in sorted(by_category.items(), key=lambda kv: (-kv[1], kv[0]))
        ],
    )
