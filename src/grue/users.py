"""Player profiles, one per name given on the terminal (GRUE_PLAYER)."""

import datetime as dt

from sqlmodel import Session, select

from .logging import get_logger
from .models import Player

logger = get_logger(__name__)


def normalize_player_name(name: str) -> str:
    """Collapse whitespace so "  Zork  fan " and "Zork fan" share a save."""
    normalized = " ".join(name.split())
    if not normalized:
        raise ValueError("player name must not be empty")
    return normalized


def get_or_create_player(session: Session, name: str) -> Player:
    """Return the profile for ``name``, creating it the first time it plays.

    A returning player's ``last_seen`` is bumped so the previous visit can
    be logged before it's overwritten.
    """
    name = normalize_player_name(name)
    statement = select(Player).where(Player.name == name)
    player = session.exec(statement).first()

    if player:
        previous_visit = player.last_seen
        player.last_seen = dt.datetime.now(dt.UTC)
        logger.info(
            "player_returning",
            player=name,
            player_id=player.id,
            previous_visit=previous_visit.isoformat(),
        )
    else:
        player = Player(name=name)
        session.add(player)
        logger.info("player_created", player=name)

    session.commit()
    session.refresh(player)
    return player
