"""Session layer bridging the game engine and database."""

import datetime as dt
import pickle
import zlib
from pathlib import Path

from sqlmodel import Session, select

from .engine.commands import Game
from .engine.loader import load_world
from .engine.state import GameState, new_game_state
from .engine.world import DEFAULT_MAX_WEIGHT, World
from .logging import get_logger
from .models import Player, SavedGame

logger = get_logger(__name__)


def new_game(
    data_dir: Path | None = None, max_weight: int = DEFAULT_MAX_WEIGHT
) -> tuple[World, GameState]:
    """Build a fresh world and a state standing in its start room."""
    world = load_world(data_dir, max_weight=max_weight)
    state = new_game_state(world)
    return world, state


def dump_snapshot(world: World, state: GameState) -> bytes:
    # Pickled together so the world's lighting keeps pointing at this state
    return zlib.compress(pickle.dumps((world, state)))


def load_snapshot(blob: bytes) -> tuple[World, GameState]:
    world, state = pickle.loads(zlib.decompress(blob))
    return world, state


class GameSession:
    """Wraps a Player + SavedGame + in-memory World and GameState."""

    def __init__(
        self,
        db_session: Session,
        player: Player,
        saved_game: SavedGame | None,
        world: World,
        state: GameState,
        data_dir: Path | None = None,
        max_weight: int = DEFAULT_MAX_WEIGHT,
    ):
        self.db_session = db_session
        self.player = player
        self.saved_game = saved_game
        self.data_dir = data_dir
        self.max_weight = max_weight
        self.game = Game(world, state)

    @property
    def world(self) -> World:
        return self.game.world

    @property
    def state(self) -> GameState:
        return self.game.state

    @property
    def is_resumed(self) -> bool:
        return self.saved_game is not None

    @classmethod
    def load_or_create(
        cls,
        db_session: Session,
        player: Player,
        data_dir: Path | None = None,
        max_weight: int = DEFAULT_MAX_WEIGHT,
    ) -> "GameSession":
        """Load an unfinished save or start a fresh game."""
        statement = select(SavedGame).where(SavedGame.player_id == player.id)
        saved_game = db_session.exec(statement).first()

        if saved_game and not saved_game.is_finished:
            world, state = load_snapshot(saved_game.state_blob)
            logger.debug("game_loaded", player=player.name, moves=saved_game.moves)
        else:
            if saved_game:
                db_session.delete(saved_game)
                db_session.commit()
            world, state = new_game(data_dir, max_weight)
            saved_game = None
            logger.info("new_game_started", player=player.name)

        return cls(
            db_session, player, saved_game, world, state, data_dir, max_weight
        )

    def process_command(self, raw_input: str) -> str:
        """Delegate to the engine and return response text."""
        return self.game.play(raw_input)

    def describe_room(self, force_long: bool = False) -> str:
        return self.game.describe_room(force_long=force_long)

    def save(self) -> None:
        """Serialize world and state back to the database."""
        now = dt.datetime.now(dt.UTC)
        blob = dump_snapshot(self.world, self.state)

        if self.saved_game is None:
            self.saved_game = SavedGame(
                player_id=self.player.id,
                state_blob=blob,
                moves=self.state.moves,
                score=self.state.score,
                is_finished=self.state.is_finished,
                started_at=now,
                last_played=now,
            )
            self.db_session.add(self.saved_game)
        else:
            self.saved_game.state_blob = blob
            self.saved_game.moves = self.state.moves
            self.saved_game.score = self.state.score
            self.saved_game.is_finished = self.state.is_finished
            self.saved_game.last_played = now

        self.db_session.commit()
        logger.debug(
            "game_saved",
            player=self.player.name,
            moves=self.state.moves,
            score=self.state.score,
        )

    def reset(self) -> None:
        """Reset to a fresh game."""
        world, state = new_game(self.data_dir, self.max_weight)
        self.game = Game(world, state)
        if self.saved_game:
            self.db_session.delete(self.saved_game)
            self.db_session.commit()
            self.saved_game = None
        logger.info("game_reset", player=self.player.name)
