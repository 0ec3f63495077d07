"""Grue: a text adventure parser and world engine."""

from .config import Config
from .logging import configure_logging, get_logger

__all__ = ["main", "Config"]


def main() -> None:
    """Entry point for the terminal game."""
    from sqlmodel import Session, SQLModel, create_engine

    from .cli import run
    from .session import GameSession
    from .users import get_or_create_player

    config = Config.from_env()

    configure_logging(
        log_level=config.log_level,
        log_file=config.log_file,
        json_logs=config.json_logs,
    )

    logger = get_logger(__name__)
    logger.info(
        "application_starting",
        database_url=config.database_url,
        player=config.player,
        log_level=config.log_level,
    )

    engine = create_engine(config.database_url)
    SQLModel.metadata.create_all(engine)

    with Session(engine) as db_session:
        player = get_or_create_player(db_session, config.player)
        session = GameSession.load_or_create(
            db_session,
            player,
            data_dir=config.data_dir,
            max_weight=config.max_weight,
        )
        run(session)
