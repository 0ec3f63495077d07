"""Line-based terminal loop over a GameSession."""

import sys
from typing import TextIO

from .logging import get_logger
from .session import GameSession

logger = get_logger(__name__)

PROMPT = "> "
RESTART_WORDS = frozenset({"restart"})
RESTART_PROMPT = "Are you sure you want to start over? Type YES to confirm: "
RESTARTED_MESSAGE = "A new adventure begins!"


def _write(output_stream: TextIO, text: str) -> None:
    if text:
        output_stream.write(text + "\n")
    output_stream.flush()


def _confirm_restart(
    session: GameSession, input_stream: TextIO, output_stream: TextIO
) -> bool:
    output_stream.write(RESTART_PROMPT)
    output_stream.flush()
    answer = input_stream.readline()
    if answer.strip().upper() != "YES":
        return False
    session.reset()
    session.save()
    _write(output_stream, RESTARTED_MESSAGE)
    _write(output_stream, session.describe_room(force_long=True))
    return True


def run(
    session: GameSession,
    input_stream: TextIO = sys.stdin,
    output_stream: TextIO = sys.stdout,
) -> None:
    """Play until end of input or until the game is over.

    The session is saved after every line, so a killed process loses at
    most the turn in progress.
    """
    if session.is_resumed:
        _write(output_stream, "Welcome back.")
    _write(output_stream, session.describe_room(force_long=True))

    while not session.state.is_finished:
        output_stream.write(PROMPT)
        output_stream.flush()
        line = input_stream.readline()
        if not line:
            output_stream.write("\n")
            break

        if line.strip().lower() in RESTART_WORDS:
            _confirm_restart(session, input_stream, output_stream)
            continue

        _write(output_stream, session.process_command(line.rstrip("\n")))
        session.save()

    logger.info(
        "session_ended",
        player=session.player.name,
        moves=session.state.moves,
        finished=session.state.is_finished,
    )
