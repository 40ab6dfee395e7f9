"""
Persistence and replay helpers for finished games.

Game records are stored as JSON strings by an external store; these helpers
produce and read that format and rebuild the board snapshots a replay viewer
steps through.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from config import DEFAULT_BOARD_SIZE
from game_logic import Board, board_size_of, create_empty_board, make_move, validate_board, validate_board_size

logger = logging.getLogger(__name__)

RECORD_VERSION = "2.0"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class MoveRecord(BaseModel):
    player: Literal["X", "O"]
    position: int = Field(ge=0)


class GameRecord(BaseModel):
    final_board: List[Optional[Literal["X", "O"]]]
    moves: List[MoveRecord] = Field(default_factory=list)
    board_size: int = DEFAULT_BOARD_SIZE
    timestamp: str = Field(default_factory=_utc_now)
    version: str = RECORD_VERSION

    @field_validator("timestamp", mode="before")
    @classmethod
    def replace_bad_timestamp(cls, value):
        # A bad timestamp alone does not invalidate the game
        if not isinstance(value, str):
            logger.warning(f"Replacing invalid timestamp {value!r} in game record")
            return _utc_now()
        return value

    @model_validator(mode="after")
    def check_move_positions(self) -> "GameRecord":
        cells = self.board_size * self.board_size
        for move in self.moves:
            if move.position >= cells:
                raise ValueError(
                    f"Move position {move.position} is off the {self.board_size}x{self.board_size} board"
                )
        return self


class GameResult(BaseModel):
    """One game's summary as kept in the player's history."""
    id: Optional[str] = None
    username: Optional[str] = None
    result: str
    date: Optional[str] = None
    moves: int = 0
    difficulty: Optional[str] = None


class GameStats(BaseModel):
    wins: int = 0
    losses: int = 0
    ties: int = 0
    total: int = 0
    win_rate: float = 0.0


MoveLike = Union[MoveRecord, dict]


def _empty_record(size: int = DEFAULT_BOARD_SIZE) -> GameRecord:
    return GameRecord(final_board=create_empty_board(size), moves=[], board_size=size)


def serialize_board_state(board: Board, moves: Iterable[MoveLike], board_size: Optional[int] = None) -> str:
    """
    Encode a finished game as JSON. Raises ValueError for an invalid board
    size, a board that does not match it, or a malformed move.
    """
    size = board_size or board_size_of(board)
    validate_board(board, size)

    try:
        record = GameRecord(
            final_board=list(board),
            moves=[move if isinstance(move, MoveRecord) else MoveRecord.model_validate(move) for move in moves],
            board_size=size,
        )
    except ValidationError as e:
        raise ValueError(f"Failed to serialize board state: {e}") from e

    return record.model_dump_json()


def deserialize_board_state(serialized: str) -> GameRecord:
    """
    Decode a stored game. Corrupted input never raises: it is logged and
    replaced by an empty default record.
    """
    try:
        record = GameRecord.model_validate_json(serialized)
        validate_board_size(record.board_size)
    except (ValidationError, ValueError, TypeError) as e:
        logger.warning(f"Error deserializing board state, using defaults: {e}")
        return _empty_record()

    if len(record.final_board) != record.board_size * record.board_size:
        logger.warning("Board size mismatch in deserialized data, creating new board")
        return _empty_record(record.board_size)

    return record


def replay_game(moves: Iterable[MoveLike], size: int = DEFAULT_BOARD_SIZE) -> List[Board]:
    """
    Board snapshots for a move list: the empty board followed by one board
    per applied move. Stops at the first invalid move.
    """
    validate_board_size(size)

    current = create_empty_board(size)
    snapshots = [list(current)]

    for index, move in enumerate(moves):
        try:
            record = move if isinstance(move, MoveRecord) else MoveRecord.model_validate(move)
            current = make_move(current, record.position, record.player)
        except (ValidationError, ValueError) as e:
            logger.warning(f"Stopping replay at move {index}: {e}")
            break
        snapshots.append(list(current))

    return snapshots


def calculate_game_stats(results: Iterable[Union[GameResult, dict]]) -> GameStats:
    """Win/loss/tie totals and win rate percentage for a player's history."""
    stats = GameStats()

    for entry in results:
        if isinstance(entry, GameResult):
            outcome = entry.result
        else:
            outcome = entry.get("result") if isinstance(entry, dict) else None
        if outcome == "win":
            stats.wins += 1
        elif outcome == "lose":
            stats.losses += 1
        elif outcome == "tie":
            stats.ties += 1
        else:
            logger.warning(f"Skipping game history entry with unknown result: {entry!r}")

    stats.total = stats.wins + stats.losses + stats.ties
    if stats.total:
        stats.win_rate = round(stats.wins / stats.total * 100, 2)
    return stats
