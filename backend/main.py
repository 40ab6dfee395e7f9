from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import List, Optional, Literal
from config import load_ai_config, DEFAULT_BOARD_SIZE, MIN_BOARD_SIZE, MAX_BOARD_SIZE
from game_logic import check_winner
from game_history import (
    GameResult,
    MoveRecord,
    calculate_game_stats,
    deserialize_board_state,
    replay_game,
    serialize_board_state,
)
from models.engine import TicTacToeEngine, Difficulty
import logging
import time

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI()

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:8081"],  # Expo web dev server
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Cell = Optional[Literal["X", "O"]]


class EngineSettings(BaseModel):
    time_limit_ms: Optional[int] = Field(None, ge=10, le=30000, description="Thinking time for Hard difficulty in ms")


class MoveRequest(BaseModel):
    board: List[Cell]
    difficulty: Difficulty
    size: int = Field(DEFAULT_BOARD_SIZE, ge=MIN_BOARD_SIZE, le=MAX_BOARD_SIZE)
    player: Literal["X", "O"] = "O"
    settings: Optional[EngineSettings] = None


class BoardRequest(BaseModel):
    board: List[Cell]
    size: int = Field(DEFAULT_BOARD_SIZE, ge=MIN_BOARD_SIZE, le=MAX_BOARD_SIZE)


class SerializeRequest(BoardRequest):
    moves: List[MoveRecord] = Field(default_factory=list)


class DeserializeRequest(BaseModel):
    serialized: str


class ReplayRequest(BaseModel):
    moves: List[MoveRecord]
    size: int = Field(DEFAULT_BOARD_SIZE, ge=MIN_BOARD_SIZE, le=MAX_BOARD_SIZE)


# One engine per process; requests are served one search at a time
engine = TicTacToeEngine(load_ai_config())


@app.get("/ai-settings")
async def get_ai_settings():
    """Get the engine configuration in use"""
    return engine.config.to_dict()


@app.post("/get-best-move")
async def get_best_move(request: MoveRequest):
    start_time = time.time()

    # Log board state in a compact format
    logger.info("BOARD STATE:")
    for row in range(request.size):
        cells = request.board[row * request.size:(row + 1) * request.size]
        logger.info(" ".join(cell or "." for cell in cells))
    logger.info(f"Difficulty: {request.difficulty.value} | Player: {request.player} | Size: {request.size}")

    time_limit_ms = request.settings.time_limit_ms if request.settings else None
    result = engine.select_move(request.board, request.difficulty, request.size, request.player, time_limit_ms)

    elapsed = time.time() - start_time
    if result.fallback:
        logger.warning(f"Fallback move {result.move} after error: {result.error} [{elapsed:.2f}s]")
    else:
        logger.info(f"Selected: {result.move} [{elapsed:.2f}s]")

    return result.to_dict()


@app.post("/check-winner")
async def get_winner(request: BoardRequest):
    try:
        return {"winner": check_winner(request.board, request.size)}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/cache-stats")
async def get_cache_stats():
    return engine.get_cache_stats()


@app.post("/clear-caches")
async def clear_caches():
    engine.clear_caches()
    return {"status": "cleared"}


@app.post("/serialize")
async def serialize(request: SerializeRequest):
    try:
        return {"serialized": serialize_board_state(request.board, request.moves, request.size)}
    except ValueError as e:
        logger.error(f"Error serializing board state: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/deserialize")
async def deserialize(request: DeserializeRequest):
    return deserialize_board_state(request.serialized).model_dump()


@app.post("/replay")
async def replay(request: ReplayRequest):
    boards = replay_game(request.moves, request.size)
    return {"boards": boards, "winner": check_winner(boards[-1], request.size)}


@app.post("/game-stats")
async def game_stats(results: List[GameResult]):
    return calculate_game_stats(results).model_dump()


@app.get("/")
async def root():
    logger.info("Root endpoint accessed")
    return {"message": "Welcome to the Tic-Tac-Toe AI Backend"}


# Log startup
@app.on_event("startup")
async def startup_event():
    logger.info("Application startup complete")
