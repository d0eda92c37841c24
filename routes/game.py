import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from config import load_config
from db.store import SqliteStore, get_store
from models.card import MAX_FACTOR, MIN_FACTOR
from models.game import (
    AnswerOutcome,
    AnswerSubmit,
    FocusType,
    GameConfig,
    GameResult,
    SessionView,
)
from models.history import Statistics
from utils.errors import (
    ConfigError,
    EmptyDeckError,
    InvalidTransitionError,
    PersistenceError,
)
from utils.evaluator import get_scoring_rules
from utils.history import record_result
from utils.session import SessionEngine

router = APIRouter()
logger = logging.getLogger(__name__)

# Single learner, single active session
_engine: Optional[SessionEngine] = None


def get_engine(store: SqliteStore = Depends(get_store)) -> SessionEngine:
    global _engine
    if _engine is None:
        config = load_config()
        _engine = SessionEngine(
            store,
            rules=get_scoring_rules(config),
            default_question_count=config["game"]["question_count"],
            default_focus=FocusType(config["game"]["default_focus"]),
        )
    return _engine


def reset_engine() -> None:
    """Drop the active session engine (used on shutdown and in tests)."""
    global _engine
    _engine = None


def http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, InvalidTransitionError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, PersistenceError):
        return HTTPException(status_code=503, detail=str(exc))
    if isinstance(exc, (ConfigError, ValueError)):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


@router.get("/config", response_model=GameConfig)
async def last_config(store: SqliteStore = Depends(get_store)):
    """Last used selection, or every table with the configured focus."""
    saved = store.load_last_config()
    if saved:
        return saved
    focus = FocusType(load_config()["game"]["default_focus"])
    return GameConfig(select=list(range(MIN_FACTOR, MAX_FACTOR + 1)), focus=focus)


@router.post("/start", response_model=SessionView)
async def start_game(
    game_config: GameConfig,
    store: SqliteStore = Depends(get_store),
    engine: SessionEngine = Depends(get_engine),
):
    try:
        state = engine.start_session(game_config)
    except (ConfigError, EmptyDeckError, PersistenceError) as exc:
        raise http_error(exc) from exc
    try:
        store.save_last_config(game_config.model_copy(update={"focus": state.focus}))
    except PersistenceError as exc:
        logger.warning("Session started but last game config was not saved: %s", exc)
    return engine.view()


@router.get("/current", response_model=SessionView)
async def current_game(engine: SessionEngine = Depends(get_engine)):
    return engine.view()


@router.post("/answer", response_model=AnswerOutcome)
async def submit_answer(answer: AnswerSubmit, engine: SessionEngine = Depends(get_engine)):
    try:
        return engine.submit_answer(answer.value, answer.elapsed_seconds, answer.question)
    except (InvalidTransitionError, PersistenceError, EmptyDeckError, ValueError) as exc:
        raise http_error(exc) from exc


@router.get("/result", response_model=GameResult)
async def game_result(engine: SessionEngine = Depends(get_engine)):
    try:
        return engine.get_result()
    except InvalidTransitionError as exc:
        raise http_error(exc) from exc


@router.post("/finish", response_model=Statistics)
async def finish_game(
    store: SqliteStore = Depends(get_store),
    engine: SessionEngine = Depends(get_engine),
):
    """Record the finished session into history and statistics."""
    try:
        return record_result(store, engine.get_result())
    except (InvalidTransitionError, PersistenceError) as exc:
        raise http_error(exc) from exc
