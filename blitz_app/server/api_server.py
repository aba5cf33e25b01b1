"""FastAPI server exposing the shared leaderboard."""

from __future__ import annotations

from datetime import datetime
import logging
from threading import Thread

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel
import uvicorn

from blitz_app.constants.about import APP_NAME, APP_VERSION
from blitz_app.constants.game_constants import LEADERBOARD_LIMIT
from blitz_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from blitz_app.core.models import DifficultyLevel
from blitz_app.core.services.leaderboard import Leaderboard

logger = logging.getLogger(__name__)


class ScorePayload(BaseModel):
    """Payload schema for a published score."""

    username: str
    score: int
    level: DifficultyLevel
    questions_answered: int = 0
    correct_answers: int = 0
    date: datetime | None = None


def _get_leaderboard_dependency(leaderboard: Leaderboard):
    def dependency() -> Leaderboard:
        return leaderboard

    return dependency


def create_api_app(leaderboard: Leaderboard) -> FastAPI:
    """Create a FastAPI application wired to the provided leaderboard."""
    app = FastAPI(title=f"{APP_NAME} Leaderboard API", version=APP_VERSION)
    leaderboard_dep = _get_leaderboard_dependency(leaderboard)

    @app.get("/leaderboard")
    def get_global_leaderboard(
        limit: int = Query(LEADERBOARD_LIMIT, ge=1, le=100),
        board: Leaderboard = Depends(leaderboard_dep),
    ) -> dict[str, object]:
        levels = board.global_leaderboard(limit)
        return {
            "levels": {
                level.value: [entry.to_payload() for entry in entries]
                for level, entries in levels.items()
            }
        }

    @app.get("/leaderboard/{level}")
    def get_level_leaderboard(
        level: DifficultyLevel,
        limit: int = Query(LEADERBOARD_LIMIT, ge=1, le=100),
        board: Leaderboard = Depends(leaderboard_dep),
    ) -> list[dict[str, object]]:
        return [entry.to_payload() for entry in board.top_scores(level, limit)]

    @app.post("/scores", status_code=201)
    def publish_score(
        payload: ScorePayload,
        board: Leaderboard = Depends(leaderboard_dep),
    ) -> dict[str, object]:
        try:
            entry = board.add_entry(
                username=payload.username,
                score=payload.score,
                level=payload.level,
                questions_answered=payload.questions_answered,
                correct_answers=payload.correct_answers,
                date=payload.date,
            )
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        logger.info(
            "Published score %d for %s on level %s", entry.score, entry.username, entry.level.value
        )
        return entry.to_payload()

    return app


def start_api_server(
    leaderboard: Leaderboard,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(leaderboard)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="LeaderboardApiServer", daemon=True)
    thread.start()
    return thread
