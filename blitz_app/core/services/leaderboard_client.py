"""HTTP client for a leaderboard served by ``blitz_app.server.api_server``."""

from __future__ import annotations

import logging

import httpx

from blitz_app.constants.game_constants import LEADERBOARD_LIMIT
from blitz_app.constants.network_constants import (
    DEFAULT_LEADERBOARD_URL,
    REQUEST_TIMEOUT_SECONDS,
)
from blitz_app.core.models import DifficultyLevel, LeaderboardEntry, RoundSummary
from blitz_app.core.services.leaderboard import LeaderboardError

logger = logging.getLogger(__name__)


class RemoteLeaderboard:
    """Publishes and fetches scores over HTTP.

    Network failures and error responses surface as ``LeaderboardError`` so the
    caller can log them without knowing about httpx.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_LEADERBOARD_URL,
        client: httpx.Client | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def publish_score(self, summary: RoundSummary, display_name: str) -> LeaderboardEntry:
        """POST a finished round and return the entry created by the server."""
        body = {
            "username": display_name,
            "score": summary.score,
            "level": summary.level.value,
            "questions_answered": summary.questions_answered,
            "correct_answers": summary.correct_answers,
            "date": summary.timestamp.isoformat(),
        }
        payload = self._request("POST", "/scores", json=body)
        try:
            return LeaderboardEntry.from_payload(payload)
        except ValueError as exc:
            raise LeaderboardError(str(exc)) from exc

    def top_scores(
        self, level: DifficultyLevel, limit: int = LEADERBOARD_LIMIT
    ) -> list[LeaderboardEntry]:
        """Fetch the best entries for ``level``."""
        payload = self._request("GET", f"/leaderboard/{level.value}", params={"limit": limit})
        return _parse_entries(payload)

    def global_leaderboard(
        self, limit: int = LEADERBOARD_LIMIT
    ) -> dict[DifficultyLevel, list[LeaderboardEntry]]:
        """Fetch the best entries of every level."""
        payload = self._request("GET", "/leaderboard", params={"limit": limit})
        levels = payload.get("levels", {}) if isinstance(payload, dict) else {}
        return {level: _parse_entries(levels.get(level.value, [])) for level in DifficultyLevel}

    def _request(self, method: str, url: str, **kwargs):
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise LeaderboardError(
                f"Leaderboard returned {exc.response.status_code} for {method} {url}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise LeaderboardError(f"Leaderboard request {method} {url} failed: {exc}") from exc


def _parse_entries(payload) -> list[LeaderboardEntry]:
    if not isinstance(payload, list):
        return []
    entries: list[LeaderboardEntry] = []
    for item in payload:
        try:
            entries.append(LeaderboardEntry.from_payload(item))
        except (ValueError, AttributeError):
            logger.debug("Skipping malformed leaderboard entry: %r", item)
    return sorted(entries, key=lambda entry: entry.score, reverse=True)
