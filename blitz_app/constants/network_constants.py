"""Network configuration constants for the leaderboard service."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
DEFAULT_LEADERBOARD_URL: str = "http://127.0.0.1:8000"
REQUEST_TIMEOUT_SECONDS: float = 5.0
