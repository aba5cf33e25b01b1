"""Game-related constants shared across the core and its collaborators."""

ROUND_DURATION_SECONDS: float = 60.0
TICK_INTERVAL_MS: int = 100
ANSWER_FEEDBACK_DELAY_MS: int = 400
FEEDBACK_FLASH_MS: int = 300
LOW_TIME_THRESHOLD_SECONDS: float = 10.0

NUMBER_OF_CHOICES: int = 4
RECENT_QUESTION_WINDOW: int = 5
MAX_GENERATION_ATTEMPTS: int = 1000

LEADERBOARD_LIMIT: int = 10
RECENT_SCORES_LIMIT: int = 10
