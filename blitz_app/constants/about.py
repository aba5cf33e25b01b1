"""Static metadata describing MathBlitz."""

APP_NAME = "MathBlitz"
APP_VERSION = "0.1"
APP_ORGANIZATION = "MathBlitz"
