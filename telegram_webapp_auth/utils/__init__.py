"""Helper utilities shared across the package."""

from telegram_webapp_auth.utils.logger_setup import get_logger, setup_logger
from telegram_webapp_auth.utils.tokens import TOKEN_CHARS, create_secret

__all__ = ["get_logger", "setup_logger", "TOKEN_CHARS", "create_secret"]
