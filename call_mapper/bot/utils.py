from __future__ import annotations

from loguru import logger

from call_mapper.services.rate_limit import rate_limiter

SLOW_DOWN = "You're doing that too often. Please slow down."
GENERIC_ERROR = "Something went wrong. Please try again later."


def check_rate_limit(user_id: int, action: str) -> bool:
    key = f"{user_id}:{action}"
    result = rate_limiter.allow(key)
    if not result.allowed:
        logger.bind(user_id=user_id, action=action).debug(
            "Rate limited, retry in {retry_after:.1f}s", retry_after=result.retry_after
        )
    return result.allowed


def log_handler_exception(action: str, user_id: int | None, chat_id: int | None, error: Exception) -> None:
    logger.bind(action=action, user_id=user_id, chat_id=chat_id).exception(
        "Handler error: {error}", error=str(error)
    )
