import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    bot_token: str
    log_level: str
    log_path: str
    default_calls_per_person: int
    rate_limit_calls: int
    rate_limit_period: int


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a whole number, got {raw!r}.") from exc
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}.")
    return value


def load_settings() -> Settings:
    bot_token = os.getenv("BOT_TOKEN")
    log_level = os.getenv("LOG_LEVEL", "INFO")
    log_path = os.getenv("LOG_PATH", "logs/call_mapper.log")

    if not bot_token:
        raise ValueError("BOT_TOKEN is required. Set it in the environment or .env file.")

    return Settings(
        bot_token=bot_token,
        log_level=log_level,
        log_path=log_path,
        default_calls_per_person=_positive_int("DEFAULT_CALLS_PER_PERSON", 2),
        rate_limit_calls=_positive_int("RATE_LIMIT_CALLS", 5),
        rate_limit_period=_positive_int("RATE_LIMIT_PERIOD", 10),
    )
