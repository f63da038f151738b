from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from scriptscan.analysis.request import resolve_language
from scriptscan.constants import DEFAULT_DATA_DIR, DEFAULT_HISTORY_MAX_ENTRIES, LANG_ENGLISH


@dataclass(frozen=True)
class Config:
    telegram_bot_token: str
    allowed_chat_id: str
    log_level: str
    openai_api_key: Optional[str]
    default_language: str
    request_timeout: Optional[float]
    data_dir: str
    history_max_entries: int

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        token = os.getenv("TELEGRAM_BOT_TOKEN")
        chat_id = os.getenv("ALLOWED_CHAT_ID")
        log_level = os.getenv("LOG_LEVEL", "INFO")
        openai_api_key = os.getenv("OPENAI_API_KEY") or None
        default_language = os.getenv("DEFAULT_LANGUAGE", LANG_ENGLISH)
        raw_timeout = os.getenv("REQUEST_TIMEOUT", "").strip()
        data_dir = os.getenv("DATA_DIR") or DEFAULT_DATA_DIR
        raw_max_entries = os.getenv("HISTORY_MAX_ENTRIES", str(DEFAULT_HISTORY_MAX_ENTRIES))

        return cls._validate(
            telegram_bot_token=token,
            allowed_chat_id=chat_id,
            log_level=log_level,
            openai_api_key=openai_api_key,
            default_language=resolve_language(default_language),
            request_timeout=float(raw_timeout) if raw_timeout else None,
            data_dir=data_dir,
            history_max_entries=int(raw_max_entries),
        )

    @staticmethod
    def _validate(
        telegram_bot_token: Optional[str],
        allowed_chat_id: Optional[str],
        log_level: str,
        openai_api_key: Optional[str],
        default_language: str,
        request_timeout: Optional[float],
        data_dir: str,
        history_max_entries: int,
    ) -> "Config":
        match telegram_bot_token:
            case None | "":
                raise ValueError("TELEGRAM_BOT_TOKEN must be set in .env")
            case _:
                pass

        match allowed_chat_id:
            case None | "":
                raise ValueError("ALLOWED_CHAT_ID must be set in .env")
            case _:
                pass

        match request_timeout:
            case float() as t if t <= 0:
                raise ValueError("REQUEST_TIMEOUT must be a positive number of seconds")
            case _:
                pass

        match history_max_entries:
            case n if n < 1:
                raise ValueError("HISTORY_MAX_ENTRIES must be at least 1")
            case _:
                pass

        return Config(
            telegram_bot_token=telegram_bot_token,
            allowed_chat_id=allowed_chat_id,
            log_level=log_level,
            openai_api_key=openai_api_key,
            default_language=default_language,
            request_timeout=request_timeout,
            data_dir=data_dir,
            history_max_entries=history_max_entries,
        )
