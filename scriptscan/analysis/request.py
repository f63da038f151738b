"""Chat-completions payload for one prescription image."""
from scriptscan.constants import (
    ANALYSIS_MAX_TOKENS,
    LANG_ENGLISH,
    LANG_HINDI,
    OPENAI_VISION_MODEL,
    SYSTEM_LANGUAGE_CLAUSE,
    SYSTEM_PROMPT,
    USER_LANGUAGE_CLAUSE,
    USER_PROMPT,
)


def resolve_language(language: str | None) -> str:
    """Anything that isn't the Hindi marker falls back to English."""
    match (language or "").strip().lower():
        case "hindi":
            return LANG_HINDI
        case _:
            return LANG_ENGLISH


def system_instruction(language: str | None = LANG_ENGLISH) -> str:
    return SYSTEM_PROMPT % SYSTEM_LANGUAGE_CLAUSE[resolve_language(language)]


def user_instruction(language: str | None = LANG_ENGLISH) -> str:
    return USER_PROMPT % USER_LANGUAGE_CLAUSE[resolve_language(language)]


def build_request(data_uri: str, language: str | None = LANG_ENGLISH) -> dict:
    """Keyword arguments for ``chat.completions.create`` (also the JSON body on the wire)."""
    return {
        "model": OPENAI_VISION_MODEL,
        "messages": [
            {"role": "system", "content": system_instruction(language)},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": user_instruction(language)},
                    {"type": "image_url", "image_url": {"url": data_uri}},
                ],
            },
        ],
        "max_tokens": ANALYSIS_MAX_TOKENS,
    }
