"""Model reply text → PrescriptionInfo, degrading to raw text instead of failing."""
import logging
import re

from pydantic import ValidationError

from scriptscan.constants import MSG_DEGRADED
from scriptscan.prescription import PrescriptionInfo

logger = logging.getLogger(__name__)

# First complete ```json fence wins; an unclosed fence counts as no fence.
JSON_FENCE = re.compile(r"```json[ \t]*\r?\n(.*?)\r?\n[ \t]*```", re.DOTALL)


def extract_json_candidate(content: str) -> str:
    match JSON_FENCE.search(content):
        case None:
            return content
        case fence:
            return fence.group(1)


def parse_prescription(content: str | None) -> PrescriptionInfo:
    """Decode the model's answer. Never raises.

    Undecodable or wrongly shaped replies come back as ``PrescriptionInfo.raw(content)``.
    A decoded reply without ``rawText`` gets the full reply as its raw text.
    """
    text = content or ""
    try:
        info = PrescriptionInfo.model_validate_json(extract_json_candidate(text))
    except ValidationError as exc:
        logger.warning(MSG_DEGRADED, exc.errors()[0]["type"] if exc.errors() else "invalid")
        return PrescriptionInfo.raw(text)

    match info.raw_text:
        case None:
            return info.model_copy(update={"raw_text": text})
        case _:
            return info
