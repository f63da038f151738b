"""OpenAIPrescriptionAnalyzer — GPT-4o chat-completions backend."""
import asyncio
import logging

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from scriptscan.analysis.client import PrescriptionAnalyzer
from scriptscan.analysis.encoder import ImageBlob, encode_data_uri
from scriptscan.analysis.extractor import parse_prescription
from scriptscan.analysis.request import build_request, resolve_language
from scriptscan.constants import (
    LANG_ENGLISH,
    MSG_ANALYZING,
    MSG_API_FAILED,
    MSG_MODEL_REPLY,
    MSG_UNEXPECTED_REPLY,
    OPENAI_API_BASE,
)
from scriptscan.errors import AnalysisCancelled, ApiRequestError, TransportError
from scriptscan.prescription import PrescriptionInfo

logger = logging.getLogger(__name__)


def _status_error_message(exc: APIStatusError) -> str:
    """Server-supplied ``error.message`` when there is one, else the status code."""
    match exc.body:
        case {"message": str() as message} if message:
            return message
        case {"error": {"message": str() as message}} if message:
            return message
        case _:
            return MSG_API_FAILED % exc.status_code


def _reply_content(response) -> str | None:
    """``choices[0].message.content``; a 200 reply of any other shape is an API failure."""
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, KeyError, TypeError) as exc:
        logger.error("OpenAI reply has no choices[0].message.content: %s", type(exc).__name__)
        raise ApiRequestError(MSG_UNEXPECTED_REPLY, 200) from exc
    match content:
        case str() | None:
            return content
        case other:
            logger.error("OpenAI reply content is %s, not text", type(other).__name__)
            raise ApiRequestError(MSG_UNEXPECTED_REPLY, 200)


def _check_cancel(cancel: asyncio.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise AnalysisCancelled()


class OpenAIPrescriptionAnalyzer(PrescriptionAnalyzer):

    def __init__(
        self,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self._http_client = http_client

    def _client(self, api_key: str) -> AsyncOpenAI:
        # one failure ends the operation: the SDK's own retries stay off
        return AsyncOpenAI(
            api_key=api_key,
            base_url=OPENAI_API_BASE,
            timeout=self._timeout,
            max_retries=0,
            http_client=self._http_client,
        )

    async def analyze(
        self,
        image: ImageBlob,
        api_key: str,
        language: str = LANG_ENGLISH,
        cancel: asyncio.Event | None = None,
    ) -> PrescriptionInfo:
        data_uri = encode_data_uri(image)
        request = build_request(data_uri, language)
        _check_cancel(cancel)

        logger.info(MSG_ANALYZING, image.mime_type, image.size, resolve_language(language))
        try:
            response = await self._client(api_key).chat.completions.create(**request)
        except APIStatusError as exc:
            message = _status_error_message(exc)
            logger.error("OpenAI request failed (%d): %s", exc.status_code, message)
            raise ApiRequestError(message, exc.status_code) from exc
        except APIConnectionError as exc:
            logger.error("OpenAI unreachable: %s", exc)
            raise TransportError(str(exc)) from exc

        _check_cancel(cancel)
        content = _reply_content(response)
        logger.info(MSG_MODEL_REPLY, len(content or ""))
        return parse_prescription(content)
