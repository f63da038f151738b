"""PrescriptionScanner — application state around the analysis pipeline, transport-agnostic."""
import asyncio
import itertools
import logging
import mimetypes
from pathlib import Path

from scriptscan.analysis.client import PrescriptionAnalyzer
from scriptscan.analysis.encoder import ImageBlob
from scriptscan.analysis.request import resolve_language
from scriptscan.config import Config
from scriptscan.constants import (
    LANG_ENGLISH,
    LANG_HINDI,
    MSG_ANALYSIS_FAILED,
    MSG_HELP,
    MSG_HISTORY_CLEARED,
    MSG_HISTORY_EMPTY,
    MSG_HISTORY_FOOTER,
    MSG_HISTORY_HEADER,
    MSG_KEY_MISSING,
    MSG_KEY_SAVED,
    MSG_KEY_SET,
    MSG_KEY_USAGE,
    MSG_LANGUAGE_SET,
    MSG_NO_API_KEY,
    MSG_SHOW_USAGE,
    MSG_STATUS,
    MSG_SUPERSEDED,
    PHOTO_MIME_TYPE,
)
from scriptscan.errors import AnalysisCancelled, AnalysisError
from scriptscan.prescription import HistoryItem, PrescriptionInfo
from scriptscan.render import localized, render_history_line, render_prescription
from scriptscan.store import HistoryStore, SettingsStore

logger = logging.getLogger(__name__)


# ── pure helpers (module-level so tests can import them directly) ──────────────


def _toggle_language(language: str) -> str:
    match resolve_language(language):
        case "hindi":
            return LANG_ENGLISH
        case _:
            return LANG_HINDI


def _parse_index(args: str) -> int | None:
    match args.strip():
        case digits if digits.isdigit():
            return int(digits)
        case _:
            return None


def _stored_image(item: HistoryItem) -> ImageBlob:
    mime_type, _ = mimetypes.guess_type(item.image)
    return ImageBlob(mime_type=mime_type or PHOTO_MIME_TYPE, source=Path(item.image))


# ── scanner ───────────────────────────────────────────────────────────────────


class PrescriptionScanner:
    """Owns per-chat preferences and history; runs analyses with latest-request-wins semantics.

    Every analysis for a chat takes a fresh sequence number. Starting a new one
    sets the cancel event of the one still in flight, whose result is then
    dropped without touching history or producing a reply.
    """

    def __init__(
        self,
        config: Config,
        analyzer: PrescriptionAnalyzer,
        settings: SettingsStore,
        history: HistoryStore,
    ) -> None:
        self._config = config
        self._analyzer = analyzer
        self._settings = settings
        self._history = history
        self._sequence = itertools.count(1)
        self._in_flight: dict[str, tuple[int, asyncio.Event]] = {}

    # ── preferences ───────────────────────────────────────────────────────────

    def language_for(self, chat_id: str) -> str:
        return resolve_language(
            self._settings.get_language(chat_id) or self._config.default_language
        )

    def api_key_for(self, chat_id: str) -> str | None:
        return self._settings.get_api_key(chat_id) or self._config.openai_api_key

    # ── analysis ──────────────────────────────────────────────────────────────

    async def _analyze(
        self, chat_id: str, image: ImageBlob, api_key: str, language: str
    ) -> PrescriptionInfo:
        seq = next(self._sequence)
        cancel = asyncio.Event()
        match self._in_flight.get(chat_id):
            case (_, previous):
                previous.set()
            case None:
                pass
        self._in_flight[chat_id] = (seq, cancel)

        try:
            info = await self._analyzer.analyze(image, api_key, language, cancel)
        except AnalysisCancelled:
            logger.debug(MSG_SUPERSEDED, seq, chat_id)
            raise
        finally:
            match self._in_flight.get(chat_id):
                case (current, _) if current == seq:
                    del self._in_flight[chat_id]
                case _:
                    pass

        match cancel.is_set():
            case True:
                logger.debug(MSG_SUPERSEDED, seq, chat_id)
                raise AnalysisCancelled()
            case False:
                return info

    async def handle_image(self, chat_id: str, image: ImageBlob) -> str | None:
        """Analyze a new image and record it. Returns None when a newer request superseded it."""
        language = self.language_for(chat_id)
        match self.api_key_for(chat_id):
            case None | "":
                return localized(MSG_NO_API_KEY, language)
            case api_key:
                pass

        try:
            info = await self._analyze(chat_id, image, api_key, language)
        except AnalysisCancelled:
            return None
        except AnalysisError as exc:
            return localized(MSG_ANALYSIS_FAILED, language) % exc.message

        self._history.add(chat_id, image, info)
        return render_prescription(info, language)

    # ── commands ──────────────────────────────────────────────────────────────

    async def handle_language_command(self, chat_id: str, args: str) -> str:
        """Switch language; re-analyze the latest scan in it when there is one.

        A re-analysis superseded by a newer request still confirms the switch,
        without a stale result.
        """
        match args.strip():
            case "":
                language = _toggle_language(self.language_for(chat_id))
            case requested:
                language = resolve_language(requested)
        self._settings.set_language(chat_id, language)
        confirmation = localized(MSG_LANGUAGE_SET, language)

        latest = self._history.latest(chat_id)
        api_key = self.api_key_for(chat_id)
        match (latest, api_key):
            case (None, _) | (_, None | ""):
                return confirmation
            case (item, key):
                pass

        try:
            info = await self._analyze(chat_id, _stored_image(item), key, language)
        except AnalysisCancelled:
            return confirmation
        except AnalysisError as exc:
            return "\n\n".join([confirmation, localized(MSG_ANALYSIS_FAILED, language) % exc.message])

        self._history.replace_latest(chat_id, info)
        return "\n\n".join([confirmation, render_prescription(info, language)])

    def handle_key_command(self, chat_id: str, args: str) -> str:
        language = self.language_for(chat_id)
        match args.strip():
            case "":
                return localized(MSG_KEY_USAGE, language)
            case api_key:
                self._settings.set_api_key(chat_id, api_key)
                return localized(MSG_KEY_SAVED, language)

    def handle_history_command(self, chat_id: str, args: str = "") -> str:
        language = self.language_for(chat_id)
        match self._history.entries(chat_id):
            case []:
                return localized(MSG_HISTORY_EMPTY, language)
            case items:
                lines = [localized(MSG_HISTORY_HEADER, language)]
                lines += [
                    render_history_line(index, item, language)
                    for index, item in enumerate(items, start=1)
                ]
                lines.append(localized(MSG_HISTORY_FOOTER, language))
                return "\n".join(lines)

    def handle_show_command(self, chat_id: str, args: str) -> str:
        language = self.language_for(chat_id)
        match _parse_index(args):
            case None:
                return localized(MSG_SHOW_USAGE, language)
            case index:
                item = self._history.get(chat_id, index)
        match item:
            case None:
                return localized(MSG_SHOW_USAGE, language)
            case found:
                return render_prescription(found.prescription_info, language)

    def handle_clear_command(self, chat_id: str, args: str = "") -> str:
        self._history.clear(chat_id)
        return localized(MSG_HISTORY_CLEARED, self.language_for(chat_id))

    def handle_status_command(self, chat_id: str, args: str = "") -> str:
        language = self.language_for(chat_id)
        key_state = MSG_KEY_SET if self.api_key_for(chat_id) else MSG_KEY_MISSING
        return localized(MSG_STATUS, language) % (
            localized(key_state, language),
            len(self._history.entries(chat_id)),
        )

    def handle_help_command(self, chat_id: str, args: str = "") -> str:
        return localized(MSG_HELP, self.language_for(chat_id))
