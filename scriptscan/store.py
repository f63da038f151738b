import json
import logging
import mimetypes
import uuid
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from scriptscan.analysis.encoder import ImageBlob
from scriptscan.constants import (
    DEFAULT_HISTORY_MAX_ENTRIES,
    HISTORY_FILENAME,
    IMAGES_DIRNAME,
    SETTINGS_FILENAME,
)
from scriptscan.prescription import HistoryItem, PrescriptionInfo

logger = logging.getLogger(__name__)


class JsonStore:
    """A dict persisted to one JSON file. Last write wins."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._store: dict = {}
        self._load()

    def _load(self) -> None:
        match self._path.exists():
            case True:
                try:
                    with open(self._path, encoding="utf-8") as f:
                        self._store = json.load(f)
                except Exception as e:
                    logger.warning("Store load failed (%s): %s, starting fresh", self._path.name, e)
            case False:
                pass

    def _save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(self._store, f, indent=2, ensure_ascii=False)
        except Exception as e:
            logger.warning("Store save failed (%s): %s", self._path.name, e)


class SettingsStore(JsonStore):
    """Per-chat API key and language preference."""

    def __init__(self, data_dir: Path) -> None:
        super().__init__(data_dir / SETTINGS_FILENAME)

    def _get(self, chat_id: str, field: str) -> str | None:
        return self._store.get(chat_id, {}).get(field)

    def _set(self, chat_id: str, field: str, value: str) -> None:
        self._store.setdefault(chat_id, {})[field] = value
        self._save()

    def get_api_key(self, chat_id: str) -> str | None:
        return self._get(chat_id, "api_key")

    def set_api_key(self, chat_id: str, api_key: str) -> None:
        self._set(chat_id, "api_key", api_key)

    def get_language(self, chat_id: str) -> str | None:
        return self._get(chat_id, "language")

    def set_language(self, chat_id: str, language: str) -> None:
        self._set(chat_id, "language", language)


def _image_suffix(mime_type: str) -> str:
    return mimetypes.guess_extension(mime_type) or ".img"


class HistoryStore(JsonStore):
    """Per-chat scan history, newest first, with a local copy of every scanned image."""

    def __init__(self, data_dir: Path, max_per_chat: int = DEFAULT_HISTORY_MAX_ENTRIES) -> None:
        self._images_dir = data_dir / IMAGES_DIRNAME
        self._max = max_per_chat
        super().__init__(data_dir / HISTORY_FILENAME)

    def _items(self, chat_id: str) -> list[HistoryItem]:
        def _parse(raw: dict) -> HistoryItem | None:
            try:
                return HistoryItem.model_validate(raw)
            except ValidationError as e:
                logger.warning("Skipping unreadable history entry: %s", e)
                return None

        return [item for item in map(_parse, self._store.get(chat_id, [])) if item is not None]

    def _write(self, chat_id: str, items: list[HistoryItem]) -> None:
        self._store[chat_id] = [
            item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in items
        ]
        self._save()

    def _save_image(self, item_id: str, image: ImageBlob) -> Path:
        path = self._images_dir / f"{item_id}{_image_suffix(image.mime_type)}"
        try:
            self._images_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(image.read())
        except OSError as e:
            logger.warning("Image save failed (%s): %s", path.name, e)
        return path

    @staticmethod
    def _delete_image(item: HistoryItem) -> None:
        try:
            Path(item.image).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Image delete failed (%s): %s", item.image, e)

    def add(self, chat_id: str, image: ImageBlob, info: PrescriptionInfo) -> HistoryItem:
        item_id = uuid.uuid4().hex
        item = HistoryItem(
            id=item_id,
            timestamp=datetime.now(timezone.utc),
            image=str(self._save_image(item_id, image)),
            prescription_info=info,
        )
        items = [item] + self._items(chat_id)
        list(map(self._delete_image, items[self._max:]))
        self._write(chat_id, items[: self._max])
        return item

    def entries(self, chat_id: str) -> list[HistoryItem]:
        return self._items(chat_id)

    def get(self, chat_id: str, index: int) -> HistoryItem | None:
        """1-based, as numbered in the /history listing."""
        items = self._items(chat_id)
        match index:
            case n if 1 <= n <= len(items):
                return items[n - 1]
            case _:
                return None

    def latest(self, chat_id: str) -> HistoryItem | None:
        return self.get(chat_id, 1)

    def replace_latest(self, chat_id: str, info: PrescriptionInfo) -> HistoryItem | None:
        match self._items(chat_id):
            case []:
                return None
            case [first, *rest]:
                updated = first.model_copy(update={"prescription_info": info})
                self._write(chat_id, [updated, *rest])
                return updated

    def clear(self, chat_id: str) -> None:
        items = self._items(chat_id)
        match self._store.pop(chat_id, None):
            case None:
                pass
            case _:
                list(map(self._delete_image, items))
                self._save()
