"""TelegramClient — image source and result display via python-telegram-bot."""
import inspect
import logging
import time
from typing import Awaitable, Callable, Optional

from telegram import Bot, Update
from telegram.ext import Application, CommandHandler, ContextTypes
from telegram.ext import MessageHandler as TGMessageHandler
from telegram.ext import filters

from scriptscan.analysis.encoder import ImageBlob
from scriptscan.config import Config
from scriptscan.constants import (
    CMD_CLEAR,
    CMD_HELP,
    CMD_HISTORY,
    CMD_KEY,
    CMD_LANG,
    CMD_SHOW,
    CMD_START,
    CMD_STATUS,
    IMAGE_MIME_PREFIX,
    MAX_IMAGE_BYTES,
    MSG_BLOCKED_CHAT,
    MSG_IMAGE_TOO_LARGE,
    MSG_NOT_IMAGE,
    MSG_SEND_FAIL,
    MSG_SEND_OK,
    PHOTO_MIME_TYPE,
    TELEGRAM_MAX_MESSAGE,
)
from scriptscan.render import localized
from scriptscan.scanner import PrescriptionScanner
from scriptscan.telegram.typing import typing_action

logger = logging.getLogger(__name__)

# command callback signature: (chat_id, args) -> reply, or None for "say nothing"
OnCommand = Callable[[str, str], "str | None | Awaitable[str | None]"]


class TelegramClient:

    def __init__(self, config: Config, scanner: PrescriptionScanner) -> None:
        self._token = config.telegram_bot_token
        self._allowed_chat_id = config.allowed_chat_id
        self._scanner = scanner
        self._app: Optional[Application] = None

    def run(self) -> None:
        # a newer photo or /lang must be able to supersede one still being analyzed
        self._app = Application.builder().token(self._token).concurrent_updates(True).build()
        commands: dict[str, OnCommand] = {
            CMD_START: self._scanner.handle_help_command,
            CMD_HELP: self._scanner.handle_help_command,
            CMD_LANG: self._scanner.handle_language_command,
            CMD_HISTORY: self._scanner.handle_history_command,
            CMD_SHOW: self._scanner.handle_show_command,
            CMD_CLEAR: self._scanner.handle_clear_command,
            CMD_STATUS: self._scanner.handle_status_command,
        }
        list(map(
            lambda kv: self._app.add_handler(CommandHandler(kv[0], self._make_command_handler(kv[1]))),
            commands.items(),
        ))
        self._app.add_handler(CommandHandler(CMD_KEY, self._make_key_handler()))
        self._app.add_handler(TGMessageHandler(filters.PHOTO, self._make_photo_handler()))
        self._app.add_handler(TGMessageHandler(filters.Document.ALL, self._make_document_handler()))
        self._app.run_polling()

    async def send_message(self, to: str, text: str) -> bool:
        match self._app:
            case None:
                logger.error("send_message called before run()")
                return False
            case app:
                try:
                    await app.bot.send_message(chat_id=int(to), text=text[:TELEGRAM_MAX_MESSAGE])
                    return True
                except Exception as exc:
                    logger.error("Telegram send_message failed: %s", exc)
                    return False

    # ── helpers (also used in tests) ─────────────────────────────────────────

    def _is_allowed(self, update: Update) -> bool:
        if update.effective_chat is None:
            return False
        return str(update.effective_chat.id) == self._allowed_chat_id.strip()

    def _sender(self, update: Update) -> Optional[str]:
        """Chat id of an allowed update, None (and a log line) for anyone else."""
        match self._is_allowed(update):
            case True:
                return str(update.effective_chat.id)
            case False:
                chat_id = update.effective_chat.id if update.effective_chat else "?"
                logger.warning(MSG_BLOCKED_CHAT, chat_id)
                return None

    @staticmethod
    def _check_image(mime_type: Optional[str], size: Optional[int]) -> Optional[dict[str, str]]:
        """Rejection message for uploads that are not images or exceed the size ceiling."""
        match (mime_type or "", size or 0):
            case (mime, _) if not mime.startswith(IMAGE_MIME_PREFIX):
                return MSG_NOT_IMAGE
            case (_, n) if n > MAX_IMAGE_BYTES:
                return MSG_IMAGE_TOO_LARGE
            case _:
                return None

    # ── internal handler factory ──────────────────────────────────────────────

    def _make_command_handler(self, callback: OnCommand) -> Callable:
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            sender = self._sender(update)
            if sender is None:
                return
            args = " ".join(context.args or [])
            await self._process(sender, context.bot, lambda: callback(sender, args))

        return _handler

    def _make_key_handler(self) -> Callable:
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            sender = self._sender(update)
            if sender is None:
                return
            reply = self._scanner.handle_key_command(sender, " ".join(context.args or []))
            # the key should not linger in the chat
            try:
                await update.message.delete()
            except Exception as exc:
                logger.debug("Could not delete /key message: %s", exc)
            await self.send_message(sender, reply)

        return _handler

    def _make_photo_handler(self) -> Callable:
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            sender = self._sender(update)
            if sender is None:
                return
            photos = update.message.photo if update.message else None
            match photos:
                case None | []:
                    return
                case _:
                    largest = photos[-1]
                    await self._receive_image(
                        sender, context.bot, largest, PHOTO_MIME_TYPE, largest.file_size
                    )

        return _handler

    def _make_document_handler(self) -> Callable:
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            sender = self._sender(update)
            if sender is None:
                return
            document = update.message.document if update.message else None
            match document:
                case None:
                    return
                case doc:
                    await self._receive_image(
                        sender, context.bot, doc, doc.mime_type, doc.file_size
                    )

        return _handler

    async def _receive_image(
        self,
        sender: str,
        bot: Bot,
        attachment,
        mime_type: Optional[str],
        size: Optional[int],
    ) -> None:
        language = self._scanner.language_for(sender)
        match self._check_image(mime_type, size):
            case None:
                pass
            case rejection:
                await self.send_message(sender, localized(rejection, language))
                return

        try:
            tg_file = await attachment.get_file()
            image_bytes = bytes(await tg_file.download_as_bytearray())
        except Exception:
            logger.exception("Image download failed")
            return

        match self._check_image(mime_type, len(image_bytes)):
            case None:
                image = ImageBlob(mime_type=mime_type, source=image_bytes)
                await self._process(sender, bot, lambda: self._scanner.handle_image(sender, image))
            case rejection:
                await self.send_message(sender, localized(rejection, language))

    async def _process(
        self,
        sender: str,
        bot: Bot,
        produce: Callable[[], "str | None | Awaitable[str | None]"],
    ) -> None:
        start = time.time()
        reply = produce()
        if inspect.isawaitable(reply):
            async with typing_action(bot, sender):
                reply = await reply

        elapsed = time.time() - start
        match reply:
            case None | "":
                return
            case text:
                success = await self.send_message(sender, text)
                match success:
                    case True:
                        logger.info(MSG_SEND_OK, elapsed)
                    case False:
                        logger.error(MSG_SEND_FAIL, elapsed)
