"""Entry point — wires Config → stores → analyzer → PrescriptionScanner → TelegramClient."""
import logging
from pathlib import Path

from rich.logging import RichHandler

from scriptscan.analysis.openai import OpenAIPrescriptionAnalyzer
from scriptscan.config import Config
from scriptscan.constants import MSG_BOT_STARTING
from scriptscan.scanner import PrescriptionScanner
from scriptscan.store import HistoryStore, SettingsStore
from scriptscan.telegram.client import TelegramClient


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))
    # httpx logs every request URL at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main() -> None:
    config = Config.from_env()
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_BOT_STARTING)

    data_dir = Path(config.data_dir)
    scanner = PrescriptionScanner(
        config,
        analyzer=OpenAIPrescriptionAnalyzer(timeout=config.request_timeout),
        settings=SettingsStore(data_dir),
        history=HistoryStore(data_dir, max_per_chat=config.history_max_entries),
    )
    TelegramClient(config, scanner).run()


if __name__ == "__main__":
    main()
