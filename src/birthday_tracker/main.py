from __future__ import annotations

import logging
from pathlib import Path

from telegram.ext import Application

from birthday_tracker.bot_handlers import HandlerDependencies, build_handlers
from birthday_tracker.config_store import ensure_default_config, load_config
from birthday_tracker.settings import load_settings

LOGGER = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def main() -> None:
    configure_logging()

    settings = load_settings()
    _ensure_parent(settings.birthday_config_path)
    ensure_default_config(settings.birthday_config_path)

    # Fail on a broken roster before connecting to Telegram.
    config = load_config(settings.birthday_config_path)
    LOGGER.info(
        "Loaded %s people in %s groups from %s",
        len(config.people),
        len(config.groups),
        settings.birthday_config_path,
    )

    application = Application.builder().token(settings.telegram_bot_token).build()
    application.bot_data["handler_deps"] = HandlerDependencies(settings=settings)

    for handler in build_handlers(settings):
        application.add_handler(handler)

    application.run_polling()


if __name__ == "__main__":
    main()
