"""Standalone polling loop that turns Telegram messages into WordPress posts.

Runs the same fetch/process/acknowledge cycle as the Celery task, for hosts
that do not run a broker.
"""

import time

from clients.telegram import TelegramAPIError, TelegramClient
from config import load_settings
from tasks import build_collaborators, run_once
from utils import configure_file_logging, format_http_error, logger


log_path = configure_file_logging("log_bot.log")
logger.info("Bot logging configured", log_path=str(log_path))


def main() -> None:
    """Run a sync cycle every poll interval until interrupted."""
    settings = load_settings()
    logger.info(
        "Settings loaded",
        chat_id=settings.telegram_chat_id,
        fetch_limit=settings.telegram_fetch_limit,
        post_status=settings.wordpress_post_status,
        poll_interval=settings.poll_interval,
    )

    telegram = TelegramClient(settings.telegram_bot_token)
    collaborators = build_collaborators(settings, telegram=telegram)

    while True:
        try:
            run_once(settings, telegram=telegram, collaborators=collaborators)
        except KeyboardInterrupt:
            logger.info("Stopping bot on keyboard interrupt")
            break
        except TelegramAPIError as api_err:
            logger.error("Telegram API error while fetching updates", error=format_http_error(api_err))
        except Exception as exc:
            logger.exception("Unhandled error in main loop", error=str(exc))

        try:
            time.sleep(settings.poll_interval)
        except KeyboardInterrupt:
            logger.info("Stopping bot on keyboard interrupt")
            break


if __name__ == "__main__":
    main()
