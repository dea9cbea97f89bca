"""Celery tasks and the shared fetch-then-process orchestration."""

from __future__ import annotations

from clients.llm import ChatCompletionClient
from clients.telegram import TelegramClient
from clients.wordpress import WordPressClient
from config import Settings, load_settings
from publish.processor import Collaborators, ProcessingResult, process_batch
from utils import logger
from worker import celery_app


def build_collaborators(
    settings: Settings,
    *,
    telegram: TelegramClient,
    llm: ChatCompletionClient | None = None,
    wordpress: WordPressClient | None = None,
) -> Collaborators:
    """Wire the real API clients into the processor's capability set."""
    llm = llm or ChatCompletionClient(
        settings.llm_api_key,
        model=settings.llm_model,
        system_prompt=settings.llm_system_prompt,
        api_url=settings.llm_api_url,
    )
    wordpress = wordpress or WordPressClient(
        settings.wordpress_base_url,
        username=settings.wordpress_username,
        application_password=settings.wordpress_application_password,
        default_status=settings.wordpress_post_status,
    )
    return Collaborators(
        generate=llm.generate_post,
        publish=wordpress.create_post,
        delete_message=telegram.delete_message,
        acknowledge=telegram.acknowledge_updates,
    )


def run_once(
    settings: Settings,
    *,
    telegram: TelegramClient | None = None,
    collaborators: Collaborators | None = None,
) -> ProcessingResult:
    """Fetch one batch of pending updates and hand it to the processor."""
    telegram = telegram or TelegramClient(settings.telegram_bot_token)
    updates = telegram.get_updates(limit=settings.telegram_fetch_limit, timeout=0)

    if not updates:
        logger.info("No pending updates")
        return ProcessingResult()

    logger.info("Fetched updates", count=len(updates))
    return process_batch(
        updates,
        target_chat_id=settings.telegram_chat_id,
        post_status=settings.wordpress_post_status,
        collaborators=collaborators or build_collaborators(settings, telegram=telegram),
    )


@celery_app.task
def sync_updates() -> dict:
    """Celery beat entrypoint: one fetch/process/acknowledge cycle."""
    settings = load_settings()
    result = run_once(settings)
    return {
        "processed": result.processed,
        "skipped": result.skipped,
        "acknowledged_offset": result.acknowledged_offset,
        "halted": result.halted,
    }
