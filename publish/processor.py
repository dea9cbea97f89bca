"""Batch processor turning Telegram updates into WordPress posts.

Updates are handled strictly in arrival order. Each examined update (skipped
or processed) moves the cursor to ``update_id + 1``; a failure while
generating, publishing or deleting stops the batch and leaves the cursor
where it was, so the failing update is fetched again on the next run.

A permanently failing update therefore blocks everything queued behind it.
This is accepted: skipping it automatically could publish it twice.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Sequence

from clients.wordpress import PostDraft, PublishedPost
from publish.formatter import build_title
from publish.selector import Message, Update, extract_text, pick_message
from utils import format_http_error, logger

# Telegram reports date=0 for messages the bot can no longer access.
INACCESSIBLE_MESSAGE_DATE = 0


@dataclass(frozen=True)
class Collaborators:
    generate: Callable[[str], str]
    publish: Callable[[PostDraft], PublishedPost]
    delete_message: Callable[[int | str, int], None]
    acknowledge: Callable[[int], None]


@dataclass(frozen=True)
class ProcessingResult:
    processed: int = 0
    skipped: int = 0
    acknowledged_offset: int | None = None
    halted: bool = False


def _skip_reason(message: Message | None, update: Update, target_chat_id: str) -> str | None:
    """Return the log line for the first skip rule that matches, else None."""
    if message is None:
        return "Skipping update without message payload"
    if message.get("date") == INACCESSIBLE_MESSAGE_DATE:
        return "Skipping inaccessible message"
    chat_id = (message.get("chat") or {}).get("id")
    if str(chat_id) != target_chat_id:
        return "Skipping update from unexpected chat"
    if extract_text(update) is None:
        return "Skipping message without text content"
    return None


def _process_message(
    message: Message,
    text: str,
    *,
    post_status: str,
    collaborators: Collaborators,
) -> PublishedPost:
    """Generate, publish, then delete the source message, in that order."""
    content = collaborators.generate(text)
    draft = PostDraft(title=build_title(text), content=content, status=post_status)
    post = collaborators.publish(draft)
    collaborators.delete_message(message["chat"]["id"], message["message_id"])
    return post


def process_batch(
    updates: Sequence[Update],
    *,
    target_chat_id: int | str,
    post_status: str,
    collaborators: Collaborators,
) -> ProcessingResult:
    """Process a batch of updates and acknowledge the resulting cursor once."""
    target = str(target_chat_id)
    processed = 0
    skipped = 0
    cursor: int | None = None
    halted = False

    for update in updates:
        update_id = update["update_id"]
        message = pick_message(update)
        reason = _skip_reason(message, update, target)
        if reason is not None:
            log_fields: Dict[str, Any] = {"update_id": update_id}
            if message is not None:
                log_fields["chat_id"] = (message.get("chat") or {}).get("id")
                log_fields["message_id"] = message.get("message_id")
            logger.info(reason, **log_fields)
            skipped += 1
            cursor = update_id + 1
            continue

        text = extract_text(update) or ""
        try:
            post = _process_message(
                message,
                text,
                post_status=post_status,
                collaborators=collaborators,
            )
        except Exception as exc:
            # Leave the cursor untouched so this update is retried next run.
            logger.exception(
                "Failed to process update, stopping batch",
                update_id=update_id,
                chat_id=message["chat"]["id"],
                message_id=message.get("message_id"),
                error=format_http_error(exc),
            )
            halted = True
            break

        processed += 1
        cursor = update_id + 1
        logger.info(
            "Published post from message",
            update_id=update_id,
            message_id=message.get("message_id"),
            post_id=post.id if post is not None else None,
            post_link=post.link if post is not None else None,
        )

    if cursor is not None:
        try:
            collaborators.acknowledge(cursor)
        except Exception as exc:
            logger.exception(
                "Failed to acknowledge updates",
                offset=cursor,
                error=format_http_error(exc),
            )
        else:
            logger.info("Acknowledged updates", offset=cursor)

    logger.info(
        "Batch finished",
        processed=processed,
        skipped=skipped,
        acknowledged_offset=cursor,
        halted=halted,
    )
    return ProcessingResult(
        processed=processed,
        skipped=skipped,
        acknowledged_offset=cursor,
        halted=halted,
    )
