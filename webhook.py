"""Flask endpoint receiving Telegram webhook deliveries one update at a time."""

import hmac
from typing import Any, Dict

from flask import Flask, jsonify, request

from clients.telegram import TelegramClient
from config import Settings, load_settings
from publish.processor import Collaborators, process_batch
from tasks import build_collaborators
from utils import logger

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def _acknowledge_noop(offset: int) -> None:
    # Webhook deliveries are confirmed by the HTTP response, not getUpdates.
    logger.debug("Webhook delivery acknowledged by response", offset=offset)


def create_app(settings: Settings | None = None, collaborators: Collaborators | None = None) -> Flask:
    """Build the webhook app; collaborators default to the real API clients."""
    settings = settings or load_settings()
    if collaborators is None:
        telegram = TelegramClient(settings.telegram_bot_token)
        collaborators = build_collaborators(settings, telegram=telegram)
    collaborators = Collaborators(
        generate=collaborators.generate,
        publish=collaborators.publish,
        delete_message=collaborators.delete_message,
        acknowledge=_acknowledge_noop,
    )

    app = Flask(__name__)

    @app.get("/health")
    def health():
        return "ok", 200

    @app.post("/telegram/webhook")
    def telegram_webhook():
        secret = settings.telegram_webhook_secret
        if secret and not hmac.compare_digest(request.headers.get(SECRET_HEADER, ""), secret):
            logger.warning("Rejected webhook call with bad secret token")
            return jsonify({"error": "Forbidden."}), 403

        update = request.get_json(silent=True)
        if not request.get_data():
            return jsonify({"error": "Missing request body."}), 400
        if not isinstance(update, dict) or not isinstance(update.get("update_id"), int):
            logger.warning("Ignored webhook with invalid JSON payload")
            return jsonify({"error": "Invalid JSON payload."}), 400

        result = process_batch(
            [update],
            target_chat_id=settings.telegram_chat_id,
            post_status=settings.wordpress_post_status,
            collaborators=collaborators,
        )
        body: Dict[str, Any] = {
            "ok": not result.halted,
            "processed": result.processed,
            "skipped": result.skipped,
        }
        if result.halted:
            # A non-2xx answer makes Telegram redeliver the update later.
            body["error"] = "Failed to process Telegram message."
            return jsonify(body), 500
        return jsonify(body), 200

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=8080)
