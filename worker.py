import os

from dotenv import load_dotenv

from celery import Celery

from utils import configure_file_logging, logger


load_dotenv()


log_path = configure_file_logging("log_worker.log")
logger.info("Worker logging configured", log_path=str(log_path))

BROKER_URL = os.getenv("CELERY_BROKER_URL")
RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", BROKER_URL)

# The cursor has a single writer: run one worker for this app.
celery_app = Celery("tg2wp", broker=BROKER_URL, backend=RESULT_BACKEND)
celery_app.conf.imports = ("tasks",)
celery_app.conf.timezone = os.getenv("CELERY_TIMEZONE", "UTC")
celery_app.conf.worker_concurrency = 1
celery_app.conf.beat_schedule = {
    "sync-telegram-updates": {
        "task": "tasks.sync_updates",
        "schedule": int(os.getenv("CELERY_POLL_INTERVAL", 300)),
    }
}
