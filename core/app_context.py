import logging
import threading
from dataclasses import dataclass
from typing import Optional

from redis import Redis

from core.config_loader import AppConfig, LlmConfig, load_config
from core.embeddings import EmbeddingService
from core.llm.interfaces import LLMProvider
from core.llm.openai_service import OpenAIService
from core.scorer import ScoringService
from database.database import Database
from notification.channels import EmailChannel, NotificationChannel
from notification.service import NotificationService
from notification.tracker import InMemoryNotificationTracker, RedisNotificationTracker
from scoring.queue import ScoringQueue
from scoring.tasks import ScoringWorker

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Built once per process: by the FastAPI lifespan in the web app and on
    first use in each RQ worker process. DB access should be obtained via
    unit_of_work(context.database) per request or per job.
    """
    config: AppConfig
    database: Database
    llm: LLMProvider
    scoring_service: ScoringService
    embedding_service: EmbeddingService
    notification_service: NotificationService
    scoring_worker: ScoringWorker
    scoring_queue: ScoringQueue
    redis: Optional[Redis] = None

    @classmethod
    def build(
        cls,
        config: AppConfig,
        database: Optional[Database] = None,
        llm: Optional[LLMProvider] = None,
        redis_conn: Optional[Redis] = None,
        email_channel: Optional[NotificationChannel] = None,
    ) -> "AppContext":
        """Build an AppContext from config.

        Any collaborator can be passed in explicitly (tests pass an
        in-memory database, a fake LLM and a mock channel).

        Returns:
            Fully wired AppContext instance (not yet connected)
        """
        if database is None:
            database = Database(url=config.database.url, echo=config.database.echo)

        if llm is None:
            llm = cls._build_ai_service(config.llm)

        use_async = config.queue.use_async_queue
        if use_async and redis_conn is None:
            redis_conn = Redis.from_url(config.queue.redis_url)

        if use_async:
            tracker = RedisNotificationTracker(
                redis_conn, ttl_seconds=config.queue.notifications.dedup_ttl_seconds
            )
        else:
            logger.info("Async queue disabled via config. Using sync mode.")
            tracker = InMemoryNotificationTracker()

        notification_service = NotificationService(
            channel=email_channel or EmailChannel(config.email),
            tracker=tracker,
            from_address=config.email.from_address,
            redis_conn=redis_conn if use_async else None,
            use_async_queue=use_async,
            queue_config=config.queue.notifications,
        )

        scoring_service = ScoringService(llm)
        scoring_worker = ScoringWorker(database, scoring_service, notification_service)
        scoring_queue = ScoringQueue(
            config=config.queue.scoring,
            connection=redis_conn if use_async else None,
            is_async=use_async,
            sync_handler=scoring_worker.process,
        )

        return cls(
            config=config,
            database=database,
            llm=llm,
            scoring_service=scoring_service,
            embedding_service=EmbeddingService(llm),
            notification_service=notification_service,
            scoring_worker=scoring_worker,
            scoring_queue=scoring_queue,
            redis=redis_conn if use_async else None,
        )

    @staticmethod
    def _build_ai_service(llm_config: LlmConfig) -> OpenAIService:
        """Build OpenAI service from LLM configuration."""
        model_config = {
            'scoring_model': llm_config.scoring_model,
            'embedding_model': llm_config.embedding_model,
            'embedding_dimensions': llm_config.embedding_dimensions,
            'scoring_temperature': llm_config.scoring_temperature,
        }

        return OpenAIService(
            base_url=llm_config.base_url,
            api_key=llm_config.api_key,
            model_config=model_config,
        )

    def connect(self) -> "AppContext":
        """Verify external connections. Raises if Redis is unreachable."""
        if self.redis is not None:
            self.redis.ping()
            logger.info("Connected to Redis")
        return self

    def close(self) -> None:
        """Release the engine and Redis connection."""
        if self.redis is not None:
            try:
                self.redis.close()
            except Exception as e:
                logger.warning(f"Error closing Redis connection: {e}")
        self.database.dispose()


# Per-process context for RQ task functions
_process_context: Optional[AppContext] = None
_process_lock = threading.Lock()


def init_process_context(config: Optional[AppConfig] = None, **overrides) -> AppContext:
    """Build and connect the context for this process, replacing any previous one."""
    global _process_context
    with _process_lock:
        if _process_context is not None:
            _process_context.close()
        _process_context = AppContext.build(config or load_config(), **overrides).connect()
        return _process_context


def get_process_context() -> AppContext:
    """Context for this process, built from config on first use."""
    global _process_context
    if _process_context is None:
        with _process_lock:
            if _process_context is None:
                _process_context = AppContext.build(load_config()).connect()
    return _process_context


def set_process_context(context: Optional[AppContext]) -> None:
    """Install an already-built context (web app lifespan, tests)."""
    global _process_context
    with _process_lock:
        _process_context = context


def close_process_context() -> None:
    global _process_context
    with _process_lock:
        if _process_context is not None:
            _process_context.close()
            _process_context = None
