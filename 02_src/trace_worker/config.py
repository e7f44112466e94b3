"""Worker configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "traces.db"
DEFAULT_LOG_PATH = LOGS_DIR / "worker.log"

DEFAULT_THRESHOLD_SECONDS = 60
DEFAULT_INTERVAL_MS = 60_000
DEFAULT_BATCH_SIZE = 1000
DEFAULT_MARKER_KEY = "feature_id"

BACKENDS = ("clickhouse", "sqlite")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class WorkerConfig:
    """Settings read once at startup. No hot-reload."""

    threshold_seconds: int = DEFAULT_THRESHOLD_SECONDS
    interval_ms: int = DEFAULT_INTERVAL_MS
    batch_size: int = DEFAULT_BATCH_SIZE
    marker_key: str = DEFAULT_MARKER_KEY
    enabled: bool = True

    api_base_url: str = "http://localhost:3000"
    notification_timeout_seconds: float = 10.0

    backend: str = "clickhouse"
    clickhouse_url: str = "http://localhost:8123"
    clickhouse_user: str = "default"
    clickhouse_password: str = ""
    clickhouse_db: str = "default"
    clickhouse_timeout_seconds: float = 30.0
    db_path: str | None = None

    log_level: str = "INFO"
    log_file: str = str(DEFAULT_LOG_PATH)

    def __post_init__(self) -> None:
        if self.threshold_seconds <= 0:
            raise ValueError("threshold_seconds must be positive")
        if self.interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if not self.marker_key:
            raise ValueError("marker_key must not be empty")
        if self.backend not in BACKENDS:
            raise ValueError(
                f"backend must be one of {', '.join(BACKENDS)}, got {self.backend!r}"
            )
        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            )

    @classmethod
    def from_env(cls) -> "WorkerConfig":
        """Build config from environment variables."""
        return cls(
            threshold_seconds=_env_int(
                "TRACE_CONCLUSION_THRESHOLD_SECONDS", DEFAULT_THRESHOLD_SECONDS
            ),
            interval_ms=_env_int("TRACE_CONCLUSION_INTERVAL_MS", DEFAULT_INTERVAL_MS),
            batch_size=_env_int("TRACE_CONCLUSION_BATCH_SIZE", DEFAULT_BATCH_SIZE),
            marker_key=os.getenv("TRACE_CONCLUSION_MARKER_KEY", DEFAULT_MARKER_KEY),
            enabled=_env_bool("TRACE_CONCLUSION_ENABLED", True),
            api_base_url=os.getenv("API_BASE_URL", "http://localhost:3000"),
            notification_timeout_seconds=_env_float(
                "NOTIFICATION_TIMEOUT_SECONDS", 10.0
            ),
            backend=os.getenv("ANALYTICS_BACKEND", "clickhouse").strip().lower(),
            clickhouse_url=os.getenv("CLICKHOUSE_URL", "http://localhost:8123"),
            clickhouse_user=os.getenv("CLICKHOUSE_USER", "default"),
            clickhouse_password=os.getenv("CLICKHOUSE_PASSWORD", ""),
            clickhouse_db=os.getenv("CLICKHOUSE_DB", "default"),
            clickhouse_timeout_seconds=_env_float(
                "CLICKHOUSE_QUERY_TIMEOUT_SECONDS", 30.0
            ),
            db_path=os.getenv("DATABASE_URL") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
            log_file=os.getenv("LOG_FILE") or str(DEFAULT_LOG_PATH),
        )
