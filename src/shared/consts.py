from enum import Enum


class EnumEnvironment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class EnumLogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnumCacheBackend(str, Enum):
    """Blob store used by the history cache."""

    MEMORY = "memory"
    REDIS = "redis"


NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")
