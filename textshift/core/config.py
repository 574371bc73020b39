"""Centralized configuration management for the textshift pipeline."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file BEFORE any settings are read
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    """Application settings for the translation / polish / format pipeline."""

    # =================================================================
    # APPLICATION
    # =================================================================
    APP_NAME: str = "textshift"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
    DEBUG: bool = _env_bool("DEBUG", "false")

    LOG_DIR: Path = Path(os.getenv("LOG_DIR", "logs"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("LOG_FILE", "textshift.log")
    LOG_MAX_BYTES: int = int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024)))
    LOG_BACKUP_COUNT: int = int(os.getenv("LOG_BACKUP_COUNT", "5"))
    LOG_TO_FILE: bool = _env_bool("LOG_TO_FILE", "true")

    # =================================================================
    # CACHE (memory tier + SQLite persisted tier)
    # =================================================================
    CACHE_DB_PATH: str = os.getenv("CACHE_DB_PATH", "storage/cache/textshift.db")

    TRANSLATION_CACHE_MEMORY_SIZE: int = int(
        os.getenv("TRANSLATION_CACHE_MEMORY_SIZE", "500")
    )
    TRANSLATION_CACHE_PERSISTED_SIZE: int = int(
        os.getenv("TRANSLATION_CACHE_PERSISTED_SIZE", "2000")
    )
    TRANSLATION_CACHE_TTL_SECONDS: int = int(
        os.getenv("TRANSLATION_CACHE_TTL_SECONDS", str(24 * 3600))
    )

    POLISH_CACHE_MEMORY_SIZE: int = int(os.getenv("POLISH_CACHE_MEMORY_SIZE", "100"))
    POLISH_CACHE_PERSISTED_SIZE: int = int(
        os.getenv("POLISH_CACHE_PERSISTED_SIZE", "500")
    )
    # Polishing is slower and costlier than translation, keep results longer
    POLISH_CACHE_TTL_SECONDS: int = int(
        os.getenv("POLISH_CACHE_TTL_SECONDS", str(48 * 3600))
    )

    # =================================================================
    # RATE LIMITING
    # =================================================================
    TRANSLATION_RATE_PER_SECOND: float = float(
        os.getenv("TRANSLATION_RATE_PER_SECOND", "10")
    )
    TRANSLATION_MAX_CONCURRENCY: int = int(
        os.getenv("TRANSLATION_MAX_CONCURRENCY", "10")
    )
    POLISH_RATE_PER_SECOND: float = float(os.getenv("POLISH_RATE_PER_SECOND", "5"))
    POLISH_MAX_CONCURRENCY: int = int(os.getenv("POLISH_MAX_CONCURRENCY", "5"))
    RATE_LIMIT_MAX_JITTER_SECONDS: float = float(
        os.getenv("RATE_LIMIT_MAX_JITTER_SECONDS", "0.2")
    )

    # =================================================================
    # TRANSLATION PROVIDERS
    # =================================================================
    GOOGLE_BASIC_URL: str = os.getenv(
        "GOOGLE_BASIC_URL", "https://translation.googleapis.com/language/translate/v2"
    )
    GOOGLE_ADVANCED_URL: str = os.getenv(
        "GOOGLE_ADVANCED_URL", "https://translation.googleapis.com/v3"
    )
    GOOGLE_FREE_URL: str = os.getenv(
        "GOOGLE_FREE_URL", "https://translate.googleapis.com/translate_a/single"
    )
    BAIDU_TRANSLATE_URL: str = os.getenv(
        "BAIDU_TRANSLATE_URL", "https://fanyi-api.baidu.com/api/trans/vip/translate"
    )

    GOOGLE_PROJECT_ID: str = os.getenv("GOOGLE_PROJECT_ID", "")
    GOOGLE_LOCATION: str = os.getenv("GOOGLE_LOCATION", "global")
    GOOGLE_GLOSSARY_ID: str = os.getenv("GOOGLE_GLOSSARY_ID", "")

    # Texts per provider request
    GOOGLE_BATCH_SIZE: int = int(os.getenv("GOOGLE_BATCH_SIZE", "50"))
    BAIDU_BATCH_SIZE: int = int(os.getenv("BAIDU_BATCH_SIZE", "20"))
    GOOGLE_FREE_BATCH_SIZE: int = 1  # endpoint takes a single string

    # Work items per pipeline chunk
    GOOGLE_CHUNK_SIZE: int = int(os.getenv("GOOGLE_CHUNK_SIZE", "50"))
    BAIDU_CHUNK_SIZE: int = int(os.getenv("BAIDU_CHUNK_SIZE", "20"))
    GOOGLE_FREE_CHUNK_SIZE: int = int(os.getenv("GOOGLE_FREE_CHUNK_SIZE", "10"))

    PROVIDER_REQUEST_TIMEOUT: float = float(
        os.getenv("PROVIDER_REQUEST_TIMEOUT", "15.0")
    )
    PROVIDER_MAX_RETRIES: int = int(os.getenv("PROVIDER_MAX_RETRIES", "3"))

    # Liveness probe for the Google family
    LIVENESS_PROBE_URL: str = os.getenv(
        "LIVENESS_PROBE_URL",
        "https://translate.googleapis.com/translate_a/single",
    )
    LIVENESS_PROBE_TIMEOUT: float = float(os.getenv("LIVENESS_PROBE_TIMEOUT", "3.0"))
    LIVENESS_PROBE_TTL_SECONDS: float = float(
        os.getenv("LIVENESS_PROBE_TTL_SECONDS", "300")
    )

    # =================================================================
    # POLISHING (Coze chat API)
    # =================================================================
    COZE_BASE_URL: str = os.getenv("COZE_BASE_URL", "https://api.coze.com")
    COZE_BOT_ID: str = os.getenv("COZE_BOT_ID", "7418029586187075592")
    COZE_USER_ID: str = os.getenv("COZE_USER_ID", "001")
    POLISH_POLL_INTERVAL: float = float(os.getenv("POLISH_POLL_INTERVAL", "1.0"))
    POLISH_JOB_TIMEOUT: float = float(os.getenv("POLISH_JOB_TIMEOUT", "20.0"))
    POLISH_REQUEST_TIMEOUT: float = float(os.getenv("POLISH_REQUEST_TIMEOUT", "5.0"))

    # =================================================================
    # CONTENT PREDICATES (empirically tuned)
    # =================================================================
    # Latin words + CJK characters must exceed this for polishing
    POLISH_MIN_TOKENS: int = int(os.getenv("POLISH_MIN_TOKENS", "10"))

    # =================================================================
    # SECRETS (seed the settings store when empty)
    # =================================================================
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY", "")
    GOOGLE_ACCESS_TOKEN: str = os.getenv("GOOGLE_ACCESS_TOKEN", "")
    BAIDU_APP_ID: str = os.getenv("BAIDU_APP_ID", "")
    BAIDU_SECRET_KEY: str = os.getenv("BAIDU_SECRET_KEY", "")
    COZE_API_KEY: str = os.getenv("COZE_API_KEY", "")

    # =================================================================
    # USAGE COUNTERS
    # =================================================================
    USAGE_COUNTER_URL: str = os.getenv("USAGE_COUNTER_URL", "")

    @property
    def usage_counters_enabled(self) -> bool:
        return bool(self.USAGE_COUNTER_URL) and self.ENVIRONMENT not in (
            "development",
            "test",
        )

    def __init__(self):
        cache_path = self.CACHE_DB_PATH
        if cache_path != ":memory:":
            Path(cache_path).parent.mkdir(parents=True, exist_ok=True)


settings = Settings()


def get_settings() -> Settings:
    """Get settings instance."""
    return settings
