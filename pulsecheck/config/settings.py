"""Application settings and configuration."""
import os
from pathlib import Path

from dotenv import load_dotenv

ENV_PATH = Path(__file__).resolve().parent / '.env'
load_dotenv(dotenv_path=ENV_PATH)


class Settings:
    """Process-wide settings read once from the environment.

    Monitor parameters (interval, retries, threshold) are read by
    ``HealthCheckConfig.from_env`` and transport timeouts by
    ``TimeoutConfig.from_env``; this class only holds what the entry point
    needs before either exists.
    """

    # ── Paths ──────────────────────────────────────────────────────────────
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = BASE_DIR / 'data'
    LOG_DIR:  Path = Path(os.getenv('LOG_DIR', str(DATA_DIR / 'logs')))

    # ── Logging ────────────────────────────────────────────────────────────
    LOG_LEVEL:    str  = os.getenv('LOG_LEVEL', 'INFO')
    LOG_TO_FILE:  bool = os.getenv('LOG_TO_FILE', 'true').strip().lower() == 'true'


settings = Settings()
