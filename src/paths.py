"""Filesystem locations shared by the scheduler and the polling bot."""

from pathlib import Path

# src/paths.py -> repository root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Optional dotenv file with DATABASE_*, TELEGRAM_* and SCHEDULER_* settings
ENV_FILE = PROJECT_ROOT / ".env"
