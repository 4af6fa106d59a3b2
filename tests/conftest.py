"""Root pytest configuration.

Test Structure:
    tests/
    └── unit/
        ├── domain/           # Pipeline stages and orchestrator
        ├── application/      # Batch, prompt improvement, coverage
        ├── infrastructure/   # Model transports and registry
        └── presentation/     # CLI commands

Settings are cached per process; every test starts from a fresh load so
environment patches in one test never leak into another.
"""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from cardclass_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.dev for tests (same as local development)
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.dev").exists():
    load_dotenv(CONFIG_DIR / ".env.dev")


@pytest.fixture(autouse=True)
def fresh_settings():
    """Clear cached settings before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
