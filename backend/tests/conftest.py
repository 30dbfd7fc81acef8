"""Root conftest — shared test configuration."""

import os

# Settings are cached on first import: fix them before any app module loads
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("AI_SIMULATED_LATENCY_SECONDS", "0")
os.environ.setdefault("SEED_REFERENCE_DATA", "false")
os.environ.setdefault("LOG_FORMAT", "text")
