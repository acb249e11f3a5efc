"""
Centralized configuration for the Labels backend.
All settings come from environment variables for 12-factor deployment.
"""

import os


def _env_bool(name: str, default: bool = False) -> bool:
    val = os.environ.get(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


# ---------------------------------------------------------------------------
# Document store
# ---------------------------------------------------------------------------
MONGODB_URL = os.environ.get("MONGODB_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.environ.get("DATABASE_NAME", "labels")
# "mongo" talks to MONGODB_URL, "memory" keeps everything in-process.
STORE_BACKEND = os.environ.get("STORE_BACKEND", "mongo").strip().lower()
MONGODB_TIMEOUT_MS = int(os.environ.get("MONGODB_TIMEOUT_MS", "5000"))

# Hard ceiling on operations in one physical write batch.
BATCH_MAX_OPERATIONS = int(os.environ.get("BATCH_MAX_OPERATIONS", "500"))

# Create the labels/objects indexes during app startup.
ENSURE_INDEXES = _env_bool("ENSURE_INDEXES", True)

# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
PORT = int(os.environ.get("PORT", "8001"))

# DEBUG, INFO, WARNING, ERROR or CRITICAL; unknown names fall back to INFO.
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper()

# Header carrying the e-mail of the user making the request.  Authentication
# runs in front of this service and is expected to set it.
REQUESTER_HEADER = os.environ.get("REQUESTER_HEADER", "X-User-Email")

CORS_ORIGINS = [
    s.strip()
    for s in os.environ.get("CORS_ORIGINS", "*").split(",")
    if s.strip()
]
