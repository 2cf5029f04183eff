from __future__ import annotations

import os
import tempfile

# Settings are read once at import time; point them at throwaway locations first.
_TMP_DIR = tempfile.mkdtemp(prefix="user-service-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}")
os.environ.setdefault("LOG_FILE", os.path.join(_TMP_DIR, "test.log"))
os.environ.setdefault("TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("ENABLE_RATE_LIMIT", "false")
os.environ.setdefault("EVENTS_ENABLED", "false")
os.environ.setdefault("APP_ENV", "test")
