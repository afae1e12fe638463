"""Root conftest — shared test configuration."""

import os
import tempfile

# Must run before postboard.config.get_settings() is first called
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-signing-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault(
    "UPLOAD_DIR", os.path.join(tempfile.gettempdir(), "postboard-test-images"),
)
