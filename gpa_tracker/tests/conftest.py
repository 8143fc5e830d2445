from __future__ import annotations

import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="gpa-tracker-tests-")

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["LOG_FILE"] = os.path.join(_TMP, "app.log")
os.environ["RESET_SWEEPER_ENABLED"] = "false"
os.environ["PASSWORD_HASH_METHOD"] = "pbkdf2:sha256:1000"
os.environ.pop("SENDGRID_API_KEY", None)
