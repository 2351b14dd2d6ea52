"""
Shared test fixtures and configuration.
"""

import pytest
import os
import tempfile

# Set test environment variables before importing app modules
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOCAL_STORAGE_PATH", tempfile.mkdtemp(prefix="amily_test_data_"))
os.environ.setdefault("STATIC_DIR", "/nonexistent/amily_static")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("KEY_FILES_DIR", "")
# Demo mode: no external collaborator is configured
for _key in ("ELEVENLABS_API_KEY", "GEMINI_API_KEY", "GOOGLE_GEMINI_API_KEY",
             "SUPABASE_URL", "SUPABASE_KEY", "N8N_WEBHOOK_URL"):
    os.environ[_key] = ""


@pytest.fixture
def anyio_backend():
    return "asyncio"


def first_choice(candidates):
    """Deterministic selector for composed messages."""
    return candidates[0]
