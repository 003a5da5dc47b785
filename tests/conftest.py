import sys
from pathlib import Path

import pytest

# Ensure `src` is on sys.path for tests when not installed editable.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from luminance_connector.config import get_settings  # noqa: E402

_SETTINGS_ENV = (
    "LUMINANCE_BASE_URL",
    "LUMINANCE_TOKEN_URL",
    "LUMINANCE_ACCESS_TOKEN",
    "HTTP_TIMEOUT",
    "DEFAULT_CURRENCY",
    "MATTER_NAME_PREFIX",
    "TAG_FILTER_FIELD",
    "TAG_FILTER",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    # Settings read .env from the cwd; run from an empty dir with a clean env.
    for key in _SETTINGS_ENV:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
