import pytest

from docextract.core.config import get_settings


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    # Tests patch env vars; a cached Settings instance must not leak between them.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
