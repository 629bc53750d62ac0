import pytest

from unitengine.core import settings as settings_module
from unitengine.units.registry import get_registry


_ENV_VARS = (
    settings_module.ENV_UNIT_SYSTEM,
    settings_module.ENV_STRIDE_STYLE,
    settings_module.ENV_FIRST_WEEKDAY,
    settings_module.ENV_TIMEZONE,
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Every test starts from default settings and leaves no global changes."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    settings_module.reset_settings()
    yield
    settings_module.reset_settings()


@pytest.fixture
def registry():
    return get_registry()
