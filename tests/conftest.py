import pytest

import straits.config
from straits.registry import TraitRegistry
from tests.targets import Point


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    """Drop STRAITS_* variables and the cached settings around each test."""
    for name in ("STRAITS_STRICT_REBINDING", "STRAITS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(straits.config, "_settings", None)
    yield


@pytest.fixture
def registry() -> TraitRegistry:
    """Return a fresh, permissive TraitRegistry."""
    return TraitRegistry(strict=False)


@pytest.fixture
def strict_registry() -> TraitRegistry:
    """Return a fresh TraitRegistry that refuses rebinding."""
    return TraitRegistry(strict=True)


@pytest.fixture
def point() -> Point:
    """Return a Point instance."""
    return Point(1, 2)
