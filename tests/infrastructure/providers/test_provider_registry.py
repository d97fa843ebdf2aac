"""
🧪 test_provider_registry.py — диспетчеризація провайдерів за тегом
"""

import pytest

from conftest import FakeProvider
from trackbot.domain.music.entities import ProviderTag
from trackbot.errors.custom_errors import ProviderUnavailable
from trackbot.infrastructure.providers import ProviderRegistry


def test_get_returns_registered_provider():
    hifi = FakeProvider(ProviderTag.HIFI)
    registry = ProviderRegistry([hifi])

    assert registry.get(ProviderTag.HIFI) is hifi
    assert registry.is_active(ProviderTag.HIFI)
    assert registry.active_tags == [ProviderTag.HIFI]


def test_inactive_provider_is_unavailable():
    with pytest.raises(ProviderUnavailable) as exc_info:
        ProviderRegistry().get(ProviderTag.YANDEX)
    assert exc_info.value.details == "module not active"


@pytest.mark.asyncio
async def test_aclose_survives_failing_provider():
    class Broken(FakeProvider):
        async def aclose(self):
            raise RuntimeError("boom")

    registry = ProviderRegistry([Broken(ProviderTag.YANDEX), FakeProvider(ProviderTag.HIFI)])
    await registry.aclose()
