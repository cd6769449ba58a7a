import os
from collections.abc import Callable, Iterator

import pytest

from sigmatch.config import SigmatchSettings, get_settings


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
	for name in SigmatchSettings.fields():
		monkeypatch.delenv(name, raising=False)
	get_settings.cache_clear()
	yield
	get_settings.cache_clear()


@pytest.fixture
def make_settings() -> Callable[..., SigmatchSettings]:
	def _make(**overrides) -> SigmatchSettings:
		return SigmatchSettings(dotenv_path=os.devnull, **overrides)

	return _make


@pytest.fixture
def settings(make_settings) -> SigmatchSettings:
	return make_settings()
