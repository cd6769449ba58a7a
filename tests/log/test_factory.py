import pytest
from loguru import logger

from sigmatch.log import get_logger, set_enabled
from sigmatch.signature import SignatureMismatchError, ensure_compatible


@pytest.fixture
def records():
	captured = []
	handler = logger.add(captured.append, format="{message}", level="DEBUG")
	yield captured
	logger.remove(handler)
	set_enabled(False)


class TestGetLogger:
	def test_returns_global_logger(self):
		assert get_logger() is logger

	def test_cached(self):
		assert get_logger("sigmatch.mock") is get_logger("sigmatch.mock")

	def test_different_names_different_loggers(self):
		assert get_logger("one") is not get_logger("two")

	def test_name_formatting(self, records):
		get_logger("src.database.service").info("hello")

		assert records[0].record["extra"]["logger_name"] == " src -> database -> service "


class TestSetEnabled:
	@staticmethod
	def _reject(settings):
		def declared(x: int) -> None: ...

		def substitute(x: str) -> None: ...

		with pytest.raises(SignatureMismatchError):
			ensure_compatible(declared, substitute, settings=settings)

	def test_silent_by_default(self, records, settings):
		self._reject(settings)

		assert records == []

	def test_enabled(self, records, settings):
		set_enabled(True)

		self._reject(settings)

		assert len(records) == 1
		assert records[0].record["level"].name == "ERROR"
		assert records[0].record["extra"]["logger_name"] == " sigmatch -> signature "
		assert "expected arg of type int not type str" in records[0]
