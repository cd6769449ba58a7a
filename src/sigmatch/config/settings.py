from functools import lru_cache

from sigmatch.log import set_enabled

from .field import SettingsField
from .struct import AppSettings


class SigmatchSettings(AppSettings):
	"""

	Knobs of the signature checker, read from ``SIGMATCH_*`` environment variables.

	**Attributes:**

	- `SIGMATCH_ALLOW_UNTYPED`: unannotated substitute parameters and returns are accepted as-is.
	- `SIGMATCH_EXPAND_TUPLE_RETURNS`: a fixed-length ``tuple[A, B]`` return counts as two return values.
	- `SIGMATCH_PROTOCOL_SIGNATURES`: protocol conformance also compares method signatures.
	- `SIGMATCH_LOG_ENABLED`: emit the package's loguru records.

	"""

	SIGMATCH_ALLOW_UNTYPED: bool = SettingsField(default=True)
	SIGMATCH_EXPAND_TUPLE_RETURNS: bool = SettingsField(default=True)
	SIGMATCH_PROTOCOL_SIGNATURES: bool = SettingsField(default=True)
	SIGMATCH_LOG_ENABLED: bool = SettingsField(default=False)

	@property
	def allow_untyped(self) -> bool:
		return self.SIGMATCH_ALLOW_UNTYPED

	@property
	def expand_tuple_returns(self) -> bool:
		return self.SIGMATCH_EXPAND_TUPLE_RETURNS

	@property
	def protocol_signatures(self) -> bool:
		return self.SIGMATCH_PROTOCOL_SIGNATURES


@lru_cache
def get_settings() -> SigmatchSettings:
	settings = SigmatchSettings()
	set_enabled(settings.SIGMATCH_LOG_ENABLED)
	return settings
