from ._compat import _tname


class DoesNotImplementError(BaseException):
	"""raised by `implements`; carries every structural violation found, in member order"""

	violations: list[str]
	proto: type
	target: type

	def __init__(self, violations: list[str], proto: type, failed: type, *args):
		super().__init__(*args)
		self.violations = violations
		self.proto = proto
		self.target = failed

	@property
	def first(self) -> str | None:
		return self.violations[0] if self.violations else None

	def __repr__(self) -> str:
		head = f"DoesNotImplementError<type=`{_tname(self.target)}` does not implement protocol_class=`{_tname(self.proto)}`>"
		return head + '\n(violations=\n... "' + '"\n... "'.join(self.violations) + '")'

	__str__ = __repr__
