class UnsetType:
	__slots__ = ()

	def __repr__(self) -> str:
		return "<unset value>"

	__str__ = __repr__

	def __bool__(self) -> bool:
		return False


Unset = UnsetType()


def is_set(val: object) -> bool:
	return not isinstance(val, UnsetType)
