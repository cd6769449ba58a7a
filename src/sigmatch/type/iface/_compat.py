import types
import typing
from contextvars import ContextVar

_COMPAT_CHECKING: ContextVar[set[tuple[int, int]]] = ContextVar("_COMPAT_CHECKING")

# PEP 484 numeric tower: an int is acceptable where a float is, both where a complex is
_PROMOTIONS: dict[type, frozenset[type]] = {
	float: frozenset({int}),
	complex: frozenset({int, float}),
}


def _raise_if_not_proto(typ: type):  # pragma: no cover
	if not getattr(typ, "_is_protocol", False):  # std:typing.py, L2360
		raise TypeError(f"expected protocol as a class to check against, found {type(typ)}")


def _tname(typ: typing.Any) -> str:
	if typ is None or typ is types.NoneType:
		return "None"
	if typ is Ellipsis:
		return "..."
	if isinstance(typ, type) and not typing.get_args(typ):
		return typ.__name__
	return repr(typ).removeprefix("typing.")


def _is_union(origin: typing.Any) -> bool:
	return origin is typing.Union or origin is types.UnionType


def _is_proto(typ: typing.Any) -> bool:
	return isinstance(typ, type) and getattr(typ, "_is_protocol", False) and typ is not typing.Protocol


class _splittype:  # noqa: N801
	__slots__ = ("origin", "args")

	def __init__(self, typ: typing.Any) -> None:
		self.origin = typing.get_origin(typ)
		self.args = typing.get_args(typ)


def _resolve(typ: typing.Any) -> typing.Any:
	"""replace the forms that only stand for another type: None, TypeVars, NewTypes"""
	if typ is None:
		return types.NoneType
	if isinstance(typ, typing.TypeVar):
		if typ.__bound__ is not None:
			return _resolve(typ.__bound__)
		if typ.__constraints__:
			return typing.Union[typ.__constraints__]  # noqa: UP007
		return typing.Any
	return typ


def _proto_compat(want: type, have: typing.Any, signatures: bool) -> bool:
	from ._impl import satisfies  # noqa  lazy import to avoid circular dep

	pair = (id(want), id(have))
	try:
		checking = _COMPAT_CHECKING.get()
	except LookupError:
		checking = set()
		_COMPAT_CHECKING.set(checking)

	if pair in checking:
		return True  # break recursion cycle

	checking.add(pair)
	try:
		shtyp = _splittype(have)
		if _is_union(shtyp.origin):
			return all(_proto_compat(want, member, signatures) for member in shtyp.args)

		cls = have if isinstance(have, type) else shtyp.origin
		if isinstance(cls, type):
			return satisfies(cls, want, signatures=signatures)

		return False
	finally:
		checking.discard(pair)


def _args_compat(want: typing.Any, have: typing.Any, strict: bool, signatures: bool) -> bool:
	# Callable[[A, B], R] carries its parameters as a plain list
	if isinstance(want, list | tuple) and isinstance(have, list | tuple):
		return len(want) == len(have) and all(
			compatible(w, h, strict=strict, signatures=signatures) for w, h in zip(want, have, strict=True)
		)
	return compatible(want, have, strict=strict, signatures=signatures)


def _generic_compat(swtyp: _splittype, shtyp: _splittype, strict: bool, signatures: bool) -> bool:
	"""origin equal generic check. Asymmetric: want=bare accepts have=parameterized, not reverse."""
	if not swtyp.args and shtyp.args:
		return True
	if swtyp.args and not shtyp.args:
		return False
	return all(_args_compat(w, h, strict, signatures) for w, h in zip(swtyp.args, shtyp.args, strict=False))


def _class_compat(want: type, have: type) -> bool:
	try:
		return issubclass(have, want) or any(issubclass(have, p) for p in _PROMOTIONS.get(want, ()))
	except TypeError:
		return False


def compatible(  # noqa: PLR0911, PLR0912
	want_typ: typing.Any,
	have_typ: typing.Any,
	*,
	strict: bool = False,
	signatures: bool = True,
) -> bool:
	"""

	Whether a value annotated `have_typ` may be used where `want_typ` is expected.

	**Parameters:**

	- `want_typ`: the expected annotation.
	- `have_typ`: the annotation of the value on offer.
	- `strict`: reject annotation forms that cannot be reasoned about instead of accepting them.
	- `signatures`: compare method signatures when `want_typ` is a protocol.

	"""
	want_typ, have_typ = _resolve(want_typ), _resolve(have_typ)

	# identity / Any
	if want_typ is have_typ or want_typ is typing.Any or have_typ is typing.Any:
		return True
	if want_typ is object:
		return True

	# NewType is accepted only as itself or as its supertype
	if isinstance(have_typ, typing.NewType):
		return compatible(want_typ, have_typ.__supertype__, strict=strict, signatures=signatures)

	# protocol check
	if _is_proto(want_typ):
		return _proto_compat(want_typ, have_typ, signatures)

	swtyp, shtyp = _splittype(want_typ), _splittype(have_typ)

	# literals: have=Literal[1, 2] fits want=int, and want=Literal[...] needs a subset of its values
	if shtyp.origin is typing.Literal:
		if swtyp.origin is typing.Literal:
			return set(shtyp.args) <= set(swtyp.args)
		return all(compatible(want_typ, type(v), strict=strict, signatures=signatures) for v in shtyp.args)
	if swtyp.origin is typing.Literal:
		return False

	# both unions
	if _is_union(swtyp.origin) and _is_union(shtyp.origin):
		# every member of `have` must fit at least one member of `want`
		return all(any(compatible(w, h, strict=strict, signatures=signatures) for w in swtyp.args) for h in shtyp.args)

	# have is oneof, want is not: every member must be compatible with want
	if _is_union(shtyp.origin):
		return all(compatible(want_typ, h, strict=strict, signatures=signatures) for h in shtyp.args)

	# want is oneof, have is not: have must match at least one alternative
	if _is_union(swtyp.origin):
		return any(compatible(w, have_typ, strict=strict, signatures=signatures) for w in swtyp.args)

	# same-origin generics
	if swtyp.origin is not None and swtyp.origin == shtyp.origin:
		return _generic_compat(swtyp, shtyp, strict, signatures)

	# cross-origin generics: have's origin is subclass of want's origin (e.g. list[int] -> Sequence[int])
	if (
		swtyp.origin is not None
		and shtyp.origin is not None
		and isinstance(swtyp.origin, type)
		and isinstance(shtyp.origin, type)
		and issubclass(shtyp.origin, swtyp.origin)
	):
		return _generic_compat(swtyp, shtyp, strict, signatures)

	# want is parameterized, have is the bare origin
	if swtyp.origin is not None and shtyp.origin is None:
		return False

	# want is a bare class, have is parameterized (list[int] -> Sequence, list[int] -> list)
	if swtyp.origin is None and isinstance(want_typ, type) and isinstance(shtyp.origin, type):
		return _class_compat(want_typ, shtyp.origin)

	# concrete classes
	if isinstance(want_typ, type) and isinstance(have_typ, type):
		return _class_compat(want_typ, have_typ)

	# fallback
	return not strict
