from collections.abc import Iterator

from sigmatch.type.unset import Unset, is_set

from ._checkers import (
	_check_attr_type,
	_check_method_kind,
	_check_missing,
	_check_property,
	_check_signatures,
)
from ._compat import _raise_if_not_proto, _tname
from ._error import DoesNotImplementError
from ._extr import _hints, _members, _raw, _unwrap


def violations(cls: type, proto: type, *, signatures: bool = True, type_hints: bool = True) -> Iterator[str]:
	"""

	Lazily yield every way in which `cls` fails to structurally implement `proto`.

	**Parameters:**

	- `cls`: the class to check.
	- `proto`: the Protocol class to check against.
	- `signatures`: whether to compare callable signatures.
	- `type_hints`: whether to compare type annotations.

	**Raises:**

	- `TypeError`: if `proto` is not a protocol.

	"""
	_raise_if_not_proto(proto)
	protombrs = _members(proto)
	proto_typehints, cls_typehints = _hints(proto), _hints(cls)
	if not type_hints:
		proto_typehints, cls_typehints = {}, {}

	for name, protombr in protombrs.items():
		clsmbr = getattr(cls, name, Unset)

		# --- missing ---
		if not is_set(clsmbr):
			if viol := _check_missing(name, proto, proto_typehints, cls_typehints):
				yield viol
			continue

		protombr_unwrapped, protombr_kind = _unwrap(_raw(proto, name))
		clsmbr_unwrapped, clsmbr_kind = _unwrap(v if is_set(v := _raw(cls, name)) else clsmbr)

		# --- property ---
		if protombr_kind == "property":
			if viol := _check_property(name, protombr_unwrapped, clsmbr_unwrapped, clsmbr_kind, cls_typehints):
				yield viol
			continue

		# --- static/classmethod kind ---
		if viol := _check_method_kind(name, protombr_kind, clsmbr_kind):
			yield viol
			continue

		# --- callable ---
		if callable(protombr_unwrapped):
			if not callable(clsmbr):
				yield f"expected `{name}` to be callable, found {type(clsmbr).__name__}"
			elif signatures:
				p = protombr_unwrapped if protombr_kind == "static" else protombr
				c = clsmbr_unwrapped if clsmbr_kind == "static" else clsmbr
				yield from _check_signatures(name, p, c)
			continue

		# --- data attr ---
		if callable(clsmbr) and name not in cls_typehints:
			yield f"expected `{name}` to be a data attribute, found callable"
			continue

		if name in proto_typehints and name in cls_typehints:
			if viol := _check_attr_type(name, proto_typehints[name], cls_typehints[name]):
				yield viol


def implements(cls: type, proto: type, *, signatures: bool = True, type_hints: bool = True) -> None:
	"""

	check if `cls` implements `proto` at runtime.

	**Raises:**

	- `DoesNotImplementError`: with every violation, if `cls` doesn't implement `proto`

	"""
	if viols := list(violations(cls, proto, signatures=signatures, type_hints=type_hints)):
		raise DoesNotImplementError(viols, proto, cls)


def satisfies(cls: type, proto: type, *, signatures: bool = True, type_hints: bool = True) -> bool:
	"""check if `cls` implements `proto`, stopping at the first violation"""
	return next(violations(cls, proto, signatures=signatures, type_hints=type_hints), None) is None


def first_violation(cls: type, proto: type, *, signatures: bool = True) -> str | None:
	if not isinstance(cls, type):
		return f"`{_tname(cls)}` is not a class"
	return next(violations(cls, proto, signatures=signatures), None)
