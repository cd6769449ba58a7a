import typing
from collections.abc import Iterator, Mapping
from inspect import Parameter

from sigmatch.type.unset import is_set

from ._compat import _tname, compatible
from ._extr import MethodKind, _hints, _params, _raw

_VARIADIC = (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD)


def _annotated(annot: typing.Any) -> bool:
	return is_set(annot) and annot is not Parameter.empty


def _check_signatures(name: str, protobj: typing.Any, clsobj: typing.Any) -> Iterator[str]:
	protoparams, protort = _params(protobj)
	clsparams, clsrt = _params(clsobj)

	for pname, pparam in protoparams.items():
		if pname not in clsparams:
			if viol := _missing_param(clsparams, name, pparam):
				yield viol
			continue

		cparam = clsparams[pname]
		if viol := _check_param_kind(name, cparam, pparam):
			yield viol
		if viol := _check_param_annot(name, cparam, pparam):
			yield viol

	# extra required params in cls that the protocol would never pass
	for cname, cparam in clsparams.items():
		if cname not in protoparams and cparam.kind not in _VARIADIC and cparam.default is Parameter.empty:
			yield f"unexpected required parameter `{cname}` on method `{name}`"

	if _annotated(protort) and _annotated(clsrt) and not compatible(protort, clsrt):
		yield f"expected {_tname(protort)} as a return type of method `{name}`, got {_tname(clsrt)}"


def _missing_param(clsparams: Mapping[str, Parameter], name: str, pparam: Parameter) -> str | None:
	# *args/**kwargs in cls can absorb missing named params
	kinds = {p.kind for p in clsparams.values()}
	if pparam.kind == Parameter.POSITIONAL_OR_KEYWORD and kinds & set(_VARIADIC):
		return None
	if pparam.kind == Parameter.KEYWORD_ONLY:
		return None if Parameter.VAR_KEYWORD in kinds else f"expected keyword parameter `{pparam.name}` on method `{name}`"
	if pparam.kind in _VARIADIC and pparam.kind in kinds:
		return None
	return f"expected parameter `{pparam.name}` on method `{name}`"


def _check_param_kind(name: str, cparam: Parameter, pparam: Parameter) -> str | None:
	if pparam.kind == cparam.kind or (
		pparam.kind == Parameter.POSITIONAL_ONLY and cparam.kind == Parameter.POSITIONAL_OR_KEYWORD
	):
		return None
	return (
		f"expected parameter `{pparam.name}` on method `{name}` "
		f"to be of kind {pparam.kind.name}, got {cparam.kind.name}"
	)


def _check_param_annot(name: str, cparam: Parameter, pparam: Parameter) -> str | None:
	# parameters are contravariant: the class must accept whatever the protocol may pass
	if _annotated(pparam.annotation) and _annotated(cparam.annotation) and not compatible(cparam.annotation, pparam.annotation):
		return (
			f"expected annotated parameter `{pparam.name}` on method `{name}` "
			f"to accept type {_tname(pparam.annotation)}, got {_tname(cparam.annotation)}"
		)
	return None


def _check_missing(name: str, proto: type, protohints: dict, clshints: dict) -> str | None:
	raw = _raw(proto, name)
	if isinstance(raw, property) and name in clshints:
		# an annotation satisfies a property, if the types agree
		proto_ret = _hints(raw.fget).get("return") if raw.fget else None
		if proto_ret and not compatible(proto_ret, clshints[name]):
			return f"expected property `{name}` to be of type {_tname(proto_ret)}, got {_tname(clshints[name])}"
		return None
	if name in protohints:
		if name in clshints:
			return _check_attr_type(name, protohints[name], clshints[name])
		return f"expected annotated attribute `{name}` (type={_tname(protohints[name])}), found none"
	return f"expected member `{name}`"


def _check_attr_type(name: str, want: typing.Any, have: typing.Any) -> str | None:
	if not compatible(want, have):
		return f"expected `{name}` to be of type {_tname(want)}, found {_tname(have)}"
	return None


def _check_property(name: str, proto_fget: typing.Any, clsmbr: typing.Any, clsmbr_kind: MethodKind, clshints: dict) -> str | None:
	proto_ret = _hints(proto_fget).get("return") if proto_fget else None
	if clsmbr_kind == "property":
		have = _hints(clsmbr).get("return") if clsmbr else None
	elif callable(clsmbr):
		return f"expected property or attribute `{name}`, found callable"
	else:
		have = clshints.get(name)
	if proto_ret and have and not compatible(proto_ret, have):
		return f"expected property `{name}` to be of type {_tname(proto_ret)}, got {_tname(have)}"
	return None


def _check_method_kind(name: str, proto_kind: MethodKind, cls_kind: MethodKind) -> str | None:
	"""staticmethod/classmethod kind mismatch."""
	if proto_kind in ("static", "classmethod") and proto_kind != cls_kind:
		return f"expected `{name}` to be {proto_kind}, found {cls_kind}"
	return None
