from collections.abc import Callable

from sigmatch.config import SigmatchSettings, get_settings
from sigmatch.log import get_logger
from sigmatch.type import TypeDescriptor

from ._match import match_arg, match_variadic
from ._outcome import Code, Mismatch, Phase, SignatureMismatchError
from ._sig import FunctionSignature

type SignatureLike = FunctionSignature | Callable


def _as_signature(obj: SignatureLike, settings: SigmatchSettings) -> FunctionSignature:
	if isinstance(obj, FunctionSignature):
		return obj
	return FunctionSignature.of(obj, settings=settings)


def _check_inputs(declared: FunctionSignature, substitute: FunctionSignature, settings: SigmatchSettings) -> Mismatch | None:
	if len(substitute.params) != len(declared.params):
		return Mismatch(
			code=Code.ARITY_MISMATCH,
			phase=Phase.INPUT,
			position=None,
			detail=f"expected function to have {len(declared.params)} arguments not {len(substitute.params)}",
		)

	last = len(declared.params)

	# the variadic slot goes first so the positional loop never sees it
	if declared.variadic:
		last -= 1
		if not match_variadic(substitute.params[last], declared.params[last], settings):
			return Mismatch(
				code=Code.VARIADIC_MISMATCH,
				phase=Phase.INPUT,
				position=last,
				detail=(
					f"expected function to have arg of type {declared.params[last]} "
					f"at position {last} not type {substitute.params[last]}"
				),
			)

	for i in range(last):
		if viol := match_arg(substitute.params[i], declared.params[i], settings):
			return Mismatch.at(Phase.INPUT, i, viol)

	return None


def _check_keywords(declared: FunctionSignature, substitute: FunctionSignature, settings: SigmatchSettings) -> Mismatch | None:
	if set(substitute.keywords) != set(declared.keywords):
		return Mismatch(
			code=Code.ARITY_MISMATCH,
			phase=Phase.KEYWORD,
			position=None,
			detail=(
				f"expected function to have keyword arguments {sorted(declared.keywords)} "
				f"not {sorted(substitute.keywords)}"
			),
		)

	for name, declared_kw in declared.keywords.items():
		if viol := match_arg(substitute.keywords[name], declared_kw, settings):
			return Mismatch.at(Phase.KEYWORD, name, viol)

	return None


def _check_returns(declared: FunctionSignature, substitute: FunctionSignature, settings: SigmatchSettings) -> Mismatch | None:
	if declared.is_coroutine != substitute.is_coroutine:
		want, have = ("a coroutine function", "a plain one") if declared.is_coroutine else ("a plain function", "a coroutine one")
		return Mismatch(
			code=Code.AWAITABLE_MISMATCH,
			phase=Phase.RETURN,
			position=None,
			detail=f"expected {want} not {have}",
		)

	# nothing is promised about an unannotated declared return
	if declared.returns is None:
		return None

	returns = substitute.returns
	if returns is None:
		if settings.allow_untyped:
			return None
		returns = (TypeDescriptor.untyped(),)

	if len(returns) != len(declared.returns):
		return Mismatch(
			code=Code.ARITY_MISMATCH,
			phase=Phase.RETURN,
			position=None,
			detail=f"expected function to have {len(declared.returns)} return values not {len(returns)}",
		)

	for i, declared_ret in enumerate(declared.returns):
		if viol := match_arg(returns[i], declared_ret, settings):
			return Mismatch.at(Phase.RETURN, i, viol)

	return None


def validate_signatures(
	declared: SignatureLike,
	substitute: SignatureLike,
	*,
	settings: SigmatchSettings | None = None,
) -> Mismatch | None:
	"""

	Compare the signature of a substitute function against the declared one it should stand in for.

	Checks run in a fixed order and the first failure is returned: input count, the declared
	``*args`` slot, positional inputs, keyword inputs, awaitability, return count, return values.

	**Parameters:**

	- `declared`: the mocked method, or its FunctionSignature.
	- `substitute`: the function meant to run in its place, or its FunctionSignature.
	- `settings`: overrides the environment-driven defaults.

	**Returns:**

	None when the substitute is acceptable, otherwise the first Mismatch.

	"""
	settings = settings or get_settings()
	declared, substitute = _as_signature(declared, settings), _as_signature(substitute, settings)

	return (
		_check_inputs(declared, substitute, settings)
		or _check_keywords(declared, substitute, settings)
		or _check_returns(declared, substitute, settings)
	)


def signatures_compatible(
	declared: SignatureLike,
	substitute: SignatureLike,
	*,
	settings: SigmatchSettings | None = None,
) -> bool:
	return validate_signatures(declared, substitute, settings=settings) is None


def ensure_compatible(
	declared: SignatureLike,
	substitute: SignatureLike,
	*,
	settings: SigmatchSettings | None = None,
) -> None:
	"""

	Raise unless `substitute` can stand in for `declared`.

	**Raises:**

	- `SignatureMismatchError`: carrying the first Mismatch found.

	"""
	settings = settings or get_settings()
	declared, substitute = _as_signature(declared, settings), _as_signature(substitute, settings)

	if mismatch := validate_signatures(declared, substitute, settings=settings):
		get_logger("sigmatch.signature").error("{} rejected for {}: {}", substitute, declared, mismatch)
		raise SignatureMismatchError(mismatch, declared, substitute)
