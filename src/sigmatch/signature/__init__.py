"""checks that a substitute function can legally stand in for a declared one"""

from ._match import match_arg, match_interface, match_mapping, match_variadic
from ._outcome import Code, Mismatch, MismatchSchema, Phase, SignatureMismatchError, Violation
from ._sig import VAR_KEYWORD, FunctionSignature
from ._validate import ensure_compatible, signatures_compatible, validate_signatures

__all__ = (
	"VAR_KEYWORD",
	"Code",
	"FunctionSignature",
	"Mismatch",
	"MismatchSchema",
	"Phase",
	"SignatureMismatchError",
	"Violation",
	"ensure_compatible",
	"match_arg",
	"match_interface",
	"match_mapping",
	"match_variadic",
	"signatures_compatible",
	"validate_signatures",
)
