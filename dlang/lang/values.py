"""Runtime values of the dlang language and how they are shown and tested.

dlang values map directly onto Python objects:
- numbers: int (float once "/" is involved)
- strings: str
- booleans: bool, only ever produced by comparisons
- unit: None, the result of a call that finishes without dede
- functions: Function, never printed or compared, only called
"""

from dataclasses import dataclass, field
from typing import List

from dlang.lang.error import EvaluationError


@dataclass(eq=False)
class Function:
    """A declared dlang function paired with the scope it was declared in (its closure)."""
    name: str
    params: List[str]
    body: object = field(repr=False)     # grammar.nodes.BlockStatement
    closure: object = field(repr=False)  # lang.environment.Environment

    @property
    def arity(self):
        return len(self.params)

    def __str__(self):
        return f"<function {self.name}({', '.join(self.params)})>"


def is_number(value):
    """bool is a subclass of int in Python, but true/false are not numbers in dlang."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def type_name(value):
    """Returns the dlang name of value's type, for error messages."""
    if isinstance(value, bool):
        return "boolean"
    elif is_number(value):
        return "number"
    elif isinstance(value, str):
        return "string"
    elif isinstance(value, Function):
        return "function"
    elif value is None:
        return "none"
    raise EvaluationError("unknown value '{}'", repr(value), internal=True)


def render(value):
    """Returns the text print shows for value: numbers without a trailing fraction when integral, strings unquoted."""
    if isinstance(value, bool):
        return "true" if value else "false"
    elif isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    elif isinstance(value, int):
        try:
            return str(value)
        except ValueError:  # past sys.get_int_max_str_digits()
            raise EvaluationError("number too large to print", diagnosis=False) from None
    elif isinstance(value, str):
        return value
    elif value is None:
        return "none"
    elif isinstance(value, Function):
        raise EvaluationError("cannot print function '{}'", value.name)
    raise EvaluationError("unknown value '{}'", repr(value), internal=True)


def truthy(value):
    """Truthiness: numbers are true iff nonzero, strings iff non-empty, booleans as-is and none is false."""
    if isinstance(value, Function):
        raise EvaluationError("function '{}' cannot be used as a condition", value.name)
    elif isinstance(value, (bool, int, float, str)):
        return bool(value)
    elif value is None:
        return False
    raise EvaluationError("unknown value '{}'", repr(value), internal=True)
