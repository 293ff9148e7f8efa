"""
Errors raised by type inference. Every error is terminal for the run.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from miniml.typechecker.miniml_types import Type


class TypeInferenceError(Exception):
    """Base class for all type inference failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class OccursCheckError(TypeInferenceError):
    """A variable would be bound to a type containing itself."""

    def __init__(self, var: int, typ: "Type") -> None:
        self.var = var
        self.typ = typ
        super().__init__("Occurs check failed")


class UndefinedVariableError(TypeInferenceError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Undefined variable '{name}'")


class UnificationError(TypeInferenceError):
    """Two type terms have no common instance."""

    def __init__(self, left: "Type", right: "Type") -> None:
        self.left = left
        self.right = right
        super().__init__(f"Unification fail on {left} and {right}")
