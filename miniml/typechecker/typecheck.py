"""
Front-end helpers that run inference over a parsed program and render the outcome.
"""

import logging

from miniml.ast.nodes import Program
from miniml.typechecker.errors import TypeInferenceError
from miniml.typechecker.infer import infer_program

logger = logging.getLogger(__name__)


def get_type_str(program: Program) -> str:
    """Get type information for a miniml program."""
    res = ""

    try:
        type_env = infer_program(program)
        res += "Inferred types:\n"
        for name, scheme in type_env.items():
            res += f"  {name} :: {scheme}\n"
    except TypeInferenceError as e:
        res += f"Type checking failed: {e}"
    return res


def type_check(program: Program) -> bool:
    """Type check a miniml program."""
    try:
        infer_program(program)
        return True
    except TypeInferenceError as e:
        logger.error("Type checking failed: %s", e)
        return False
