from functools import lru_cache
from pathlib import Path
from typing import Union

from lark import Lark

from miniml.ast.nodes import Program
from miniml.ast.transformer import transform_parse_tree

GRAMMAR = Path(__file__).parent / "miniml.lark"


@lru_cache(maxsize=None)
def _parser() -> Lark:
    return Lark.open(str(GRAMMAR), parser="lalr")


def parse_text(source: str) -> Program:
    """Parse miniml source text into a Program."""
    return transform_parse_tree(_parser().parse(source))


def parse(path: Union[str, Path]) -> Program:
    with open(path) as f:
        return parse_text(f.read())
