"""
AST Transformer for converting Lark parse trees to custom AST nodes.

Surface sugar is removed here: function parameters become nested lambdas and
list literals become cons cells ending in the empty list.
"""

from typing import Any, List, Optional, Tuple, Type

from lark import Token, Transformer, Tree

from miniml.ast.nodes import (
    AddOperation,
    AndOperation,
    BoolLiteral,
    ConsExpression,
    ConsPattern,
    DivOperation,
    EmptyList,
    EmptyListPattern,
    EqualOperation,
    Expression,
    FunctionApplication,
    GreaterEqualOperation,
    GreaterThanOperation,
    IfElse,
    IntLiteral,
    Lambda,
    LessEqualOperation,
    LessThanOperation,
    LetDeclaration,
    LetExpression,
    LiteralPattern,
    MatchBranch,
    MatchExpression,
    MulOperation,
    NotEqualOperation,
    OrOperation,
    Pattern,
    Program,
    SubOperation,
    TupleLiteral,
    Variable,
    VariablePattern,
    WildcardPattern,
)

BINARY_OPERATIONS: dict[str, Type[Any]] = {
    "+": AddOperation,
    "-": SubOperation,
    "*": MulOperation,
    "/": DivOperation,
    "==": EqualOperation,
    "<>": NotEqualOperation,
    "<": LessThanOperation,
    "<=": LessEqualOperation,
    ">": GreaterThanOperation,
    ">=": GreaterEqualOperation,
    "&&": AndOperation,
    "||": OrOperation,
}

LetBinding = Tuple[bool, str, Expression]


def _curry(params: List[Pattern], body: Expression) -> Expression:
    for param in reversed(params):
        body = Lambda(param, body)
    return body


class ASTTransformer(Transformer):
    """Transformer that converts Lark parse trees to custom AST nodes."""

    def start(self, items: List[Any]) -> Program:
        return Program(list(items))

    # Bindings
    def let_binding(self, items: List[Any]) -> LetBinding:
        """Transform `[rec] name params = value`, currying the parameters."""
        rec: Optional[Token] = items[0]
        name: Token = items[1]
        params = items[2:-1]
        return rec is not None, name.value, _curry(params, items[-1])

    def decl(self, items: List[Any]) -> LetDeclaration:
        is_recursive, name, value = items[0]
        return LetDeclaration(name, value, is_recursive)

    def let_expr(self, items: List[Any]) -> LetExpression:
        is_recursive, name, value = items[0]
        return LetExpression(name, value, items[1], is_recursive)

    # Functions
    def fun_expr(self, items: List[Any]) -> Expression:
        return _curry(items[:-1], items[-1])

    def application(self, items: List[Any]) -> FunctionApplication:
        return FunctionApplication(items[0], items[1])

    # Control flow
    def if_expr(self, items: List[Any]) -> IfElse:
        return IfElse(items[0], items[1], items[2])

    def match_expr(self, items: List[Any]) -> MatchExpression:
        return MatchExpression(items[0], list(items[1:]))

    def match_branch(self, items: List[Any]) -> MatchBranch:
        return MatchBranch(items[0], items[1])

    # Operators
    def binary_op(self, items: List[Any]) -> Expression:
        left, op, right = items
        return BINARY_OPERATIONS[op.value](left, right)

    def cons(self, items: List[Any]) -> ConsExpression:
        return ConsExpression(items[0], items[1])

    # Literals
    def int(self, items: List[Any]) -> IntLiteral:
        return IntLiteral(int(items[0].value))

    def true(self, items: List[Any]) -> BoolLiteral:
        return BoolLiteral(True)

    def false(self, items: List[Any]) -> BoolLiteral:
        return BoolLiteral(False)

    def variable(self, items: List[Any]) -> Variable:
        return Variable(items[0].value)

    def empty_list(self, items: List[Any]) -> EmptyList:
        return EmptyList()

    def list_literal(self, items: List[Any]) -> Expression:
        """[a; b; c] is a :: b :: c :: []"""
        result: Expression = EmptyList()
        for element in reversed(items):
            result = ConsExpression(element, result)
        return result

    def tuple(self, items: List[Any]) -> TupleLiteral:
        return TupleLiteral(list(items))

    # Patterns
    def wildcard_pattern(self, items: List[Any]) -> WildcardPattern:
        return WildcardPattern()

    def int_pattern(self, items: List[Any]) -> LiteralPattern:
        return LiteralPattern(int(items[0].value))

    def true_pattern(self, items: List[Any]) -> LiteralPattern:
        return LiteralPattern(True)

    def false_pattern(self, items: List[Any]) -> LiteralPattern:
        return LiteralPattern(False)

    def variable_pattern(self, items: List[Any]) -> VariablePattern:
        return VariablePattern(items[0].value)

    def empty_list_pattern(self, items: List[Any]) -> EmptyListPattern:
        return EmptyListPattern()

    def list_pattern(self, items: List[Any]) -> Pattern:
        result: Pattern = EmptyListPattern()
        for element in reversed(items):
            result = ConsPattern(element, result)
        return result

    def cons_pattern(self, items: List[Any]) -> ConsPattern:
        return ConsPattern(items[0], items[1])


def transform_parse_tree(tree: Tree) -> Program:
    """Transform a Lark parse tree to a Program AST node."""
    return ASTTransformer().transform(tree)
