from abc import ABC
from dataclasses import dataclass, field
from typing import List, TypeAlias, Union


@dataclass
class ASTNode(ABC):
    pass


# Literals
@dataclass
class IntLiteral(ASTNode):
    value: int


@dataclass
class BoolLiteral(ASTNode):
    value: bool


@dataclass
class EmptyList(ASTNode):
    pass


@dataclass
class TupleLiteral(ASTNode):
    elements: List["Expression"]


# Variables and Identifiers
@dataclass
class Variable(ASTNode):
    name: str


# Arithmetic Operations
@dataclass
class AddOperation(ASTNode):
    left: "Expression"
    right: "Expression"


@dataclass
class SubOperation(ASTNode):
    left: "Expression"
    right: "Expression"


@dataclass
class MulOperation(ASTNode):
    left: "Expression"
    right: "Expression"


@dataclass
class DivOperation(ASTNode):
    left: "Expression"
    right: "Expression"


# Comparison Operations
@dataclass
class EqualOperation(ASTNode):
    left: "Expression"
    right: "Expression"


@dataclass
class NotEqualOperation(ASTNode):
    left: "Expression"
    right: "Expression"


@dataclass
class LessThanOperation(ASTNode):
    left: "Expression"
    right: "Expression"


@dataclass
class LessEqualOperation(ASTNode):
    left: "Expression"
    right: "Expression"


@dataclass
class GreaterThanOperation(ASTNode):
    left: "Expression"
    right: "Expression"


@dataclass
class GreaterEqualOperation(ASTNode):
    left: "Expression"
    right: "Expression"


# Logical Operations
@dataclass
class AndOperation(ASTNode):
    left: "Expression"
    right: "Expression"


@dataclass
class OrOperation(ASTNode):
    left: "Expression"
    right: "Expression"


# List construction (head :: tail)
@dataclass
class ConsExpression(ASTNode):
    head: "Expression"
    tail: "Expression"


# Control Flow
@dataclass
class IfElse(ASTNode):
    condition: "Expression"
    then_expr: "Expression"
    else_expr: "Expression"


@dataclass
class LetExpression(ASTNode):
    name: str
    value: "Expression"
    body: "Expression"
    is_recursive: bool = False


@dataclass
class MatchBranch(ASTNode):
    pattern: "Pattern"
    body: "Expression"


@dataclass
class MatchExpression(ASTNode):
    scrutinee: "Expression"
    branches: List[MatchBranch] = field(default_factory=list)


# Functions
@dataclass
class Lambda(ASTNode):
    pattern: "Pattern"
    body: "Expression"


@dataclass
class FunctionApplication(ASTNode):
    function: "Expression"
    argument: "Expression"


# Patterns
@dataclass
class WildcardPattern(ASTNode):
    pass


@dataclass
class LiteralPattern(ASTNode):
    value: Union[int, bool]


@dataclass
class EmptyListPattern(ASTNode):
    pass


@dataclass
class VariablePattern(ASTNode):
    name: str


@dataclass
class ConsPattern(ASTNode):
    head: "Pattern"
    tail: "Pattern"


# Top-level Declarations
@dataclass
class LetDeclaration(ASTNode):
    name: str
    value: "Expression"
    is_recursive: bool = False


@dataclass
class Program(ASTNode):
    statements: List["Statement"]


Expression: TypeAlias = Union[
    IntLiteral,
    BoolLiteral,
    EmptyList,
    TupleLiteral,
    Variable,
    AddOperation,
    SubOperation,
    MulOperation,
    DivOperation,
    EqualOperation,
    NotEqualOperation,
    LessThanOperation,
    LessEqualOperation,
    GreaterThanOperation,
    GreaterEqualOperation,
    AndOperation,
    OrOperation,
    ConsExpression,
    IfElse,
    LetExpression,
    MatchExpression,
    Lambda,
    FunctionApplication,
]

Pattern: TypeAlias = Union[
    WildcardPattern,
    LiteralPattern,
    EmptyListPattern,
    VariablePattern,
    ConsPattern,
]

Statement: TypeAlias = Union[
    LetDeclaration,
    Expression,
]
