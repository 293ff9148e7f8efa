import pytest
from lark.exceptions import UnexpectedInput

from miniml.ast.nodes import (
    AddOperation,
    BoolLiteral,
    ConsExpression,
    ConsPattern,
    EmptyList,
    EmptyListPattern,
    EqualOperation,
    FunctionApplication,
    IfElse,
    IntLiteral,
    Lambda,
    LessThanOperation,
    LetDeclaration,
    LetExpression,
    LiteralPattern,
    MatchBranch,
    MatchExpression,
    MulOperation,
    OrOperation,
    Program,
    SubOperation,
    TupleLiteral,
    Variable,
    VariablePattern,
    WildcardPattern,
)
from miniml.parser.parser import parse, parse_text


def single(source: str):
    program = parse_text(source)
    assert len(program.statements) == 1
    return program.statements[0]


def test_declarations() -> None:
    program = parse_text(
        """
        let x = 5 + 6
        let y = 7 + 8
        let z = x + y
        """,
    )
    assert program == Program(
        [
            LetDeclaration("x", AddOperation(IntLiteral(5), IntLiteral(6))),
            LetDeclaration("y", AddOperation(IntLiteral(7), IntLiteral(8))),
            LetDeclaration("z", AddOperation(Variable("x"), Variable("y"))),
        ],
    )


def test_recursive_function_declaration() -> None:
    stmt = single("let rec fact x = if x < 1 then 1 else x * fact (x - 1)")
    assert stmt == LetDeclaration(
        "fact",
        Lambda(
            VariablePattern("x"),
            IfElse(
                LessThanOperation(Variable("x"), IntLiteral(1)),
                IntLiteral(1),
                MulOperation(
                    Variable("x"),
                    FunctionApplication(
                        Variable("fact"),
                        SubOperation(Variable("x"), IntLiteral(1)),
                    ),
                ),
            ),
        ),
        is_recursive=True,
    )


def test_list_literal_desugars_to_cons_cells() -> None:
    assert single("[1; 2; 3]") == ConsExpression(
        IntLiteral(1),
        ConsExpression(IntLiteral(2), ConsExpression(IntLiteral(3), EmptyList())),
    )
    assert single("[]") == EmptyList()


def test_cons_is_right_associative() -> None:
    assert single("1 :: 2 :: []") == ConsExpression(
        IntLiteral(1),
        ConsExpression(IntLiteral(2), EmptyList()),
    )


def test_operator_precedence() -> None:
    assert single("1 + 2 * 3") == AddOperation(
        IntLiteral(1),
        MulOperation(IntLiteral(2), IntLiteral(3)),
    )
    assert single("f x + 1") == AddOperation(
        FunctionApplication(Variable("f"), Variable("x")),
        IntLiteral(1),
    )
    assert single("a == 1 || b") == OrOperation(
        EqualOperation(Variable("a"), IntLiteral(1)),
        Variable("b"),
    )


def test_application_is_left_associative() -> None:
    assert single("f a b") == FunctionApplication(
        FunctionApplication(Variable("f"), Variable("a")),
        Variable("b"),
    )


def test_lambda_parameters_are_curried() -> None:
    assert single("fun a b -> a") == Lambda(
        VariablePattern("a"),
        Lambda(VariablePattern("b"), Variable("a")),
    )


def test_tuples_and_grouping() -> None:
    assert single("(1, true)") == TupleLiteral([IntLiteral(1), BoolLiteral(True)])
    assert single("(1)") == IntLiteral(1)


def test_let_expression_and_separators() -> None:
    program = parse_text("let x = 1 in x;; x")
    assert program.statements == [
        LetExpression("x", IntLiteral(1), Variable("x")),
        Variable("x"),
    ]


def test_match_expression() -> None:
    stmt = single("match xs with | [] -> 0 | h :: _ -> h")
    assert stmt == MatchExpression(
        Variable("xs"),
        [
            MatchBranch(EmptyListPattern(), IntLiteral(0)),
            MatchBranch(
                ConsPattern(VariablePattern("h"), WildcardPattern()),
                Variable("h"),
            ),
        ],
    )


def test_literal_and_list_patterns() -> None:
    stmt = single("match p with true -> 1 | [a; 2] -> a")
    assert stmt.branches[0].pattern == LiteralPattern(True)
    assert stmt.branches[1].pattern == ConsPattern(
        VariablePattern("a"),
        ConsPattern(LiteralPattern(2), EmptyListPattern()),
    )


def test_comments_are_ignored() -> None:
    assert single("(* answer *) 42 (* done *)") == IntLiteral(42)


def test_keywords_are_not_identifiers() -> None:
    assert single("letter") == Variable("letter")
    with pytest.raises(UnexpectedInput):
        parse_text("let let = 1")


def test_syntax_error() -> None:
    with pytest.raises(UnexpectedInput):
        parse_text("let = 5")


def test_parse_file(tmp_path) -> None:
    source = tmp_path / "program.ml"
    source.write_text("let x = 1 == 1")
    assert parse(source) == Program(
        [LetDeclaration("x", EqualOperation(IntLiteral(1), IntLiteral(1)))],
    )
