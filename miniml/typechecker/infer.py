"""
AST-based type inference engine using the Hindley-Milner algorithm.
"""

import logging
from typing import List, Optional, Tuple

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
    Statement,
    SubOperation,
    TupleLiteral,
    Variable,
    VariablePattern,
    WildcardPattern,
)
from miniml.typechecker.environment import (
    TypeEnvironment,
    generalize,
    generalize_rec,
)
from miniml.typechecker.errors import TypeInferenceError, UndefinedVariableError
from miniml.typechecker.miniml_types import (
    BOOL_TYPE,
    INT_TYPE,
    FreshVarGenerator,
    FunctionType,
    ListType,
    TupleType,
    Type,
    TypeScheme,
    TypeSubstitution,
    TypeVar,
)
from miniml.typechecker.unify import compose, compose_all, unify

logger = logging.getLogger(__name__)

InferenceResult = Tuple[TypeSubstitution, Type]
PatternResult = Tuple[TypeEnvironment, Type]


class TypeInferrer:
    """Hindley-Milner type inference engine.

    One instance serves exactly one inference run: it owns the fresh variable
    counter, so variable numbering starts at 0 for every run.
    """

    def __init__(self) -> None:
        self.fresh_var_gen = FreshVarGenerator()

    def fresh_type_var(self) -> TypeVar:
        """Generate a fresh type variable."""
        return TypeVar(self.fresh_var_gen.fresh())

    # Patterns

    def infer_pattern(self, pattern: Pattern, env: TypeEnvironment) -> PatternResult:
        """Infer the type of a pattern and the environment it extends."""
        match pattern:
            case WildcardPattern():
                return env, self.fresh_type_var()
            case LiteralPattern(value=bool()):
                return env, BOOL_TYPE
            case LiteralPattern(value=int()):
                return env, INT_TYPE
            case EmptyListPattern():
                return env, ListType(self.fresh_type_var())
            case VariablePattern(name=name):
                # A name that is already bound keeps its type
                scheme = env.lookup(name)
                if scheme is not None:
                    return env, scheme.type
                type_var = self.fresh_type_var()
                return env.extend(name, TypeScheme.monomorphic(type_var)), type_var
            case ConsPattern(head=head, tail=tail):
                head_env, head_type = self.infer_pattern(head, env)
                tail_env, tail_type = self.infer_pattern(tail, head_env)
                subst = unify(ListType(head_type), tail_type)
                return (
                    tail_env.apply_substitution(subst),
                    subst.apply(ListType(head_type)),
                )
            case _:
                raise TypeError(f"Unhandled pattern type: {type(pattern).__name__}")

    # Expressions

    def infer_expr(self, expr: Expression, env: TypeEnvironment) -> InferenceResult:
        """Infer the type of an expression."""
        match expr:
            # Literals
            case IntLiteral():
                return TypeSubstitution(), INT_TYPE
            case BoolLiteral():
                return TypeSubstitution(), BOOL_TYPE
            case EmptyList():
                return TypeSubstitution(), ListType(self.fresh_type_var())

            case Variable(name=name):
                return self._infer_identifier(name, env)

            # Binary operations
            case (
                AddOperation() | SubOperation() | MulOperation() | DivOperation()
            ) as op:
                return self._infer_arithmetic_op(op.left, op.right, env)

            case (
                EqualOperation()
                | NotEqualOperation()
                | LessThanOperation()
                | LessEqualOperation()
                | GreaterThanOperation()
                | GreaterEqualOperation()
                | AndOperation()
                | OrOperation()
            ) as op:
                return self._infer_comparison_op(op.left, op.right, env)

            # Data
            case TupleLiteral(elements=elements):
                return self._infer_tuple(elements, env)
            case ConsExpression(head=head, tail=tail):
                return self._infer_cons(head, tail, env)

            # Control flow
            case IfElse(condition=cond, then_expr=then_expr, else_expr=else_expr):
                return self._infer_if_else(cond, then_expr, else_expr, env)
            case MatchExpression(scrutinee=scrutinee, branches=branches):
                return self._infer_match(scrutinee, branches, env)

            # Functions
            case Lambda(pattern=pattern, body=body):
                pattern_env, pattern_type = self.infer_pattern(pattern, env)
                subst, body_type = self.infer_expr(body, pattern_env)
                return subst, subst.apply(FunctionType(pattern_type, body_type))
            case FunctionApplication(function=func_expr, argument=arg_expr):
                return self._infer_function_application(func_expr, arg_expr, env)

            # Bindings
            case LetExpression(
                name=name, value=value, body=body, is_recursive=False
            ):
                return self._infer_let(name, value, body, env)
            case LetExpression(name=name, value=value, body=body, is_recursive=True):
                return self._infer_let_rec(name, value, body, env)

            case _:
                raise TypeError(f"Unhandled expression type: {type(expr).__name__}")

    def _infer_identifier(self, name: str, env: TypeEnvironment) -> InferenceResult:
        scheme = env.lookup(name)
        if scheme is None:
            raise UndefinedVariableError(name)
        return TypeSubstitution(), scheme.instantiate(self.fresh_var_gen)

    def _infer_arithmetic_op(
        self,
        left: Expression,
        right: Expression,
        env: TypeEnvironment,
    ) -> InferenceResult:
        """Both operands are inferred from the same environment."""
        left_subst, left_type = self.infer_expr(left, env)
        right_subst, right_type = self.infer_expr(right, env)
        left_int = unify(left_type, INT_TYPE)
        right_int = unify(right_type, INT_TYPE)
        return (
            compose_all([left_subst, right_subst, left_int, right_int]),
            INT_TYPE,
        )

    def _infer_comparison_op(
        self,
        left: Expression,
        right: Expression,
        env: TypeEnvironment,
    ) -> InferenceResult:
        """Comparison and logical operators only require equal operand types."""
        left_subst, left_type = self.infer_expr(left, env)
        right_subst, right_type = self.infer_expr(right, env)
        operands = unify(left_type, right_type)
        return compose_all([left_subst, right_subst, operands]), BOOL_TYPE

    def _infer_tuple(
        self,
        elements: List[Expression],
        env: TypeEnvironment,
    ) -> InferenceResult:
        subst = TypeSubstitution()
        element_types: List[Type] = []
        for element in elements:
            elem_subst, elem_type = self.infer_expr(element, env)
            subst = compose(subst, elem_subst)
            element_types.append(elem_type)
        return subst, TupleType(tuple(subst.apply(t) for t in element_types))

    def _infer_cons(
        self,
        head: Expression,
        tail: Expression,
        env: TypeEnvironment,
    ) -> InferenceResult:
        head_subst, head_type = self.infer_expr(head, env)
        tail_subst, tail_type = self.infer_expr(
            tail,
            env.apply_substitution(head_subst),
        )
        elem_subst = unify(ListType(head_type), tail_type)
        return (
            compose_all([head_subst, tail_subst, elem_subst]),
            elem_subst.apply(tail_type),
        )

    def _infer_if_else(
        self,
        cond: Expression,
        then_expr: Expression,
        else_expr: Expression,
        env: TypeEnvironment,
    ) -> InferenceResult:
        cond_subst, cond_type = self.infer_expr(cond, env)
        then_subst, then_type = self.infer_expr(then_expr, env)
        else_subst, else_type = self.infer_expr(else_expr, env)
        cond_bool = unify(cond_type, BOOL_TYPE)
        branches = unify(then_type, else_type)
        final_subst = compose_all(
            [cond_subst, then_subst, else_subst, cond_bool, branches],
        )
        return final_subst, branches.apply(else_type)

    def _infer_function_application(
        self,
        func_expr: Expression,
        arg_expr: Expression,
        env: TypeEnvironment,
    ) -> InferenceResult:
        func_subst, func_type = self.infer_expr(func_expr, env)
        arg_subst, arg_type = self.infer_expr(
            arg_expr,
            env.apply_substitution(func_subst),
        )
        result_type = self.fresh_type_var()
        call_subst = unify(
            arg_subst.apply(func_type),
            FunctionType(arg_type, result_type),
        )
        return (
            compose_all([func_subst, arg_subst, call_subst]),
            call_subst.apply(result_type),
        )

    def _infer_let(
        self,
        name: str,
        value: Expression,
        body: Expression,
        env: TypeEnvironment,
    ) -> InferenceResult:
        value_subst, value_type = self.infer_expr(value, env)
        env = env.apply_substitution(value_subst)
        scheme = generalize(env, value_type)
        body_subst, body_type = self.infer_expr(body, env.extend(name, scheme))
        return compose(value_subst, body_subst), body_type

    def _infer_let_rec(
        self,
        name: str,
        value: Expression,
        body: Expression,
        env: TypeEnvironment,
    ) -> InferenceResult:
        placeholder = self.fresh_type_var()
        env = env.extend(name, TypeScheme.monomorphic(placeholder))
        value_subst, value_type = self.infer_expr(value, env)
        self_subst = unify(value_subst.apply(placeholder), value_type)
        subst = compose(value_subst, self_subst)
        env = env.apply_substitution(subst)
        scheme = generalize_rec(env, subst.apply(placeholder), name)
        body_subst, body_type = self.infer_expr(
            body,
            env.apply_substitution(subst).extend(name, scheme),
        )
        return compose(subst, body_subst), body_type

    def _infer_match(
        self,
        scrutinee: Expression,
        branches: List[MatchBranch],
        env: TypeEnvironment,
    ) -> InferenceResult:
        scrutinee_subst, scrutinee_type = self.infer_expr(scrutinee, env)
        subst: TypeSubstitution = scrutinee_subst
        result_type: Type = self.fresh_type_var()

        for branch in branches:
            # Every branch starts from the environment of the match itself
            pattern_env, pattern_type = self.infer_pattern(branch.pattern, env)
            pattern_subst = unify(subst.apply(scrutinee_type), pattern_type)
            body_subst, body_type = self.infer_expr(branch.body, pattern_env)
            result_subst = unify(result_type, body_type)
            subst = compose_all([subst, pattern_subst, body_subst, result_subst])
            result_type = subst.apply(result_type)

        final_subst = compose(scrutinee_subst, subst)
        return final_subst, final_subst.apply(result_type)

    # Top level

    def infer_statement(
        self,
        stmt: Statement,
        env: TypeEnvironment,
    ) -> TypeEnvironment:
        """Infer one top-level statement and return the updated environment."""
        match stmt:
            case LetDeclaration(name=name, value=value, is_recursive=False):
                subst, typ = self.infer_expr(value, env)
                env = env.apply_substitution(subst)
                scheme = generalize(env, typ)
            case LetDeclaration(name=name, value=value, is_recursive=True):
                placeholder = self.fresh_type_var()
                env = env.extend(name, TypeScheme.monomorphic(placeholder))
                value_subst, value_type = self.infer_expr(value, env)
                self_subst = unify(value_type, placeholder)
                subst = compose(value_subst, self_subst)
                env = env.apply_substitution(subst)
                scheme = generalize_rec(env, subst.apply(value_type), name)
            case _:
                self.infer_expr(stmt, env)
                return env

        logger.debug("inferred %s : %s", name, scheme)
        return env.extend(name, scheme)

    def infer_program(
        self,
        program: Program,
        env: Optional[TypeEnvironment] = None,
    ) -> TypeEnvironment:
        """Infer every statement in order, stopping at the first error."""
        if env is None:
            env = TypeEnvironment()
        for index, stmt in enumerate(program.statements):
            try:
                env = self.infer_statement(stmt, env)
            except TypeInferenceError as e:
                logger.debug("inference stopped at statement %d: %s", index, e)
                raise
        return env


def infer_program(program: Program) -> TypeEnvironment:
    """Run type inference over a whole program with a fresh inferrer."""
    return TypeInferrer().infer_program(program)


def infer_expression(expr: Expression, env: Optional[TypeEnvironment] = None) -> Type:
    """Infer the type of a single expression with a fresh inferrer."""
    if env is None:
        env = TypeEnvironment()
    subst, typ = TypeInferrer().infer_expr(expr, env)
    return subst.apply(typ)
