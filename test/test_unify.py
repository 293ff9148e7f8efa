import pytest

from miniml.typechecker.errors import OccursCheckError, UnificationError
from miniml.typechecker.miniml_types import (
    BOOL_TYPE,
    INT_TYPE,
    FunctionType,
    ListType,
    TupleType,
    TypeSubstitution,
    TypeVar,
)
from miniml.typechecker.unify import compose, compose_all, extend, unify

a = TypeVar(0)
b = TypeVar(1)
c = TypeVar(2)


def test_base_types_unify_with_themselves() -> None:
    assert unify(INT_TYPE, INT_TYPE) == TypeSubstitution()
    assert unify(BOOL_TYPE, BOOL_TYPE) == TypeSubstitution()


def test_int_and_bool_do_not_unify() -> None:
    with pytest.raises(UnificationError) as exc_info:
        unify(INT_TYPE, BOOL_TYPE)
    assert exc_info.value.left == INT_TYPE
    assert exc_info.value.right == BOOL_TYPE
    assert str(exc_info.value) == "Unification fail on int and bool"


def test_variable_unifies_with_itself() -> None:
    assert unify(a, a) == TypeSubstitution()


def test_variable_binds_on_either_side() -> None:
    assert unify(a, INT_TYPE).mapping == {0: INT_TYPE}
    assert unify(INT_TYPE, a).mapping == {0: INT_TYPE}
    assert unify(a, b).mapping == {0: b}


@pytest.mark.parametrize(
    "typ",
    [
        ListType(a),
        FunctionType(a, INT_TYPE),
        FunctionType(INT_TYPE, ListType(a)),
        TupleType((BOOL_TYPE, a)),
    ],
    ids=str,
)
def test_occurs_check(typ) -> None:
    with pytest.raises(OccursCheckError):
        unify(a, typ)
    with pytest.raises(OccursCheckError):
        unify(typ, a)


def test_function_types_unify_pointwise() -> None:
    subst = unify(FunctionType(a, b), FunctionType(INT_TYPE, BOOL_TYPE))
    assert subst.mapping == {0: INT_TYPE, 1: BOOL_TYPE}


def test_domain_solution_flows_into_codomain() -> None:
    subst = unify(FunctionType(a, a), FunctionType(INT_TYPE, b))
    assert subst.apply(b) == INT_TYPE


def test_list_types_unify_elements() -> None:
    assert unify(ListType(a), ListType(INT_TYPE)).mapping == {0: INT_TYPE}
    with pytest.raises(UnificationError):
        unify(ListType(INT_TYPE), ListType(BOOL_TYPE))


def test_tuples_of_different_arity_fail() -> None:
    left = TupleType((INT_TYPE, INT_TYPE))
    right = TupleType((INT_TYPE,))
    with pytest.raises(UnificationError) as exc_info:
        unify(left, right)
    assert exc_info.value.left == left
    assert exc_info.value.right == right


def test_tuple_components_are_combined() -> None:
    subst = unify(TupleType((a, b)), TupleType((INT_TYPE, a)))
    assert subst.mapping == {0: INT_TYPE, 1: INT_TYPE}


def test_mismatched_constructors_fail() -> None:
    with pytest.raises(UnificationError):
        unify(ListType(a), FunctionType(a, b))
    with pytest.raises(UnificationError):
        unify(TupleType((INT_TYPE,)), ListType(INT_TYPE))


def test_apply_is_a_single_lookup() -> None:
    subst = TypeSubstitution({0: b, 1: INT_TYPE})
    assert subst.apply(a) == b
    assert subst.apply(FunctionType(a, b)) == FunctionType(b, INT_TYPE)


def test_extend_rewrites_existing_targets() -> None:
    subst = extend(TypeSubstitution({0: ListType(b)}), 1, INT_TYPE)
    assert subst.mapping == {0: ListType(INT_TYPE), 1: INT_TYPE}


def test_extend_resolves_new_target_through_substitution() -> None:
    subst = extend(TypeSubstitution({1: INT_TYPE}), 0, ListType(b))
    assert subst.mapping == {0: ListType(INT_TYPE), 1: INT_TYPE}


def test_extend_rebinding_unifies_targets() -> None:
    subst = extend(TypeSubstitution({0: ListType(b)}), 0, ListType(INT_TYPE))
    assert subst.mapping == {0: ListType(INT_TYPE), 1: INT_TYPE}


def test_extend_rebinding_to_incompatible_type_fails() -> None:
    with pytest.raises(UnificationError):
        extend(TypeSubstitution({0: INT_TYPE}), 0, BOOL_TYPE)


def test_extend_rejects_cycles() -> None:
    with pytest.raises(OccursCheckError):
        extend(TypeSubstitution({0: ListType(b)}), 1, a)


def test_extend_does_not_mutate() -> None:
    original = TypeSubstitution({0: b})
    extend(original, 1, INT_TYPE)
    assert original.mapping == {0: b}


def test_compose_folds_first_into_second() -> None:
    subst = compose(TypeSubstitution({0: INT_TYPE}), TypeSubstitution({1: ListType(a)}))
    assert subst.mapping == {0: INT_TYPE, 1: ListType(INT_TYPE)}


def test_compose_conflicting_bindings_fail() -> None:
    with pytest.raises(UnificationError):
        compose(TypeSubstitution({0: INT_TYPE}), TypeSubstitution({0: BOOL_TYPE}))


def test_compose_all() -> None:
    assert compose_all([]) == TypeSubstitution()
    subst = compose_all(
        [
            TypeSubstitution({0: b}),
            TypeSubstitution({1: c}),
            TypeSubstitution({2: BOOL_TYPE}),
        ],
    )
    assert subst.apply(a) == BOOL_TYPE
    assert subst.apply(b) == BOOL_TYPE
