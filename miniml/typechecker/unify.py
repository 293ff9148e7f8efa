"""
Unification algorithm for the Hindley-Milner type system.

Substitutions are combined only through ``extend`` and ``compose``; both
re-validate bindings so the result stays acyclic and in solved form.
"""

from typing import Iterable

from miniml.typechecker.errors import OccursCheckError, UnificationError
from miniml.typechecker.miniml_types import (
    FunctionType,
    ListType,
    TupleType,
    Type,
    TypeCon,
    TypeSubstitution,
    TypeVar,
    occurs_in,
)


def unify(t1: Type, t2: Type) -> TypeSubstitution:
    """Unify two types and return the most general unifier"""
    match (t1, t2):
        case (TypeCon(name=name1), TypeCon(name=name2)) if name1 == name2:
            return TypeSubstitution()
        case (TypeVar(id=id1), TypeVar(id=id2)) if id1 == id2:
            return TypeSubstitution()
        case (TypeVar(id=var), _):
            return TypeSubstitution.singleton(var, t2)
        case (_, TypeVar(id=var)):
            return TypeSubstitution.singleton(var, t1)
        case (
            FunctionType(param=param1, result=result1),
            FunctionType(param=param2, result=result2),
        ):
            s1 = unify(param1, param2)
            s2 = unify(s1.apply(result1), s1.apply(result2))
            return compose(s1, s2)
        case (ListType(element=elem1), ListType(element=elem2)):
            return unify(elem1, elem2)
        case (
            TupleType(element_types=elem_types1),
            TupleType(element_types=elem_types2),
        ):
            if len(elem_types1) != len(elem_types2):
                raise UnificationError(t1, t2)

            subst = TypeSubstitution()
            for elem1, elem2 in reversed(list(zip(elem_types1, elem_types2))):
                subst = compose(unify(elem1, elem2), subst)
            return subst
        case _:
            raise UnificationError(t1, t2)


def extend(subst: TypeSubstitution, var: int, typ: Type) -> TypeSubstitution:
    """Add the binding var ↦ typ to subst.

    A variable that is already bound has its two targets unified instead.
    Otherwise the new target is resolved through subst and every existing
    target is rewritten through the new binding.
    """
    bound = subst.lookup(var)
    if bound is not None:
        return compose(subst, unify(typ, bound))

    typ = subst.apply(typ)
    binding = TypeSubstitution.singleton(var, typ)
    mapping = dict(binding.mapping)
    for other_var, other_typ in sorted(subst.items()):
        other_typ = binding.apply(other_typ)
        if occurs_in(other_var, other_typ):
            raise OccursCheckError(other_var, other_typ)
        mapping[other_var] = other_typ
    return TypeSubstitution(mapping)


def compose(s1: TypeSubstitution, s2: TypeSubstitution) -> TypeSubstitution:
    """Fold every binding of s1 into s2"""
    result = s2
    for var, typ in sorted(s1.items()):
        result = extend(result, var, typ)
    return result


def compose_all(substs: Iterable[TypeSubstitution]) -> TypeSubstitution:
    result = TypeSubstitution()
    for subst in substs:
        result = compose(result, subst)
    return result
