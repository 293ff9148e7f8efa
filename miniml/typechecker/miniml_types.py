"""
Type representations for the Hindley-Milner type system
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, FrozenSet, ItemsView, Iterable, Optional, Set, Tuple

from miniml.typechecker.errors import OccursCheckError


class Type(ABC):
    """Base class for all types"""

    @abstractmethod
    def free_vars(self) -> Set[int]:
        """Return the set of free type variables in this type"""
        pass

    @abstractmethod
    def substitute(self, subst: Dict[int, "Type"]) -> "Type":
        """Apply a substitution to this type"""
        pass

    @abstractmethod
    def __str__(self) -> str:
        pass


@dataclass(frozen=True)
class TypeVar(Type):
    """Type variable, rendered as 'N"""

    id: int

    def free_vars(self) -> Set[int]:
        return {self.id}

    def substitute(self, subst: Dict[int, Type]) -> Type:
        return subst.get(self.id, self)

    def __str__(self) -> str:
        return f"'{self.id}"


@dataclass(frozen=True)
class TypeCon(Type):
    """Base type (int, bool)"""

    name: str

    def free_vars(self) -> Set[int]:
        return set()

    def substitute(self, subst: Dict[int, Type]) -> Type:
        return self

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class FunctionType(Type):
    """Function type (e.g., int -> bool, 'a -> 'b -> 'c)"""

    param: Type
    result: Type

    def free_vars(self) -> Set[int]:
        return self.param.free_vars() | self.result.free_vars()

    def substitute(self, subst: Dict[int, Type]) -> Type:
        return FunctionType(self.param.substitute(subst), self.result.substitute(subst))

    def __str__(self) -> str:
        # Handle right associativity of function types
        if isinstance(self.param, FunctionType):
            return f"({self.param}) -> {self.result}"
        else:
            return f"{self.param} -> {self.result}"


@dataclass(frozen=True)
class ListType(Type):
    """Homogeneous list type (e.g., int list)"""

    element: Type

    def free_vars(self) -> Set[int]:
        return self.element.free_vars()

    def substitute(self, subst: Dict[int, Type]) -> Type:
        return ListType(self.element.substitute(subst))

    def __str__(self) -> str:
        return f"{self.element} list"


@dataclass(frozen=True)
class TupleType(Type):
    """Tuple type (e.g., (int * bool))"""

    element_types: Tuple[Type, ...]

    def free_vars(self) -> Set[int]:
        result: Set[int] = set()
        for elem in self.element_types:
            result |= elem.free_vars()
        return result

    def substitute(self, subst: Dict[int, Type]) -> Type:
        return TupleType(tuple(elem.substitute(subst) for elem in self.element_types))

    def __str__(self) -> str:
        parts = []
        for elem in self.element_types:
            if isinstance(elem, FunctionType):
                parts.append(f"({elem})")
            else:
                parts.append(str(elem))
        return "(" + " * ".join(parts) + ")"


# Built-in types
INT_TYPE = TypeCon("int")
BOOL_TYPE = TypeCon("bool")


class TypeSubstitution:
    """Represents a type substitution (mapping from type variables to types).

    Instances are never mutated. New substitutions are produced by
    ``singleton`` here and by ``extend``/``compose`` in ``unify``, which keep
    the mapping in solved form so that ``apply`` needs a single lookup per
    variable.
    """

    def __init__(self, mapping: Optional[Dict[int, Type]] = None):
        self.mapping = mapping or {}

    @classmethod
    def singleton(cls, var: int, typ: Type) -> "TypeSubstitution":
        """Bind one variable, rejecting infinite types"""
        if occurs_in(var, typ):
            raise OccursCheckError(var, typ)
        return cls({var: typ})

    def apply(self, t: Type) -> Type:
        """Apply this substitution to a type"""
        if not self.mapping:
            return t
        return t.substitute(self.mapping)

    def lookup(self, var: int) -> Optional[Type]:
        return self.mapping.get(var)

    def without(self, variables: Iterable[int]) -> "TypeSubstitution":
        """Return a copy with the given variables removed from the domain"""
        removed = set(variables)
        return TypeSubstitution(
            {var: typ for var, typ in self.mapping.items() if var not in removed},
        )

    def items(self) -> ItemsView[int, Type]:
        return self.mapping.items()

    def __contains__(self, var: int) -> bool:
        return var in self.mapping

    def __len__(self) -> int:
        return len(self.mapping)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeSubstitution):
            return NotImplemented
        return self.mapping == other.mapping

    def __repr__(self) -> str:
        return f"TypeSubstitution({self.mapping!r})"

    def __str__(self) -> str:
        if not self.mapping:
            return "∅"
        items = [f"{TypeVar(var)} ↦ {typ}" for var, typ in sorted(self.mapping.items())]
        return "{" + ", ".join(items) + "}"


def occurs_in(var: int, typ: Type) -> bool:
    """Check if a type variable occurs within a type (prevents infinite types)"""
    match typ:
        case TypeVar(id=id_):
            return var == id_
        case TypeCon():
            return False
        case FunctionType(param=param, result=result):
            return occurs_in(var, param) or occurs_in(var, result)
        case ListType(element=element):
            return occurs_in(var, element)
        case TupleType(element_types=element_types):
            return any(occurs_in(var, elem) for elem in element_types)
        case _:
            raise TypeError(f"Unknown type in occurs check: {type(typ)}")


class TypeScheme:
    """Polymorphic type scheme (∀ a₁ a₂ ... aₙ . τ)"""

    def __init__(self, quantified_vars: Iterable[int], type_: Type):
        self.quantified_vars: FrozenSet[int] = frozenset(quantified_vars)
        self.type = type_

    @classmethod
    def monomorphic(cls, type_: Type) -> "TypeScheme":
        return cls(frozenset(), type_)

    def free_vars(self) -> Set[int]:
        """Free variables are those in the type minus the quantified ones"""
        return self.type.free_vars() - self.quantified_vars

    def substitute(self, subst: TypeSubstitution) -> "TypeScheme":
        """Apply substitution, being careful not to substitute quantified variables"""
        return TypeScheme(
            self.quantified_vars,
            subst.without(self.quantified_vars).apply(self.type),
        )

    def instantiate(self, fresh_var_gen: "FreshVarGenerator") -> Type:
        """Create a fresh instance of this type scheme by replacing quantified variables"""
        if not self.quantified_vars:
            return self.type

        subst_mapping: Dict[int, Type] = {}
        for var in sorted(self.quantified_vars):
            subst_mapping[var] = TypeVar(fresh_var_gen.fresh())

        return TypeSubstitution(subst_mapping).apply(self.type)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeScheme):
            return NotImplemented
        return self.quantified_vars == other.quantified_vars and self.type == other.type

    def __repr__(self) -> str:
        return f"TypeScheme({sorted(self.quantified_vars)!r}, {self.type!r})"

    def __str__(self) -> str:
        if not self.quantified_vars:
            return str(self.type)
        vars_str = " ".join(str(TypeVar(var)) for var in sorted(self.quantified_vars))
        return f"∀ {vars_str} . {self.type}"


class FreshVarGenerator:
    """Generates fresh type variable ids, one generator per inference run"""

    def __init__(self) -> None:
        self.counter = 0

    def fresh(self) -> int:
        """Generate a fresh type variable id"""
        var = self.counter
        self.counter += 1
        return var
