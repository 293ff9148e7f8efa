from typing import Dict, ItemsView, Iterator, Optional, Set

from miniml.typechecker.miniml_types import Type, TypeScheme, TypeSubstitution

TypeBindings = Dict[str, TypeScheme]


class TypeEnvironment:
    """Type environment mapping identifiers to type schemes.

    Environments are persistent: every update returns a new environment, so
    sibling branches can start from the same value.
    """

    def __init__(self, bindings: Optional[TypeBindings] = None) -> None:
        self.bindings: TypeBindings = bindings or {}

    def lookup(self, name: str) -> Optional[TypeScheme]:
        """Look up a name in the environment and return its type scheme."""
        return self.bindings.get(name)

    def extend(self, name: str, scheme: TypeScheme) -> "TypeEnvironment":
        """Return a new environment with an additional binding."""
        new_bindings = self.bindings.copy()
        new_bindings[name] = scheme
        return TypeEnvironment(new_bindings)

    def remove(self, name: str) -> "TypeEnvironment":
        """Return a new environment without the given binding."""
        new_bindings = self.bindings.copy()
        new_bindings.pop(name, None)
        return TypeEnvironment(new_bindings)

    def apply_substitution(self, subst: TypeSubstitution) -> "TypeEnvironment":
        """Apply a type substitution to all bindings in the environment."""
        if not subst.mapping:
            return self
        return TypeEnvironment(
            {name: scheme.substitute(subst) for name, scheme in self.bindings.items()},
        )

    def free_type_vars(self) -> Set[int]:
        """Return all free type variables in this environment."""
        free_vars: Set[int] = set()
        for scheme in self.bindings.values():
            free_vars.update(scheme.free_vars())
        return free_vars

    def items(self) -> ItemsView[str, TypeScheme]:
        return self.bindings.items()

    def __contains__(self, name: str) -> bool:
        return name in self.bindings

    def __getitem__(self, name: str) -> TypeScheme:
        return self.bindings[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.bindings)

    def __len__(self) -> int:
        return len(self.bindings)

    def __str__(self) -> str:
        return "{" + ", ".join(f"{name}: {scheme}" for name, scheme in self.items()) + "}"


def generalize(env: TypeEnvironment, typ: Type) -> TypeScheme:
    """Quantify the variables of typ that are not free in env"""
    return TypeScheme(typ.free_vars() - env.free_type_vars(), typ)


def generalize_rec(env: TypeEnvironment, typ: Type, name: str) -> TypeScheme:
    """Generalize a recursive binding, ignoring its own placeholder in env"""
    return generalize(env.remove(name), typ)
