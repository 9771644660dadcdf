"""Atom terms, atoms and conjunctive queries of the core rule language."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable, Iterable, Iterator, Mapping, Union


@dataclass(frozen=True)
class VarTerm:
    """A query or action variable. Equality and hashing ignore the span."""

    name: Hashable
    span: Any = field(default=None, compare=False)

    def __str__(self) -> str:
        return str(self.name)


@dataclass(frozen=True)
class LiteralTerm:
    """A literal constant. Equality and hashing ignore the span."""

    value: Hashable
    span: Any = field(default=None, compare=False)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class GlobalTerm:
    """A reference to a global binding. Equality and hashing ignore the span."""

    name: Hashable
    span: Any = field(default=None, compare=False)

    def __str__(self) -> str:
        return str(self.name)


AtomTerm = Union[VarTerm, LiteralTerm, GlobalTerm]


@dataclass
class Atom:
    """A head applied to argument terms; the last argument is the output."""

    head: Any
    args: list = field(default_factory=list)
    span: Any = None

    def vars(self) -> Iterator[Hashable]:
        """Names of the variable arguments, in argument order."""
        for arg in self.args:
            if isinstance(arg, VarTerm):
                yield arg.name

    def subst(self, mapping: Mapping[Hashable, AtomTerm]) -> None:
        """Replace each variable argument named in ``mapping`` by its term."""
        self.args = [
            mapping.get(arg.name, arg) if isinstance(arg, VarTerm) else arg
            for arg in self.args
        ]

    def __str__(self) -> str:
        return f"({self.head} {' '.join(str(arg) for arg in self.args)}) "


@dataclass
class Query:
    """A conjunction of atoms."""

    atoms: list = field(default_factory=list)

    def get_vars(self) -> list:
        """Distinct variable names in order of first occurrence."""
        return list(dict.fromkeys(v for atom in self.atoms for v in atom.vars()))

    def atom_terms(self) -> set:
        """Every distinct term used as an argument in any atom."""
        return {arg for atom in self.atoms for arg in atom.args}

    def extend(self, other: Union[Query, Iterable[Atom]]) -> None:
        """Append the atoms of another query (or any iterable of atoms)."""
        atoms = other.atoms if isinstance(other, Query) else other
        self.atoms.extend(atoms)

    def __iadd__(self, other: Union[Query, Iterable[Atom]]) -> Query:
        self.extend(other)
        return self

    def __str__(self) -> str:
        return "".join(f"{atom}\n" for atom in self.atoms)