"""Core actions and core rules, and the canonicalization of rule bodies."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Hashable, Mapping

from .terms import Atom, AtomTerm, LiteralTerm, Query, VarTerm


class _EqHead:
    """The head of an equality atom in a rule body."""

    _instance: "_EqHead | None" = None

    def __new__(cls) -> "_EqHead":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "EQ"

    def __str__(self) -> str:
        return "="


EQ = _EqHead()
"""Head marking an equality constraint between the two arguments of an atom."""

UNIT = ()
"""The unit literal value, used as the output of equality checks."""


@dataclass(frozen=True)
class Let:
    """Bind ``var`` to the result of applying ``head`` to ``args``."""

    var: Hashable
    head: Any
    args: tuple = ()
    span: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class LetAtomTerm:
    """Bind ``var`` to an existing term."""

    var: Hashable
    term: AtomTerm
    span: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class Extract:
    """Extract ``expr`` with ``variants`` alternatives."""

    expr: AtomTerm
    variants: AtomTerm
    span: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class Set:
    """Set ``head`` applied to ``args`` to ``rhs``."""

    head: Any
    args: tuple
    rhs: AtomTerm
    span: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class Change:
    """Apply a change (such as deletion or subsumption) to a function entry."""

    change: Any
    head: Any
    args: tuple = ()
    span: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class Union:
    """Merge the classes of two terms."""

    lhs: AtomTerm
    rhs: AtomTerm
    span: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class Panic:
    """Abort with ``message``."""

    message: str
    span: Any = field(default=None, compare=False)


@dataclass
class CoreActions:
    """A sequence of core actions, run in order."""

    actions: list = field(default_factory=list)

    def subst(self, mapping: Mapping[Hashable, AtomTerm]) -> None:
        """Prepend a binding for each substituted variable."""
        bindings = [
            LetAtomTerm(var, term, getattr(term, "span", None))
            for var, term in mapping.items()
        ]
        self.actions = bindings + self.actions

    def __iter__(self):
        return iter(self.actions)

    def __len__(self) -> int:
        return len(self.actions)


def _var_to_substitute(atom: Atom) -> tuple[Hashable, AtomTerm] | None:
    if atom.head is not EQ or atom.args[0] == atom.args[1]:
        return None
    first, second = atom.args[0], atom.args[1]
    if isinstance(first, VarTerm):
        return first.name, second
    if isinstance(second, VarTerm):
        return second.name, first
    return None


@dataclass
class CoreRule:
    """A rule with a conjunctive-query body and a core-action head."""

    body: Query = field(default_factory=Query)
    head: CoreActions = field(default_factory=CoreActions)
    span: Any = None

    def subst(self, mapping: Mapping[Hashable, AtomTerm]) -> None:
        """Substitute variables in the body and bind them at the start of the head."""
        for atom in self.body.atoms:
            atom.subst(mapping)
        self.head.subst(mapping)

    def canonicalize(
        self, value_eq: Callable[[AtomTerm, AtomTerm], Any]
    ) -> CoreRule:
        """Return a rule whose body holds no equality atoms on variables.

        Equalities involving a variable are eliminated by substitution;
        equalities between distinct non-variable terms become atoms headed by
        ``value_eq(lhs, rhs)`` with a unit output.
        """
        rule = CoreRule(
            Query([replace(atom, args=list(atom.args)) for atom in self.body.atoms]),
            CoreActions(list(self.head.actions)),
            self.span,
        )
        while True:
            found = next(
                (s for s in map(_var_to_substitute, rule.body.atoms) if s is not None),
                None,
            )
            if found is None:
                break
            var, term = found
            rule.subst({var: term})

        atoms = []
        for atom in rule.body.atoms:
            if atom.head is not EQ:
                atoms.append(atom)
                continue
            if len(atom.args) != 2:
                raise ValueError(f"equality atom must have two arguments: {atom}")
            lhs, rhs = atom.args
            lhs_var, rhs_var = isinstance(lhs, VarTerm), isinstance(rhs, VarTerm)
            if lhs_var and rhs_var:
                if lhs != rhs:
                    raise ValueError(f"unresolved equality between variables: {atom}")
                continue
            if lhs_var or rhs_var:
                raise ValueError(
                    "equalities between variable and non-variable arguments "
                    "should have been canonicalized"
                )
            if lhs == rhs:
                continue
            atoms.append(
                Atom(
                    head=value_eq(lhs, rhs),
                    args=[lhs, rhs, LiteralTerm(UNIT, atom.span)],
                    span=atom.span,
                )
            )
        return CoreRule(Query(atoms), rule.head, rule.span)