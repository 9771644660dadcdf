"""Type constraints generated for applications of functions and primitives.

Each constraint builder turns the argument terms of an atom (inputs followed
by the output) into solver constraints over those terms. The output
argument always comes last.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Hashable, Mapping, Optional, Sequence

from .solver import And, ArityMismatch, Assign, Eq, Impossible, Xor
from .terms import Atom


class UnboundFunctionError(LookupError):
    """Raised when a head names neither a function nor a primitive."""

    def __init__(self, head: Hashable, span: Any = None) -> None:
        super().__init__(f"unbound function {head}")
        self.head = head
        self.span = span


def _arity_mismatch(name: Hashable, arguments: Sequence, expected: int, span: Any):
    atom = Atom(head=name, args=list(arguments), span=span)
    return Impossible(ArityMismatch(atom, expected))


@dataclass(frozen=True)
class SimpleTypeConstraint:
    """Assigns a fixed sort to every argument, the output included."""

    name: Hashable
    sorts: tuple
    span: Any = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "sorts", tuple(self.sorts))

    def get(self, arguments: Sequence) -> list:
        """Constraints for applying this signature to ``arguments``."""
        if len(arguments) != len(self.sorts):
            return [_arity_mismatch(self.name, arguments, len(self.sorts), self.span)]
        return [Assign(arg, sort) for arg, sort in zip(arguments, self.sorts)]


@dataclass(frozen=True)
class AllEqualTypeConstraint:
    """Requires all arguments to share one sort, with optional refinements."""

    name: Hashable
    span: Any = field(default=None, compare=False)
    sort: Any = None
    exact_length: Optional[int] = None
    output: Any = None

    def with_all_arguments_sort(self, sort: Any) -> AllEqualTypeConstraint:
        """Require every argument to have ``sort``.

        Unless an output sort is also given, this covers the output too.
        """
        return replace(self, sort=sort)

    def with_exact_length(self, exact_length: int) -> AllEqualTypeConstraint:
        """Require exactly ``exact_length`` arguments, the output included."""
        return replace(self, exact_length=exact_length)

    def with_output_sort(self, output_sort: Any) -> AllEqualTypeConstraint:
        """Require the output argument to have ``output_sort``."""
        return replace(self, output=output_sort)

    def get(self, arguments: Sequence) -> list:
        """Constraints for applying this primitive to ``arguments``."""
        if not arguments:
            raise ValueError("all arguments should have length > 0")
        if self.exact_length is not None and self.exact_length != len(arguments):
            return [_arity_mismatch(self.name, arguments, self.exact_length, self.span)]

        constraints: list = []
        arguments = list(arguments)
        if self.output is not None:
            *arguments, out = arguments
            constraints.append(Assign(out, self.output))

        if self.sort is not None:
            constraints.extend(Assign(arg, self.sort) for arg in arguments)
        elif arguments:
            first, *rest = arguments
            constraints.extend(Eq(arg, first) for arg in rest)
        return constraints


def atom_application_constraints(
    head: Hashable,
    args: Sequence,
    span: Any,
    func_types: Mapping[Hashable, Any],
    primitives: Mapping[Hashable, Sequence[Any]],
) -> list:
    """Constraints for applying ``head`` to ``args`` (inputs then output).

    ``func_types`` maps a function name to an object with ``input`` (the
    input sorts) and ``output`` attributes. ``primitives`` maps a name to the
    type constraints of each overload, each having a ``get(arguments)``
    method. When several instantiations are possible, exactly one of them
    must hold, expressed as a single :class:`Xor`.
    """
    alternatives: list[list] = []

    func_type = func_types.get(head)
    if func_type is not None:
        inputs = list(func_type.input)
        expected = len(inputs) + 1
        if expected != len(args):
            alternatives.append([_arity_mismatch(head, args, expected, span)])
        else:
            sorts = inputs + [func_type.output]
            alternatives.append([Assign(arg, sort) for arg, sort in zip(args, sorts)])

    for constraint in primitives.get(head, ()):
        alternatives.append(constraint.get(args))

    if not alternatives:
        raise UnboundFunctionError(head, span)
    if len(alternatives) == 1:
        return alternatives[0]
    return [Xor(tuple(And(tuple(cs)) for cs in alternatives))]