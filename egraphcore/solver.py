"""A small constraint solver used for type inference over atom terms.

Constraints relate variables to each other (:class:`Eq`) or to values
(:class:`Assign`), and combine through :class:`And` and :class:`Xor`.
:meth:`Problem.solve` propagates them to a fixed point and returns the
resulting assignment, raising a :class:`ConstraintError` on conflict.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Optional, Union

Assignment = dict
KeyFn = Callable[[Any], Any]


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class ArityMismatch:
    """An atom was applied to the wrong number of arguments."""

    atom: Any
    expected: int


@dataclass(frozen=True)
class FunctionMismatch:
    """A function was used with a signature different from its declaration."""

    expected_output: Any
    expected_input: tuple
    actual_output: Any
    actual_input: tuple


ImpossibleReason = Union[ArityMismatch, FunctionMismatch]


class ConstraintError(Exception):
    """Raised when the constraints cannot be satisfied."""


class InconsistentConstraint(ConstraintError):
    """A variable would need two different values."""

    def __init__(self, var: Hashable, expected: Any, actual: Any) -> None:
        super().__init__(f"{var}: expected {expected!r}, got {actual!r}")
        self.var = var
        self.expected = expected
        self.actual = actual


class UnconstrainedVar(ConstraintError):
    """A variable that must be assigned was left without a value."""

    def __init__(self, var: Hashable) -> None:
        super().__init__(f"could not infer a value for {var}")
        self.var = var


class NoConstraintSatisfied(ConstraintError):
    """Every alternative of an exclusive choice failed."""

    def __init__(self, errors: list[ConstraintError]) -> None:
        super().__init__(f"all {len(errors)} alternatives failed")
        self.errors = list(errors)


class ImpossibleCaseIdentified(ConstraintError):
    """A constraint that can never hold was reached."""

    def __init__(self, reason: ImpossibleReason) -> None:
        super().__init__(f"impossible constraint: {reason}")
        self.reason = reason


def _restore(assignment: Assignment, saved: Assignment) -> None:
    assignment.clear()
    assignment.update(saved)


@dataclass(frozen=True)
class Eq:
    """Both variables take the same value."""

    x: Hashable
    y: Hashable

    def update(self, assignment: Assignment, key: KeyFn) -> bool:
        """Propagate a known value from one side to the other."""
        x_known, y_known = self.x in assignment, self.y in assignment
        if x_known and not y_known:
            assignment[self.y] = assignment[self.x]
            return True
        if y_known and not x_known:
            assignment[self.x] = assignment[self.y]
            return True
        if x_known and y_known:
            v1, v2 = assignment[self.x], assignment[self.y]
            if key(v1) == key(v2):
                return False
            raise InconsistentConstraint(self.x, v1, v2)
        return False


@dataclass(frozen=True)
class Assign:
    """The variable takes the given value."""

    var: Hashable
    value: Any

    def update(self, assignment: Assignment, key: KeyFn) -> bool:
        """Assign the value, or check it against the existing one."""
        if self.var not in assignment:
            assignment[self.var] = self.value
            return True
        current = assignment[self.var]
        if key(current) == key(self.value):
            return False
        raise InconsistentConstraint(self.var, self.value, current)


@dataclass(frozen=True)
class And:
    """All of the constraints hold."""

    constraints: tuple = field(default_factory=tuple)

    def update(self, assignment: Assignment, key: KeyFn) -> bool:
        """Apply every constraint; on failure leave the assignment untouched."""
        saved = dict(assignment)
        updated = False
        try:
            for constraint in self.constraints:
                updated |= constraint.update(assignment, key)
        except ConstraintError:
            _restore(assignment, saved)
            raise
        return updated


@dataclass(frozen=True)
class Xor:
    """Exactly one of the constraints holds and all others are false."""

    constraints: tuple = field(default_factory=tuple)

    def update(self, assignment: Assignment, key: KeyFn) -> bool:
        """Apply the only satisfiable alternative, if it is unique.

        When several alternatives succeed nothing is learnt and the
        assignment is left as it was.
        """
        successes: list[tuple[bool, Assignment]] = []
        errors: list[ConstraintError] = []
        for constraint in self.constraints:
            trial = dict(assignment)
            try:
                updated = constraint.update(trial, key)
            except ConstraintError as error:
                errors.append(error)
                continue
            successes.append((updated, trial))
            if len(successes) > 1:
                return False
        if not successes:
            raise NoConstraintSatisfied(errors)
        updated, result = successes[0]
        _restore(assignment, result)
        return updated


@dataclass(frozen=True)
class Impossible:
    """A constraint that never holds."""

    reason: ImpossibleReason

    def update(self, assignment: Assignment, key: KeyFn) -> bool:
        """Always fail."""
        raise ImpossibleCaseIdentified(self.reason)


_Constraint = Union[Eq, Assign, And, Xor, Impossible]


@dataclass
class Problem:
    """A list of constraints and the variables that must end up assigned."""

    constraints: list = field(default_factory=list)
    range: set = field(default_factory=set)

    def add_binding(self, var: Hashable, value: Any) -> None:
        """Require ``var`` to take ``value``."""
        self.constraints.append(Assign(var, value))

    def solve(self, key: Optional[KeyFn] = None) -> Assignment:
        """Propagate the constraints to a fixed point and return the assignment.

        Values are compared through ``key`` (identity by default).
        """
        key = key or _identity
        assignment: Assignment = {}
        changed = True
        while changed:
            changed = False
            for constraint in self.constraints:
                changed |= constraint.update(assignment, key)
        for var in self.range:
            if var not in assignment:
                raise UnconstrainedVar(var)
        return assignment