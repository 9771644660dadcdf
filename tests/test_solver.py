import pytest

from egraphcore.solver import (
    And,
    ArityMismatch,
    Assign,
    Eq,
    Impossible,
    ImpossibleCaseIdentified,
    InconsistentConstraint,
    NoConstraintSatisfied,
    Problem,
    UnconstrainedVar,
    Xor,
)
from egraphcore.terms import VarTerm


def test_assign_and_eq_reach_fixed_point():
    problem = Problem([Eq("x", "y"), Assign("y", "i64")], {"x", "y"})
    assert problem.solve() == {"x": "i64", "y": "i64"}


def test_eq_with_atom_terms_ignores_span():
    x = VarTerm("x", span=1)
    problem = Problem([Assign(VarTerm("x", span=2), "String"), Eq(x, VarTerm("z"))])
    result = problem.solve()
    assert result[VarTerm("z")] == "String"
    assert result[x] == "String"


def test_inconsistent_assign():
    problem = Problem([Assign("x", "i64"), Assign("x", "f64")])
    with pytest.raises(InconsistentConstraint) as info:
        problem.solve()
    assert info.value.var == "x"
    assert info.value.expected == "f64"
    assert info.value.actual == "i64"


def test_inconsistent_eq():
    problem = Problem([Assign("x", "i64"), Assign("y", "f64"), Eq("x", "y")])
    with pytest.raises(InconsistentConstraint) as info:
        problem.solve()
    assert (info.value.var, info.value.expected, info.value.actual) == ("x", "i64", "f64")


def test_unconstrained_var():
    problem = Problem([Assign("x", "i64")], {"x", "y"})
    with pytest.raises(UnconstrainedVar) as info:
        problem.solve()
    assert info.value.var == "y"


def test_eq_both_unknown_does_nothing():
    assignment = {}
    assert Eq("a", "b").update(assignment, lambda v: v) is False
    assert assignment == {}


def test_key_function_compares_values():
    problem = Problem([Assign("x", ("i64", 1)), Assign("x", ("i64", 2))])
    assert problem.solve(key=lambda v: v[0]) == {"x": ("i64", 1)}


def test_xor_picks_unique_alternative():
    xor = Xor((And((Assign("x", "i64"), Assign("y", "i64"))),
               And((Assign("x", "f64"), Assign("y", "f64")))))
    problem = Problem([Assign("x", "f64"), xor], {"x", "y"})
    assert problem.solve() == {"x": "f64", "y": "f64"}


def test_xor_with_several_successes_learns_nothing():
    assignment = {}
    xor = Xor((Assign("x", "i64"), Assign("x", "f64")))
    assert xor.update(assignment, lambda v: v) is False
    assert assignment == {}


def test_xor_all_failing():
    assignment = {"x": "String"}
    xor = Xor((Assign("x", "i64"), Assign("x", "f64")))
    with pytest.raises(NoConstraintSatisfied) as info:
        xor.update(assignment, lambda v: v)
    assert len(info.value.errors) == 2
    assert all(isinstance(e, InconsistentConstraint) for e in info.value.errors)
    assert assignment == {"x": "String"}


def test_and_restores_on_failure():
    assignment = {"y": "i64"}
    conj = And((Assign("x", "i64"), Assign("y", "f64")))
    with pytest.raises(InconsistentConstraint):
        conj.update(assignment, lambda v: v)
    assert assignment == {"y": "i64"}


def test_impossible_raises_with_reason():
    reason = ArityMismatch(atom="(f x)", expected=3)
    with pytest.raises(ImpossibleCaseIdentified) as info:
        Problem([Impossible(reason)]).solve()
    assert info.value.reason == reason
    assert info.value.reason.expected == 3


def test_add_binding_appends_assign():
    problem = Problem()
    problem.add_binding("v", "Unit")
    assert problem.constraints == [Assign("v", "Unit")]
    assert problem.solve() == {"v": "Unit"}