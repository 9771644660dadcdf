# egraphcore

Building blocks for an e-graph / equality-saturation engine, written in plain
Python with no runtime dependencies.

## What is inside

- `egraphcore.table`: `Table` is an insertion-ordered hash table that maps
  tuples of values to a `TupleOutput` (value, timestamp, subsumed flag).
  An update or a `remove()` marks the old row stale and does not delete it,
  so offsets stay stable until an explicit `rehash()`. Timestamps must never
  decrease, and `insert_and_merge` raises `ValueError` if one does. Rows are
  therefore sorted by timestamp. `binary_search_table_by_key`,
  `Table.transform_range` and `Table.iter_timestamp_range` turn a timestamp
  range `[start, stop)` into a range of offsets.
- `egraphcore.index`: `ColumnIndex` maps each value in a column to the table
  offsets where it occurs. `to_canonicalize(dirty_ids)` yields the offsets of
  rows that hold any of the given values. `CompositeColumnIndex` keeps one
  `ColumnIndex` for each sort.
- `egraphcore.terms`: the atom terms `VarTerm`, `LiteralTerm` and
  `GlobalTerm`, whose equality ignores spans, together with `Atom` and
  `Query`, the conjunctive-query form of a rule body.
- `egraphcore.rules`: the core actions `Let`, `LetAtomTerm`, `Extract`,
  `Set`, `Change`, `Union` and `Panic`, plus `CoreActions` and `CoreRule`.
  `CoreRule.canonicalize(value_eq)` returns a new rule. It removes equality
  atoms (head `EQ`) that involve a variable by substituting for that variable.
  An equality between two distinct non-variable terms becomes an atom headed
  by `value_eq(lhs, rhs)` with a unit output.
- `egraphcore.solver`: a small constraint solver used for type inference. It
  provides the constraints `Eq`, `Assign`, `And`, `Xor` and `Impossible`, and
  the class `Problem`. `Problem.solve(key)` propagates the constraints until
  nothing changes. It raises a `ConstraintError` subclass on failure:
  `InconsistentConstraint`, `UnconstrainedVar`, `NoConstraintSatisfied` or
  `ImpossibleCaseIdentified`.
- `egraphcore.typeconstraints`: `SimpleTypeConstraint`,
  `AllEqualTypeConstraint` and `atom_application_constraints`, which produce
  solver constraints for applications of functions and primitives. The last
  raises `UnboundFunctionError` when a head names neither a function nor a
  primitive.

## Examples

A timestamped table:

```python
from egraphcore.table import Table, binary_search_table_by_key

table = Table()
table.insert((1, 2), 3, ts=0)
table.insert((4, 5), 6, ts=1)

assert table.get((1, 2)).value == 3
assert binary_search_table_by_key(table, 1) == 1

table.remove((1, 2), ts=2)
assert len(table) == 1
assert table.num_offsets() == 2
```

Solving a typing problem:

```python
from egraphcore.solver import Eq, Problem

problem = Problem()
problem.constraints.append(Eq("x", "y"))
problem.add_binding("y", "i64")
problem.range.update({"x", "y"})
assignment = problem.solve()
assert assignment["x"] == "i64"
```

## What it does not do

This package holds data structures and the analyses that work on them. It has
no parser for a rule language and no query evaluation or join engine. It does
not extract terms, has no e-graph object that ties the tables together, and
provides no command-line program.

## Running the tests

```
pip install -e .[test]
pytest
```