from egraphcore.index import ColumnIndex, CompositeColumnIndex


def test_add_and_get():
    index = ColumnIndex("Math")
    index.add("v1", 0)
    index.add("v1", 4)
    index.add("v2", 2)
    assert index.sort == "Math"
    assert index.get("v1") == (0, 4)
    assert index.get("v2") == (2,)
    assert index.get("missing") is None
    assert len(index) == 2


def test_items_round_trip():
    index = ColumnIndex("i64")
    entries = {"a": [1, 3], "b": [2]}
    for value, offsets in entries.items():
        for off in offsets:
            index.add(value, off)
    assert {v: list(offs) for v, offs in index.items()} == entries


def test_clear():
    index = ColumnIndex("i64")
    index.add(1, 0)
    index.clear()
    assert len(index) == 0
    assert index.get(1) is None


def test_to_canonicalize():
    index = ColumnIndex("Math")
    index.add("x", 0)
    index.add("y", 1)
    index.add("x", 5)
    assert list(index.to_canonicalize(["x", "z"])) == [0, 5]
    assert sorted(index.to_canonicalize(["y", "x"])) == [0, 1, 5]
    assert list(index.to_canonicalize([])) == []


def test_composite_groups_by_sort():
    composite = CompositeColumnIndex()
    composite.add("A", "p", 0)
    composite.add("B", "q", 1)
    composite.add("A", "r", 2)
    indexes = list(composite)
    assert [ix.sort for ix in indexes] == ["A", "B"]
    assert indexes[0].get("p") == (0,)
    assert indexes[0].get("r") == (2,)
    assert indexes[1].get("q") == (1,)


def test_composite_clear_keeps_sorts():
    composite = CompositeColumnIndex()
    composite.add("A", "p", 0)
    composite.clear()
    indexes = list(composite)
    assert [ix.sort for ix in indexes] == ["A"]
    assert len(indexes[0]) == 0