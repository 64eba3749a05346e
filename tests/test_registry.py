import itertools
import pytest

from pdfcatalog.core.registry import EntryRegistry
from pdfcatalog.core.errors import InvalidInput, NotFound

def make(*counts):
    reg = EntryRegistry()
    ids = [reg.append(f"doc{i}", n) for i, n in enumerate(counts)]
    return reg, ids

def titles(reg):
    return [e.title for e in reg]

def test_append_assigns_unique_ids():
    reg, ids = make(1, 2, 3)
    assert len(set(ids)) == 3
    assert reg.ids() == ids
    assert reg.get(ids[1]).page_count == 2

def test_ids_not_reused_after_delete():
    reg, ids = make(1, 2)
    reg.remove(ids[1])
    new_id = reg.append("again", 2)
    assert new_id not in ids

def test_injected_id_factory():
    reg = EntryRegistry(id_factory=itertools.count(100).__next__)
    assert reg.append("a", 1) == 100
    assert reg.append("b", 1) == 101
    other = EntryRegistry()
    assert other.append("c", 1) == 1

def test_id_factory_collision_rejected():
    reg = EntryRegistry(id_factory=lambda: 7)
    reg.append("a", 1)
    with pytest.raises(RuntimeError):
        reg.append("b", 1)
    assert len(reg) == 1

@pytest.mark.parametrize("bad", [0, -1, 2.0, None])
def test_append_rejects_bad_page_count(bad):
    reg, _ = make(2)
    with pytest.raises(InvalidInput):
        reg.append("bad", bad)
    assert len(reg) == 1

def test_extend_is_all_or_nothing():
    reg, _ = make(2)
    with pytest.raises(InvalidInput):
        reg.extend([("x", 3, None), ("y", 0, None)])
    assert titles(reg) == ["doc0"]

def test_rename():
    reg, ids = make(1, 2)
    reg.rename(ids[0], "Intro")
    assert titles(reg) == ["Intro", "doc1"]
    assert reg.get(ids[0]).page_count == 1

def test_rename_unknown_id():
    reg, _ = make(1)
    reg.rename(999, "x")
    assert titles(reg) == ["doc0"]
    with pytest.raises(NotFound):
        reg.rename(999, "x", strict=True)

def test_remove_preserves_order():
    reg, ids = make(1, 2, 3)
    reg.remove(ids[1])
    assert titles(reg) == ["doc0", "doc2"]
    reg.remove(12345)
    assert len(reg) == 2

def test_move_up_and_down():
    reg, ids = make(1, 2, 3)
    reg.move_up(ids[2])
    assert titles(reg) == ["doc0", "doc2", "doc1"]
    reg.move_down(ids[0])
    assert titles(reg) == ["doc2", "doc0", "doc1"]

def test_moves_at_boundary_are_noops():
    reg, ids = make(1, 2)
    reg.move_up(ids[0])
    reg.move_down(ids[1])
    reg.move_up(999)
    assert reg.ids() == ids

def test_snapshot_is_detached():
    reg, ids = make(1, 2)
    snap = reg.snapshot()
    reg.rename(ids[0], "changed")
    reg.move_down(ids[0])
    assert [e.title for e in snap] == ["doc0", "doc1"]

def test_batch_with_repeated_id_adds_nothing():
    ids = iter([1, 2, 3, 3])
    reg = EntryRegistry(id_factory=lambda: next(ids))
    reg.append("a", 1)
    with pytest.raises(RuntimeError):
        reg.extend([("b", 1, None), ("c", 1, None), ("d", 1, None)])
    assert titles(reg) == ["a"]

def test_batch_colliding_with_existing_id_adds_nothing():
    ids = iter([5, 6, 5])
    reg = EntryRegistry(id_factory=lambda: next(ids))
    reg.append("a", 1)
    with pytest.raises(RuntimeError):
        reg.extend([("b", 1, None), ("c", 1, None)])
    assert titles(reg) == ["a"]
