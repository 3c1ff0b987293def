import random

import pytest

from trainingkit.btree import BTree

KEYS = [10, 20, 5, 6, 12, 30, 7, 17]


def _tree(t=8, keys=KEYS):
    tree = BTree(t)
    for key in keys:
        tree.insert(key)
    return tree


def test_insert_and_search():
    tree = _tree()
    assert tree.search(5)
    assert not tree.search(100)


def test_delete():
    tree = _tree()
    tree.delete(5)
    assert not tree.search(5)
    assert tree.in_order() == sorted(k for k in KEYS if k != 5)


def test_range_query():
    tree = _tree()
    assert len(tree.range_query(6, 50)) == 7
    assert tree.range_query(6, 50) == sorted(k for k in KEYS if 6 <= k <= 50)


def test_many_inserts_stay_sorted_and_searchable():
    keys = list(range(1, 101))
    random.Random(7).shuffle(keys)
    tree = _tree(t=2, keys=keys)
    assert tree.in_order() == list(range(1, 101))
    assert all(tree.search(k) for k in keys)
    assert not tree.search(0)
    assert not tree.search(101)


def test_range_query_across_levels():
    keys = list(range(1, 101))
    random.Random(3).shuffle(keys)
    tree = _tree(t=2, keys=keys)
    assert tree.range_query(10, 20) == list(range(10, 21))
    assert tree.range_query(95, 500) == list(range(95, 101))
    assert tree.range_query(200, 300) == []


def test_split_and_visualize():
    tree = _tree(t=2, keys=[1, 2, 3, 4])
    assert tree.visualize() == "[2]\n  [1]\n  [3, 4]"


def test_delete_from_internal_node_uses_successor():
    tree = _tree(t=2, keys=[1, 2, 3, 4])
    tree.delete(2)
    assert not tree.search(2)
    assert tree.in_order() == [1, 3, 4]
    assert tree.visualize() == "[3]\n  [1]\n  [4]"


def test_delete_absent_key_is_noop():
    tree = _tree()
    tree.delete(999)
    assert tree.in_order() == sorted(KEYS)


def test_empty_tree():
    tree = BTree(3)
    assert tree.in_order() == []
    assert tree.range_query(0, 10) == []
    assert not tree.search(1)


def test_invalid_degree():
    with pytest.raises(ValueError):
        BTree(1)