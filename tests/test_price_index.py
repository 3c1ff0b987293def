import random

import pytest

from trainingkit.price_index import PriceIndex


def _populate(index, count, seed):
    rng = random.Random(seed)
    prices = {}
    for n in range(count):
        price = round(rng.uniform(0, 1000), 2)
        pid = f"p{n}"
        prices[pid] = price
        index.insert(price, pid)
    return prices


def _sorted_ids(prices):
    return [pid for pid, _ in sorted(prices.items(), key=lambda kv: (kv[1], int(kv[0][1:])))]


def test_rejects_small_degree():
    with pytest.raises(ValueError):
        PriceIndex(1)


def test_empty_index_yields_nothing():
    index = PriceIndex(3)
    assert index.in_order() == []
    assert index.range_query(0, 100) == []
    assert index.in_order_page(0, 10) == []


@pytest.mark.parametrize("degree", [2, 3, 5, 50])
def test_in_order_is_sorted_by_price(degree):
    index = PriceIndex(degree)
    prices = _populate(index, 300, seed=degree)
    ordered = index.in_order()
    assert sorted(ordered) == sorted(prices)
    ordered_prices = [prices[pid] for pid in ordered]
    assert ordered_prices == sorted(ordered_prices)


def test_equal_prices_keep_insertion_order():
    index = PriceIndex(2)
    for pid in ["a", "b", "c"]:
        index.insert(9.99, pid)
    index.insert(1.0, "cheap")
    assert index.in_order() == ["cheap", "a", "b", "c"]


@pytest.mark.parametrize("degree", [2, 4, 50])
def test_range_query_matches_filter(degree):
    index = PriceIndex(degree)
    prices = _populate(index, 400, seed=7)
    rng = random.Random(11)
    for _ in range(30):
        low = rng.uniform(0, 950)
        high = low + 50
        result = index.range_query(low, high)
        assert sorted(result) == sorted(pid for pid, p in prices.items() if low <= p <= high)
        found = [prices[pid] for pid in result]
        assert found == sorted(found)


def test_range_query_bounds_are_inclusive():
    index = PriceIndex(2)
    for n, price in enumerate([10.0, 20.0, 30.0, 40.0, 50.0]):
        index.insert(price, f"id{n}")
    assert index.range_query(20.0, 40.0) == ["id1", "id2", "id3"]
    assert index.range_query(60.0, 70.0) == []


def test_delete_one_of_several_ids_keeps_price():
    index = PriceIndex(3)
    index.insert(5.0, "a")
    index.insert(5.0, "b")
    index.delete(5.0, "a")
    assert index.range_query(5.0, 5.0) == ["b"]


def test_delete_unknown_is_ignored():
    index = PriceIndex(3)
    index.insert(5.0, "a")
    index.delete(5.0, "zzz")
    index.delete(6.0, "a")
    assert index.in_order() == ["a"]


def test_delete_many_keeps_remaining_sorted():
    index = PriceIndex(50)
    prices = _populate(index, 250, seed=3)
    rng = random.Random(5)
    doomed = rng.sample(sorted(prices), 150)
    for pid in doomed:
        index.delete(prices.pop(pid), pid)
    assert index.in_order() == _sorted_ids(prices)
    for pid, price in prices.items():
        assert pid in index.range_query(price, price)


def test_reinsert_after_delete():
    index = PriceIndex(2)
    prices = _populate(index, 40, seed=9)
    victim = "p0"
    index.delete(prices[victim], victim)
    assert victim not in index.in_order()
    index.insert(prices[victim], victim)
    assert sorted(index.in_order()) == sorted(prices)


def test_pages_cover_in_order():
    index = PriceIndex(3)
    _populate(index, 97, seed=21)
    everything = index.in_order()
    pages = [index.in_order_page(offset, 10) for offset in range(0, 100, 10)]
    assert [pid for page in pages for pid in page] == everything
    assert all(len(page) == 10 for page in pages[:-1])


def test_page_edge_cases():
    index = PriceIndex(3)
    _populate(index, 20, seed=2)
    everything = index.in_order()
    assert index.in_order_page(0, 0) == []
    assert index.in_order_page(-5, 3) == everything[:3]
    assert index.in_order_page(len(everything), 5) == []