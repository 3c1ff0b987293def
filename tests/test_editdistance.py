import pytest

from trainingkit.editdistance import edit_distance

PAIRS = [
    ("kitten", "sitting"),
    ("flaw", "lawn"),
    ("", "abc"),
    ("abc", "abc"),
    ("intention", "execution"),
    ("ab", "ba"),
]


def test_worked_example():
    assert edit_distance("kitten", "sitting", 5) == 3


def test_identical_strings_have_zero_distance():
    assert edit_distance("spelling", "spelling", 2) == 0


def test_empty_against_word_is_its_length():
    assert edit_distance("", "abc", 10) == len("abc")
    assert edit_distance("abc", "", 10) == len("abc")


@pytest.mark.parametrize("a,b", PAIRS)
def test_symmetric(a, b):
    assert edit_distance(a, b, 20) == edit_distance(b, a, 20)


def test_length_gap_beyond_limit_short_circuits():
    max_dist = 2
    assert edit_distance("a", "abcdefgh", max_dist) == max_dist + 1


def test_early_exit_when_every_row_exceeds_limit():
    max_dist = 2
    assert edit_distance("abcdef", "uvwxyz", max_dist) == max_dist + 1


@pytest.mark.parametrize("a,b", PAIRS)
@pytest.mark.parametrize("limit", [0, 1, 2, 3])
def test_bounded_agrees_with_unbounded(a, b, limit):
    full = edit_distance(a, b, 100)
    bounded = edit_distance(a, b, limit)
    if full <= limit:
        assert bounded == full
    else:
        assert bounded > limit


@pytest.mark.parametrize("a,b,c", [("kitten", "sitting", "sitten"), ("flaw", "lawn", "law")])
def test_triangle_inequality(a, b, c):
    assert edit_distance(a, c, 50) <= edit_distance(a, b, 50) + edit_distance(b, c, 50)