from trainingkit.suggest_bst import SuggestionTree


def test_relevance_order():
    tree = SuggestionTree()
    tree.insert("application", 7, 500)
    tree.insert("apples", 2, 200)
    tree.insert("apply", 1, 50)
    tree.insert("apple", 1, 100)
    tree.insert("apricot", 5, 10)
    assert tree.suggestions() == ["apple", "apply", "apples", "apricot", "application"]


def test_alphabetical_tie_breaker():
    tree = SuggestionTree()
    tree.insert("banana", 1, 10)
    tree.insert("apple", 1, 10)
    assert tree.suggestions() == ["apple", "banana"]


def test_exact_duplicate_is_ignored():
    tree = SuggestionTree()
    tree.insert("apple", 1, 10)
    tree.insert("apple", 1, 10)
    assert tree.suggestions() == ["apple"]
    assert len(tree) == 1


def test_same_word_with_other_ranking_is_kept():
    tree = SuggestionTree()
    tree.insert("apple", 2, 10)
    tree.insert("apple", 1, 10)
    assert tree.suggestions() == ["apple", "apple"]


def test_clear_empties_tree():
    tree = SuggestionTree()
    tree.insert("apple", 1, 10)
    tree.clear()
    assert tree.suggestions() == []