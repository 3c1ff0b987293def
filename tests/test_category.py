import threading

import pytest

from trainingkit.category import CategoryNode, CategoryNotFoundError, CategoryTree


def test_category_tree():
    tree = CategoryTree()
    tree.add_category(["Electronics", "Phones", "Smartphones"])
    node = tree.find_category(["Electronics", "Phones", "Smartphones"])
    assert node.name == "Smartphones"
    with pytest.raises(CategoryNotFoundError, match="category Laptops not found"):
        tree.find_category(["Electronics", "Laptops"])


def test_single_name_searches_whole_tree():
    tree = CategoryTree()
    tree.add_category(["Electronics", "Phones"])
    assert tree.find_category(["Phones"]).name == "Phones"
    with pytest.raises(CategoryNotFoundError):
        tree.find_category(["Books"])


def test_all_names_and_render():
    tree = CategoryTree()
    tree.add_category(["Electronics", "Phones"])
    assert tree.root.all_names() == ["All", "Electronics", "Phones"]
    assert tree.render() == "All\n  Electronics\n    Phones"


def test_node_helpers():
    node = CategoryNode("Root")
    child = node.add_subcategory("A")
    assert node.add_subcategory("A") is child
    assert node.find([]) is node
    assert node.find_by_name("missing") is None


def test_category_tree_stress():
    tree = CategoryTree()

    def worker(n):
        path = ["Root"]
        for depth in range(5):
            path = path + [f"Level{depth}-Node{n}"]
            tree.add_category(path)
            tree.find_category(path)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(50)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    for n in range(50):
        path = ["Root"] + [f"Level{d}-Node{n}" for d in range(5)]
        assert tree.find_category(path).name == f"Level4-Node{n}"
    assert len(tree.root.all_names()) == 2 + 50 * 5