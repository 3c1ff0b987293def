"""Heaps, tries, B-trees, a product store, spell checking, schedulers, a parking garage and an auction server."""

__version__ = "0.1.0"