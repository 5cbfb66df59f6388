"""Matching engine: recursive walker, combinators, outcome dispatch."""
