"""Evolve the weights of feed-forward networks with a genetic algorithm."""

__version__ = '0.1.0'
