"""Scan Terra blocks for market swaps and write them to CSV."""

__version__ = "0.1.0"
