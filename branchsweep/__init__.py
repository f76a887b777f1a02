"""Branchsweep - find and delete local branches that already landed on trunk."""

__version__ = "0.1.0"
