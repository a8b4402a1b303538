"""Wooly fabric scoring."""
