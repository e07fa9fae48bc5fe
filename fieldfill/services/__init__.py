"""Filling services."""
