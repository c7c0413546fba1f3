"""Utility helpers for nova-pydrive."""
