"""Validation workflows."""
