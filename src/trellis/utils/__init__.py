"""Utilities shared by the engine."""
