"""Serialization and identifier helpers."""
