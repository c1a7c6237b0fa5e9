"""Immutable domain models for version snapshots."""
