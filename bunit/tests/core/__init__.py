"""Unit tests for the core engine."""
