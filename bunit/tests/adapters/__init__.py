"""Tests for console and log sink adapters."""
