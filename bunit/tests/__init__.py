"""Test suite for the bunit test engine.

Organized into three categories:

1. core/: Unit tests for the core engine
   - No external dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Tests for adapter implementations
   - Real files under pytest's tmp_path
   - Validates adapter behavior and error handling

3. fakes/: Port implementations for testing
   - In-memory ConsolePort and LogSinkPort
   - Used by core unit tests
"""
