"""External adapters for the bunit test engine.

This package provides implementations of the core port interfaces.

Adapter Organization:

- console/: The primary report channel (process stdout)
- sink/: Destinations for captured test output (log file, discard)
"""
