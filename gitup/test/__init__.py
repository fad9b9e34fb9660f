"""gitup test suite."""
