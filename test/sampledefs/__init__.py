"""Command definitions discovered by the registry tests."""
