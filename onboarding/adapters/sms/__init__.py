"""SMS delivery adapters."""
