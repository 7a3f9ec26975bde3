"""Store ratings backend."""
