"""Security, validation and request dependencies."""
