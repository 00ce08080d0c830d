"""ASCII formatters for CLI output."""
