"""Input validation for the store layer and the CLI, plus terminal output helpers for the CLI."""
