"""Command-line interface for slashcmd."""
