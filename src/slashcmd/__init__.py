"""
slashcmd - custom slash-command resolution for terminal tools.

Discovers command definitions from built-in, project and personal scopes,
validates them, merges them into one registry and keeps it live as files
change on disk.
"""

__version__ = "0.1.0"
