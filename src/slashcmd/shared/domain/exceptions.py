"""
Domain exceptions for slashcmd.

All library errors inherit from SlashCmdError. Loader-side errors are raised
inside a single file's parse step and converted to a logged skip at the
parser boundary; they never escape a load cycle.
"""


class SlashCmdError(Exception):
    """Base class for all slashcmd exceptions."""

    def __init__(self, message: str, context: dict = None):
        super().__init__(message)
        self.context = context or {}


class CommandLoadError(SlashCmdError):
    """Raised when a command definition file cannot be turned into a record."""

    pass


class CommandSyntaxError(CommandLoadError):
    """Raised when a structured-data file is not well-formed JSON/YAML."""

    pass


class CommandExportError(CommandLoadError):
    """Raised when a command module exposes no usable command object."""

    pass


class CommandValidationError(SlashCmdError):
    """Raised when a candidate record violates the command contract."""

    def __init__(self, message: str, errors: list[str], context: dict = None):
        super().__init__(message, context)
        self.errors = list(errors)


class ConfigurationError(SlashCmdError):
    """Raised when configuration is invalid or corrupt."""

    pass
