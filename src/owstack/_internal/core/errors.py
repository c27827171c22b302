class OwstackError(Exception):
    pass


class CLIError(OwstackError):
    pass


class InputValidationError(OwstackError):
    """
    Raised on malformed interactive input. Prompts recover from it by asking again.
    """

    pass


class ConfigError(OwstackError):
    pass


class PathError(OwstackError):
    pass


class ExternalToolError(OwstackError):
    """
    Raised when a required external tool is missing or exits with a failure.
    """

    def __init__(self, msg: str, tool: str = ""):
        super().__init__(msg)
        self.tool = tool
