"""Error types raised across the ask command pipeline."""


class AskError(Exception):
    """Base class for failures that end a single invocation."""

    exit_code = 1


class ConfigError(AskError):
    """Raised when configuration is missing, invalid or cannot be saved."""


class SynthesisFailure(AskError):
    """Raised when the model call fails or yields no usable command."""


class BlockedCommand(AskError):
    """Raised when the safety screener refuses a candidate command."""

    exit_code = 2

    def __init__(self, reason: str):
        super().__init__(f"Command blocked: {reason}")
        self.reason = reason


class ExecutionFailure(AskError):
    """Raised when an approved command exits with a non-zero status."""

    def __init__(self, returncode: int):
        super().__init__(f"Command exited with status {returncode}")
        self.returncode = returncode
        self.exit_code = returncode if returncode > 0 else 1
