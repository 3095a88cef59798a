"""Error taxonomy for the copilot core.

Every error carries the HTTP status code the API boundary maps it to.
"""


class CopilotError(Exception):
    """Base class for copilot errors."""

    status_code: int = 500


class InvalidInput(CopilotError):
    """Bad caller arguments. Not retried."""

    status_code = 400


class ProviderUnavailable(CopilotError):
    """Transient failure of an external model service. Safe to retry."""

    status_code = 503


class DimensionMismatch(CopilotError):
    """Vector dimensionality does not match the provider or index."""

    status_code = 400


class DuplicateKey(CopilotError):
    """An identifier or tool name is already registered."""

    status_code = 409


class UnknownTool(CopilotError):
    """No tool is registered under the requested name."""

    status_code = 404


class SchemaViolation(CopilotError):
    """Arguments or a schema do not satisfy the JSON Schema contract."""

    status_code = 422


class ToolExecutionError(CopilotError):
    """A tool handler failed with its own domain error."""

    status_code = 502

    def __init__(self, tool_name: str, cause: BaseException):
        super().__init__(f"Tool '{tool_name}' failed: {cause}")
        self.tool_name = tool_name
        self.cause = cause


class ToolLoopExceeded(CopilotError):
    """The completion capability kept requesting tools past the round cap."""

    status_code = 500

    def __init__(self, rounds: int):
        super().__init__(f"Tool call loop exceeded {rounds} rounds")
        self.rounds = rounds
