"""Exceptions raised by the finance agent services."""


class FinanceAgentError(Exception):
    """Base class for agent errors."""


class RetrievalError(FinanceAgentError):
    """A datastore read or write failed. The only error that reaches callers."""

    def __init__(self, operation: str, message: str = ""):
        self.operation = operation
        super().__init__(message or f"Datastore operation failed: {operation}")


class ModelUnavailableError(FinanceAgentError):
    """The language model call failed or timed out."""


# Shown to end users instead of internal error text.
GENERIC_FAILURE_MESSAGE = "Sorry, I couldn't process your message. Please try again."
