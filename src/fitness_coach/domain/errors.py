"""Error taxonomy shared by gateways, parsers and the agent."""


class FitnessCoachError(Exception):
    """Base class for errors raised by the fitness coach core."""


class UpstreamTransportError(FitnessCoachError):
    """Network or HTTP failure talking to the model provider; retryable."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamAPIError(FitnessCoachError):
    """Well-formed error payload returned by the model provider."""

    def __init__(
        self, message: str, error_type: str | None = None, code: str | None = None
    ) -> None:
        super().__init__(
            f"upstream API error: {message} (type: {error_type}, code: {code})"
        )
        self.upstream_message = message
        self.error_type = error_type
        self.code = code


class ParseError(FitnessCoachError):
    """Model output could not be decoded into the expected shape."""


class NoFoodItemsError(ParseError):
    """A meal parse produced no usable food items."""


class ResolutionError(FitnessCoachError):
    """A single food item could not be resolved to a catalog entry."""


class NotFoundError(FitnessCoachError):
    """A referenced resource does not exist."""


class InvalidInputError(FitnessCoachError):
    """Caller-supplied input failed validation."""
