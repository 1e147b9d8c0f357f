"""Error taxonomy shared by the upload, generation and session layers."""


class PromptEnhancerError(Exception):
    """Base class; ``message`` is always safe to show to the user."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ConfigurationError(PromptEnhancerError):
    """Missing or invalid API credential. Fatal, detected at startup."""


class ValidationError(PromptEnhancerError):
    """User input failed a precondition. The state is left unchanged."""


class ReadError(PromptEnhancerError):
    """An uploaded image could not be read back for encoding."""


class GenerationFailed(PromptEnhancerError):
    """Network, model or parsing failure during a generation call."""


class CountMismatch(GenerationFailed):
    def __init__(self, observed, expected):
        super().__init__(
            f"Niespodziewana liczba pytań od AI. Otrzymano {observed}, oczekiwano {expected}."
        )
        self.observed = observed
        self.expected = expected


class MalformedResponse(Exception):
    """The model reply did not match the declared shape.

    Never reaches the session: the generation boundary folds it into
    GenerationFailed.
    """


class InvalidTransition(PromptEnhancerError):
    """The requested action is not available in the current state."""
