from typing import List, Sequence


class SummarizeShareError(Exception):
    """Base class for errors raised inside a single submission."""


class ValidationError(SummarizeShareError):
    def __init__(self, messages: Sequence[str]):
        self.messages: List[str] = list(messages)
        super().__init__(", ".join(self.messages))


class ConfigurationError(SummarizeShareError):
    def __init__(self, missing: Sequence[str]):
        self.missing: List[str] = list(missing)
        super().__init__(f"Missing settings: {', '.join(self.missing)}")


class ProviderError(SummarizeShareError):
    """An external service call failed or returned something unusable."""


class EmptyResultError(SummarizeShareError):
    """The provider answered but the summary text was empty."""
