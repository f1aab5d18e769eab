"""Exceptions raised by the TriPrompt pipeline."""

from __future__ import annotations


class TriPromptError(RuntimeError):
    """Base class for failures that abort a run."""


class SynthesisError(TriPromptError):
    """Raised when the synthesis call fails or returns unusable output.

    The message is shown to the end user as is;
    the underlying cause is chained via ``__cause__``.
    """

    GENERIC_MESSAGE = "Failed to generate draft. Please try again."

    def __init__(self, message: str = GENERIC_MESSAGE) -> None:
        super().__init__(message)
