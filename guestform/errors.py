"""
Exceptions raised while filling the register form.
"""

from __future__ import annotations


class FormFillError(Exception):
    """Base exception for form generation."""


class ResourceFetchError(FormFillError):
    """The template or one of the fonts could not be retrieved."""

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f'Failed to fetch resource {location}: {reason}')


class RenderError(FormFillError):
    """A single element could not be drawn onto the template."""


class GenerationError(FormFillError):
    """Any other failure while assembling the document."""
