"""Meddle exception hierarchy.

Request-level outcomes (bad paths, missing resources) are Responses, not
exceptions. The types here cover mistakes made while assembling a stack.
"""


class MeddleError(Exception):
    """Base for all meddle-specific errors."""


class ConfigurationError(MeddleError):
    """Raised when a middleware or stack is declared incorrectly.

    Always raised at construction time, before any request is processed.
    """
