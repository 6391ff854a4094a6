"""Sporkfed exceptions."""


class SporkfedError(Exception):
    """Base class for sporkfed errors."""


class BranchResetError(SporkfedError):
    """Raised when the sync branch cannot be based on the default branch."""


class ConfigError(SporkfedError):
    """Raised when the rule configuration cannot be parsed."""


class WebhookSignatureError(SporkfedError):
    """Raised when a webhook delivery fails signature verification."""
