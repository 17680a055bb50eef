"""Error taxonomy for provider_market commands."""

from __future__ import annotations


class MarketAdminError(Exception):
    """Base class for every failure a command reports to the operator."""


# ── Parse errors (local, never retried) ────────────────


class ParseError(MarketAdminError):
    """A human-supplied string could not be parsed."""

    what = "value"

    def __init__(self, text: str, detail: str = "") -> None:
        self.text = text
        self.detail = detail
        msg = f"cannot parse {self.what} {text!r}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class MalformedSize(ParseError):
    what = "size"


class MalformedDuration(ParseError):
    what = "duration"


class MalformedProposalId(ParseError):
    what = "proposal CID"


# ── Validation errors (local, rule violated) ───────────


class ValidationError(MarketAdminError):
    """An ask parameter violates a market rule."""

    def __init__(self, message: str, value: int, limit: int) -> None:
        self.value = value
        self.limit = limit
        super().__init__(message)


class PieceSizeTooSmall(ValidationError):
    pass


class PieceSizeExceedsCapacity(ValidationError):
    pass


class InvalidPieceRange(ValidationError):
    pass


class InvalidPrice(ValidationError):
    pass


# ── Remote / environment errors ────────────────────────


class RemoteError(MarketAdminError):
    """A chain or market service call failed. The remote message is kept verbatim."""

    def __init__(self, method: str, message: str) -> None:
        self.method = method
        self.message = message
        super().__init__(f"{method}: {message}")


class ConfigError(MarketAdminError):
    """The API endpoints could not be resolved from config or environment."""
