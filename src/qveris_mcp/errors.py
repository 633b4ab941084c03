# Error types
# Every failure a tool call can produce, plus the fatal startup error

from typing import Any


class QverisMCPError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(QverisMCPError):
    """Raised at startup when required configuration is missing."""


class ApiError(QverisMCPError):
    """Normalized failure of a Qveris API call.

    This is the only error type that leaves ``QverisClient``; transport
    failures and non-2xx responses are both converted into it.
    """

    def __init__(self, status: int, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "status": self.status,
            "details": self.details,
        }


class ToolArgumentError(QverisMCPError):
    """Caller-supplied arguments are missing or malformed."""

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        missing: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.missing = missing or []

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.hint:
            payload["hint"] = self.hint
        return payload


class ParamsDecodeError(QverisMCPError):
    """``params_to_tool`` could not be decoded into a JSON object."""

    def __init__(self, reason: str, raw: str) -> None:
        super().__init__(
            f"Invalid JSON in params_to_tool: {reason}. Received: {raw}"
        )
        self.reason = reason
        self.raw = raw


class UnknownToolError(QverisMCPError):
    """Requested operation is not one this server exposes."""

    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name
        self.available = available

    def to_payload(self) -> dict[str, Any]:
        return {"error": str(self), "available_tools": self.available}
