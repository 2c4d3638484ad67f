"""
Typed operation results - what the document bridge hands back to the HTTP layer.
Design: Bridge reports a kind of failure; the endpoint decides the status code.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    ENGINE = "engine"
    INVALID_REQUEST = "invalid_request"


@dataclass
class BridgeResult:
    """Outcome of one bridge operation. payload is merged into the JSON body."""

    ok: bool
    message: str = ""
    payload: dict[str, Any] = field(default_factory=dict)
    error: ErrorKind | None = None
    # Listing and search answer with the payload alone, no status/message keys
    bare: bool = False

    @classmethod
    def success(cls, message: str, **payload: Any) -> "BridgeResult":
        return cls(ok=True, message=message, payload=payload)

    @classmethod
    def data(cls, payload: dict[str, Any]) -> "BridgeResult":
        return cls(ok=True, payload=payload, bare=True)

    @classmethod
    def failure(cls, message: str, error: ErrorKind = ErrorKind.ENGINE) -> "BridgeResult":
        return cls(ok=False, message=message, error=error)

    def to_response(self) -> dict[str, Any]:
        if self.ok and self.bare:
            return dict(self.payload)
        return {"status": self.ok, "message": self.message, **self.payload}
