"""
Gateway Errors - Failure kinds reported by external collaborators.

Gateways never raise these across the contract boundary; they return
them wrapped in Err so the reducers can turn them into state.
"""

from __future__ import annotations
from enum import Enum


class ErrorKind(Enum):
    """Kinds of gateway failure."""
    TRANSPORT = "transport"  # No connectivity / request failed
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    SERVER = "server"
    DECODING = "decoding"  # Malformed response
    STORAGE = "storage"  # Cache read/write failure


class GatewayError(Exception):
    """
    A failure reported by a gateway.

    str(error) is the human-readable description shown to the user.
    """

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"GatewayError({self.kind.value!r}, {self.message!r})"

    def __eq__(self, other):
        if not isinstance(other, GatewayError):
            return NotImplemented
        return self.kind == other.kind and self.message == other.message

    def __hash__(self):
        return hash((self.kind, self.message))

    @classmethod
    def transport(cls, detail: str) -> GatewayError:
        return cls(ErrorKind.TRANSPORT, f"Network error: {detail}")

    @classmethod
    def unauthorized(cls) -> GatewayError:
        return cls(ErrorKind.UNAUTHORIZED, "Unauthorized access")

    @classmethod
    def decoding(cls, detail: str) -> GatewayError:
        return cls(ErrorKind.DECODING, f"Decoding error: {detail}")

    @classmethod
    def server(cls, status_code: int) -> GatewayError:
        return cls(ErrorKind.SERVER, f"Server error with code: {status_code}")

    @classmethod
    def storage(cls, detail: str) -> GatewayError:
        return cls(ErrorKind.STORAGE, f"Storage error: {detail}")
