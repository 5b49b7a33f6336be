"""
Error hierarchy for the Dama rules engine.

The engine never logs or retries. Every failure is raised to the caller, who
decides whether to re-fetch the authoritative position (IllegalMove,
NotYourTurn) or to treat the input as corrupt (InvalidPosition).

Usage:
    from dama.errors import DamaError, IllegalMove

    try:
        result = apply_move(board, player, move, to_move=turn)
    except IllegalMove as e:
        return e.to_dict()
"""

from typing import Any, Dict, Optional

__all__ = [
    "DamaError",
    "MoveError",
    "IllegalMove",
    "NotYourTurn",
    "InvalidPosition",
    "ConfigurationError",
]


class DamaError(Exception):
    """Base exception for all engine errors.

    Attributes:
        code: Machine-readable error code
        message: Human-readable description
        context: Extra details about the rejected input
    """
    code: str = "DAMA_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class MoveError(DamaError):
    """Base class for errors raised while validating or applying a move."""
    code: str = "MOVE_ERROR"


class IllegalMove(MoveError):
    """The chosen move is not in the current legal-move set."""
    code: str = "ILLEGAL_MOVE"


class NotYourTurn(MoveError):
    """The caller's player does not match the player to move."""
    code: str = "NOT_YOUR_TURN"


class InvalidPosition(MoveError):
    """Malformed board, bad coordinate, or an empty origin square."""
    code: str = "INVALID_POSITION"


class ConfigurationError(DamaError):
    code: str = "CONFIGURATION_ERROR"
