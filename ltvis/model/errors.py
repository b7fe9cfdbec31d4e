"""Error codes carried on error steps and exceptions for contract violations.

Simulators report user-level problems as error steps whose ``code`` is one of
the constants below and never raise for them. The exception classes are for
callers that break the engine contract, such as asking a session to act on a
structure that does not exist.
"""

from __future__ import annotations

WRONG_TARGET = "wrong_target"
KIND_MISMATCH = "kind_mismatch"
INVALID_PAYLOAD = "invalid_payload"
INVALID_VALUE = "invalid_value"
OUT_OF_BOUNDS = "out_of_bounds"
NOT_FOUND = "not_found"
INVALID_KEY = "invalid_key"
DUPLICATE = "duplicate"
EMPTY_STACK = "empty_stack"
EMPTY_TREE = "empty_tree"
EMPTY_TRAVERSAL = "empty_traversal"
OCCUPIED = "occupied"
UNSUPPORTED_OP = "unsupported_op"
INSERT_FAILED = "insert_failed"

ERROR_CODES = frozenset(
    {
        WRONG_TARGET,
        KIND_MISMATCH,
        INVALID_PAYLOAD,
        INVALID_VALUE,
        OUT_OF_BOUNDS,
        NOT_FOUND,
        INVALID_KEY,
        DUPLICATE,
        EMPTY_STACK,
        EMPTY_TREE,
        EMPTY_TRAVERSAL,
        OCCUPIED,
        UNSUPPORTED_OP,
        INSERT_FAILED,
    }
)

TARGET_NOT_FOUND = "target_not_found"


class EngineError(Exception):
    """Base class for engine contract violations."""

    code = "engine_error"


class TargetNotFoundError(EngineError, LookupError):
    """Raised when an operation targets a structure the session does not hold."""

    code = TARGET_NOT_FOUND

    def __init__(self, target: str) -> None:
        super().__init__(f"Structure {target} not found")
        self.target = target


class OperationError(EngineError, ValueError):
    """Raised when a raw operation mapping cannot be parsed."""

    code = "invalid_operation"
