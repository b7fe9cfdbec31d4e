"""Data-structure simulators and the snapshot/step data model."""

from .errors import EngineError, OperationError, TargetNotFoundError
from .operations import Operation, operation_meta, parse_operation, target_id
from .structure import STRUCTURE_CLASSES, Structure, create_structure

__all__ = [
    "EngineError",
    "Operation",
    "OperationError",
    "STRUCTURE_CLASSES",
    "Structure",
    "TargetNotFoundError",
    "create_structure",
    "operation_meta",
    "parse_operation",
    "target_id",
]
