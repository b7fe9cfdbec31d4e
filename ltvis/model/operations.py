"""Operation schema shared by the command layer, sessions and simulators.

Each operation kind is a pydantic model tagged by ``kind``. Payload-like
fields (``value``, ``key``, ``payload``, ``weights``) are deliberately loose:
their domain validation belongs to the simulators, which report problems as
error steps instead of raising.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import OperationError
from .types import ID, StructureKind, TraversalOrder


class _Op(BaseModel):
    model_config = ConfigDict(extra="forbid")


class Create(_Op):
    kind: Literal["Create"] = "Create"
    id: ID
    structure: StructureKind
    payload: Any = None


class Insert(_Op):
    kind: Literal["Insert"] = "Insert"
    target: ID
    pos: Optional[int] = None
    value: Any = None


class Delete(_Op):
    kind: Literal["Delete"] = "Delete"
    target: ID
    key: Any = None
    pos: Optional[int] = None


class Find(_Op):
    kind: Literal["Find"] = "Find"
    target: ID
    key: Any


class Traverse(_Op):
    kind: Literal["Traverse"] = "Traverse"
    target: ID
    order: TraversalOrder = "preorder"


class Attach(_Op):
    kind: Literal["Attach"] = "Attach"
    target: ID
    parent: ID
    child: ID
    side: Literal["left", "right"]
    value: Any = None


class Push(_Op):
    kind: Literal["Push"] = "Push"
    target: ID
    value: Any = None


class Pop(_Op):
    kind: Literal["Pop"] = "Pop"
    target: ID


class BuildHuffman(_Op):
    kind: Literal["BuildHuffman"] = "BuildHuffman"
    target: ID
    weights: Dict[str, Any] = Field(default_factory=dict)


Operation = Annotated[
    Union[Create, Insert, Delete, Find, Traverse, Attach, Push, Pop, BuildHuffman],
    Field(discriminator="kind"),
]

_ADAPTER: TypeAdapter = TypeAdapter(Operation)


def parse_operation(data: Union[Dict[str, Any], _Op]) -> Operation:
    """Validate ``data`` into an :data:`Operation` model.

    Parameters
    ----------
    data:
        Either an already constructed operation model or a mapping carrying a
        ``kind`` discriminator, as produced by a command layer or a scenario
        file.

    Raises
    ------
    OperationError
        If the mapping has an unknown ``kind`` or malformed fields.
    """

    if isinstance(data, _Op):
        return data
    try:
        return _ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise OperationError(f"Invalid operation: {exc}") from exc


def target_id(op: Operation) -> ID:
    """Return the structure id ``op`` addresses."""
    return op.id if op.kind == "Create" else op.target


def operation_meta(op: Operation) -> Dict[str, Any]:
    """Return a JSON-friendly mapping of ``op`` for timeline entries."""
    return op.model_dump(exclude_none=True)
