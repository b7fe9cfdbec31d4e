"""Single-user editing session owning the simulators and the timeline."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from ..model.errors import TargetNotFoundError
from ..model.helpers import removal_events
from ..model.operations import Create, Operation, operation_meta, parse_operation
from ..model.structure import Structure, create_structure
from ..model.types import ID, OpStep, StateSnapshot
from .timeline import TimelineEntry, TimelineState, append_entry, create_empty

logger = logging.getLogger(__name__)


class Session:
    """Registry of structures plus the timeline of every step they produced.

    ``execute_operation`` runs synchronously to completion. Each call appends
    one timeline entry and moves the cursor to its last step.
    """

    def __init__(self) -> None:
        self._structures: Dict[ID, Structure] = {}
        self.timeline: TimelineState = create_empty()

    # ------------------------------------------------------------------
    def add_structure(self, kind: str, structure_id: ID, payload: Any = None) -> List[OpStep]:
        """Register a new ``kind`` structure under ``structure_id``.

        Any structure already registered under the id is replaced. The
        structure is populated through a ``Create`` operation so its creation
        is recorded on the timeline like any other operation.
        """

        structure = create_structure(kind, structure_id)
        previous = self._structures.get(structure_id)
        if previous is not None:
            logger.debug("replacing structure %s", structure_id)
        self._structures[structure_id] = structure
        op = Create(id=structure_id, structure=kind, payload=payload)
        steps = structure.apply(op)
        if previous is not None and steps:
            # the replaced structure may still be on screen
            first = steps[0]
            cleared = removal_events(previous.snapshot(), first["snapshot"])
            steps[0] = {**first, "events": cleared + first["events"]}
        self._append(steps, f"Create {kind}", operation_meta(op))
        return steps

    def execute_operation(self, op: Union[Operation, Mapping[str, Any]]) -> List[OpStep]:
        """Apply ``op`` to its target and record the resulting steps.

        Raises
        ------
        TargetNotFoundError
            If no structure is registered under the target id. ``BuildHuffman``
            is the exception: it creates an empty Huffman structure first.
        OperationError
            If ``op`` is a mapping that is not a valid operation.
        """

        op = parse_operation(op)
        if op.kind == "Create":
            return self.add_structure(op.structure, op.id, op.payload)

        structure = self._structures.get(op.target)
        if structure is None and op.kind == "BuildHuffman":
            logger.debug("creating Huffman structure %s for BuildHuffman", op.target)
            self.add_structure("Huffman", op.target)
            structure = self._structures[op.target]
        if structure is None:
            logger.warning("operation %s targets unknown structure %s", op.kind, op.target)
            raise TargetNotFoundError(op.target)

        steps = []
        for step in structure.apply(op):
            if step.get("snapshot") is None:
                step = {**step, "snapshot": structure.snapshot()}
            steps.append(step)
        error = steps[-1].get("error") if steps else None
        if error:
            logger.debug("%s on %s failed: %s", op.kind, op.target, error["code"])
        else:
            logger.debug("%s on %s produced %d steps", op.kind, op.target, len(steps))
        self._append(steps, op.kind, operation_meta(op))
        return steps

    def get_snapshot(self, structure_id: ID) -> StateSnapshot:
        """Return the snapshot of ``structure_id`` and start a clean timeline.

        The structure is reset and rebuilt from the snapshot, and the
        timeline is cleared. Use :meth:`peek_snapshot` for a read without
        those side effects.
        """

        structure = self.get_structure(structure_id)
        snapshot = structure.snapshot()
        structure.reset()
        structure.reset_from_snapshot(snapshot)
        self.timeline = create_empty()
        return snapshot

    def peek_snapshot(self, structure_id: ID) -> StateSnapshot:
        return self.get_structure(structure_id).snapshot()

    def get_timeline(self) -> TimelineState:
        return self.timeline

    # ------------------------------------------------------------------
    def structure_ids(self) -> List[ID]:
        return list(self._structures)

    def get_structure(self, structure_id: ID) -> Structure:
        try:
            return self._structures[structure_id]
        except KeyError:
            raise TargetNotFoundError(structure_id) from None

    def restore_structure(self, kind: str, structure_id: ID, snapshot: StateSnapshot) -> Structure:
        """Register a structure rebuilt from ``snapshot`` without recording steps."""
        structure = create_structure(kind, structure_id)
        structure.reset_from_snapshot(snapshot)
        self._structures[structure_id] = structure
        return structure

    def restore_timeline(self, entries: List[TimelineEntry]) -> None:
        """Replace the timeline with ``entries`` and move the cursor to the end."""
        total = sum(len(entry.steps) for entry in entries)
        self.timeline = TimelineState(
            entries=list(entries), current_step_index=total - 1, total_steps=total
        )

    def _append(
        self, steps: List[OpStep], label: Optional[str], op_meta: Optional[Dict[str, Any]]
    ) -> None:
        self.timeline = append_entry(self.timeline, steps, label, op_meta)
