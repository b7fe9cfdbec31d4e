"""Project file IO for :mod:`ltvis` sessions."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from .config import Config
from .core.session import Session
from .core.timeline import TimelineEntry
from .model.types import STRUCTURE_KINDS

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def project_to_dict(
    session: Session, title: str | None = None, created_at: str | None = None
) -> dict[str, Any]:
    """Return the project document for ``session``.

    Snapshots are taken with :meth:`Session.peek_snapshot`, so saving never
    resets the session's timeline.
    """

    saved_at = _now()
    meta: dict[str, Any] = {
        "version": Config.project["version"],
        "createdAt": created_at or saved_at,
        "savedAt": saved_at,
    }
    if title is not None:
        meta["title"] = title
    structures = [
        {
            "id": sid,
            "kind": session.get_structure(sid).kind,
            "snapshot": session.peek_snapshot(sid),
        }
        for sid in session.structure_ids()
    ]
    timeline = [entry.to_dict() for entry in session.get_timeline().entries]
    return {"meta": meta, "structures": structures, "timeline": timeline}


def save_project(
    path: str, session: Session, title: str | None = None, created_at: str | None = None
) -> None:
    """Write ``session`` to ``path`` as a JSON project file."""
    data = project_to_dict(session, title, created_at)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    logger.info(
        "saved %d structures and %d timeline entries to %s",
        len(data["structures"]),
        len(data["timeline"]),
        path,
    )


def load_project(path: str) -> Session:
    """Load a project file and return the rebuilt :class:`Session`.

    Structures are restored from their snapshots; no operation is replayed.
    Timeline entries are restored verbatim with the cursor on the last step.
    """

    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    _validate_project(data)
    session = Session()
    for item in data["structures"]:
        session.restore_structure(item["kind"], item["id"], item["snapshot"])
    session.restore_timeline([TimelineEntry.from_dict(e) for e in data.get("timeline", [])])
    logger.info("loaded project %s (%d structures)", path, len(data["structures"]))
    return session


def _validate_project(data: Any) -> None:
    if not isinstance(data, dict):
        raise ValueError("Project file must contain an object")
    if "meta" not in data or "structures" not in data:
        raise ValueError("Project file must contain 'meta' and 'structures'")
    if not isinstance(data["meta"], dict) or "version" not in data["meta"]:
        raise ValueError("'meta' must be an object with a 'version'")
    if not isinstance(data["structures"], list):
        raise ValueError("'structures' must be a list")
    for item in data["structures"]:
        if not isinstance(item, dict):
            raise ValueError("structure entries must be objects")
        if "id" not in item or "kind" not in item or "snapshot" not in item:
            raise ValueError("structure missing 'id', 'kind' or 'snapshot'")
        if item["kind"] not in STRUCTURE_KINDS:
            raise ValueError(f"unknown structure kind: {item['kind']}")
        snapshot = item["snapshot"]
        if not isinstance(snapshot, dict) or not isinstance(snapshot.get("nodes"), list):
            raise ValueError("snapshot must be an object with a 'nodes' list")
        if not isinstance(snapshot.get("edges", []), list):
            raise ValueError("snapshot 'edges' must be a list")
    timeline = data.get("timeline", [])
    if not isinstance(timeline, list):
        raise ValueError("'timeline' must be a list")
    for entry in timeline:
        if not isinstance(entry, dict):
            raise ValueError("timeline entries must be objects")
        if "id" not in entry or not isinstance(entry.get("steps"), list):
            raise ValueError("timeline entry missing 'id' or 'steps'")
