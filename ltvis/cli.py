"""Console entrypoint for the ``ltvis`` command."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional

from .config import Config
from .core.playback import PlaybackController
from .core.session import Session
from .demos import DEMOS, demo_operations, load_scenario
from .io import load_project, save_project
from .model.errors import EngineError
from .model.types import OpStep
from .viz.renderer import Renderer

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure logging from ``Config.logging`` and capture uncaught exceptions."""

    options: Dict[str, Any] = {
        "level": getattr(logging, str(Config.logging.get("level", "INFO")).upper(), logging.INFO),
        "format": Config.logging.get("format"),
    }
    if Config.logging.get("file"):
        options["filename"] = Config.logging["file"]
        options["filemode"] = "a"
    logging.basicConfig(**options)

    def _log_excepthook(exc_type, exc, tb) -> None:
        logging.getLogger(__name__).exception(
            "Uncaught exception", exc_info=(exc_type, exc, tb)
        )

    sys.excepthook = _log_excepthook


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ltvis")
    parser.add_argument("--config", help="JSON or YAML configuration file")
    sub = parser.add_subparsers(dest="command", required=True)

    run_p = sub.add_parser("run", help="Execute the operations of a scenario file")
    run_p.add_argument("scenario", help="YAML or JSON list of operations")
    demo_p = sub.add_parser("demo", help="Execute a built-in demo")
    demo_p.add_argument("name", choices=sorted(DEMOS))
    for p in (run_p, demo_p):
        p.add_argument("--speed", type=float, help="Playback speed multiplier")
        p.add_argument(
            "--play", action="store_true", help="Auto-play the timeline after executing"
        )
        p.add_argument("--save", help="Write the session to a project file")

    show_p = sub.add_parser("show", help="Summarise a saved project file")
    show_p.add_argument("project")
    return parser


def _step_line(step: OpStep, index: int) -> str:
    tips = [e["text"] for e in step.get("events", []) if e.get("type") == "Tip"]
    text = f"[{index}] {step.get('explain', '')}"
    if tips:
        text += f" | {tips[-1]}"
    error = step.get("error")
    if error:
        text += f" ({error['code']})"
    return text


def _print_timeline(session: Session) -> None:
    for entry in session.get_timeline().entries:
        last = entry.steps[-1] if entry.steps else {}
        status = last.get("error", {}).get("code", "ok")
        print(f"#{entry.id} {entry.label}: {len(entry.steps)} steps [{status}]")


def _execute(session: Session, operations: List[Dict[str, Any]]) -> None:
    for op in operations:
        session.execute_operation(op)


def _play(session: Session, speed: Optional[float]) -> Renderer:
    renderer = Renderer()
    controller = PlaybackController(
        renderer,
        session.get_timeline,
        on_step_applied=lambda step, index: print(_step_line(step, index)),
    )
    if speed:
        controller.set_speed(speed)
    asyncio.run(controller.play())
    return renderer


def _show(path: str) -> None:
    session = load_project(path)
    for sid in session.structure_ids():
        snapshot = session.peek_snapshot(sid)
        kind = session.get_structure(sid).kind
        print(
            f"{sid} ({kind}): {len(snapshot['nodes'])} nodes, {len(snapshot['edges'])} edges"
        )
    _print_timeline(session)


def main(argv: Optional[List[str]] = None) -> int:
    """Parse ``ltvis`` CLI arguments and dispatch to the selected command."""

    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.config:
        Config.load_from_file(args.config)
    _configure_logging()

    try:
        if args.command == "show":
            _show(args.project)
            return 0
        if args.command == "run":
            operations = load_scenario(args.scenario)
        else:
            operations = demo_operations(args.name)
        session = Session()
        _execute(session, operations)
    except (EngineError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    _print_timeline(session)
    if args.play:
        _play(session, args.speed)
    if args.save:
        save_project(args.save, session)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
