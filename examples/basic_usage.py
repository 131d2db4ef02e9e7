#!/usr/bin/env python3
"""Programmatic usage example.

This demonstrates using the engine components directly, without the server:

* load a definition from JSON and submit it
* start an instance
* apply actions and print the resulting history
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from workflow_engine.engine.config import EngineSettings
from workflow_engine.engine.errors import WorkflowError
from workflow_engine.engine.logging import configure_logging
from workflow_engine.engine.models import WorkflowDefinition
from workflow_engine.engine.service import WorkflowService


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a workflow instance (programmatic example).")
    parser.add_argument(
        "--definition",
        default=str(Path(__file__).with_name("leave_approval.json")),
        help="Path to a workflow definition JSON file",
    )
    parser.add_argument(
        "actions",
        nargs="*",
        default=["submit", "approve"],
        help="Action ids to apply in order",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = EngineSettings()
    configure_logging(settings.log_level)

    definition = WorkflowDefinition.model_validate_json(
        Path(args.definition).read_text(encoding="utf-8")
    )
    service = WorkflowService()

    try:
        service.submit_definition(definition)
        instance = service.start_instance(definition.id)
        for action_id in args.actions:
            service.execute_action(instance.id, action_id)
    except WorkflowError as exc:
        print(f"{exc.code}: {exc.message}")
        return 1

    print(f"Instance {instance.id} is now in state {instance.current_state!r}")
    for item in instance.history:
        print(f"  {item.timestamp.isoformat()} {item.action_id}: {item.from_state} -> {item.to_state}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
