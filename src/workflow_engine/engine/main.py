"""CLI entrypoint for the workflow engine.

Commands:
- ``serve``: run the REST API with uvicorn
- ``validate``: check a workflow definition JSON file and report every problem
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import uvicorn
from pydantic import ValidationError

from workflow_engine import __version__
from workflow_engine.engine.logging import configure_logging
from workflow_engine.engine.models import WorkflowDefinition
from workflow_engine.engine.validation import definition_problems
from workflow_engine.server.app import create_app
from workflow_engine.server.config import ServerSettings

logger = logging.getLogger(__name__)

# Exit codes are designed to be CI-friendly.
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_BAD_INPUT = 2
EXIT_REJECTED = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-engine",
        description="In-memory finite-state workflow engine",
    )
    parser.add_argument("--version", action="version", version=f"workflow-engine {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the REST API server")
    serve.add_argument(
        "--host",
        default=None,
        help="Interface to bind (defaults to WORKFLOW_ENGINE_HOST or 127.0.0.1)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind (defaults to WORKFLOW_ENGINE_PORT or 8000)",
    )

    validate = subparsers.add_parser(
        "validate",
        help="Validate a workflow definition JSON file without starting a server",
    )
    validate.add_argument("path", type=Path, help="Path to a workflow definition (JSON)")

    return parser


def _validate(path: Path) -> int:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    try:
        definition = WorkflowDefinition.model_validate_json(raw)
    except ValidationError as e:
        print(f"Malformed workflow definition in {path}:", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_BAD_INPUT

    problems = definition_problems(definition)
    if not problems:
        print(
            f"Workflow definition {definition.id!r} is valid "
            f"({len(definition.states)} states, {len(definition.actions)} actions)"
        )
        return EXIT_OK

    for problem in problems:
        print(f"{problem.code}: {problem.message}")
    logger.info(
        "Workflow definition rejected",
        extra={"path": str(path), "definition_id": definition.id, "problems": len(problems)},
    )
    return EXIT_REJECTED


def _serve(settings: ServerSettings, *, host: str | None, port: int | None) -> int:
    app = create_app(settings)
    bind_host = host or settings.host
    bind_port = port or settings.port
    logger.info("Starting workflow engine", extra={"host": bind_host, "port": bind_port})

    # log_config=None keeps the JSON logging configured above.
    uvicorn.run(app, host=bind_host, port=bind_port, log_config=None)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = ServerSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment / .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_BAD_INPUT

    configure_logging(settings.log_level)

    try:
        if args.command == "validate":
            return _validate(args.path)

        if args.command == "serve":
            return _serve(settings, host=args.host, port=args.port)

        logger.error("Unknown command", extra={"command": args.command})
        return EXIT_BAD_INPUT

    except Exception:
        logger.exception("Command failed")
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
