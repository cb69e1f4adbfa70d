"""
cardtrace.commands.validate - Validate trace consistency of a project.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from cardtrace.project import load_project_file
from cardtrace.validation import validate_project_directory


def run(args: argparse.Namespace, config: dict[str, Any]) -> int:
    """Run the validate command.

    Card and trace files are looked up in ``--dir``, falling back to
    ``project.output_dir`` from the config, relative to the project file.

    Returns:
        Exit code (0 when valid, 1 on validation errors).
    """
    project_path: Path = args.project_file
    try:
        project = load_project_file(project_path)
    except (OSError, ValueError) as e:
        print(f"Error loading project {project_path}: {e}", file=sys.stderr)
        return 1

    if args.dir is not None:
        base_dir = args.dir
    else:
        base_dir = project_path.parent / config.get("project", {}).get("output_dir", ".")

    if not args.quiet and not args.json:
        print(f"Validating project '{project.metadata.name}' in: {base_dir}")

    result = validate_project_directory(project, base_dir)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return 0 if result.ok else 1

    if result.issues and not args.quiet:
        print()
        for issue in result.issues:
            print(issue)

    errors = result.errors()
    warnings = result.warnings()
    if not args.quiet:
        print("─" * 60)
        print(
            f"{len(project.card_files)} card files, {len(project.trace_files)} trace files checked"
        )
        if errors:
            print(f"❌ {len(errors)} errors")
        if warnings:
            print(f"⚠️  {len(warnings)} warnings")
        if result.ok and not warnings:
            print("✓ All trace references valid")

    if not result.ok:
        if args.quiet:
            for issue in errors:
                print(issue, file=sys.stderr)
        return 1
    return 0
