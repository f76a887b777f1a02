"""Output of sweep outcomes as shell snippets, JSON or YAML."""

import json
import shlex
from typing import Any, Dict, List

import yaml
from rich.console import Console

from .cleanup import DELETED, ERROR, POTENTIAL, SUGGESTED, SweepOutcome

FORMATS = ("text", "json", "yaml")


def delete_command(branch: str) -> str:
    """Shell command that force-deletes a branch."""
    return f"git branch -D {shlex.quote(branch)}"


def print_outcome(outcome: SweepOutcome, console: Console) -> None:
    """
    Print one outcome in text mode.

    Deleted branches get a confirmation line. Suggested and potentially merged
    branches get a copy-pasteable snippet: the command to compare both sides,
    the command to delete the branch, then a blank line. Errors were already
    reported on stderr, everything else prints nothing.
    """
    if outcome.action == DELETED:
        console.print(f"[green]Deleted branch {outcome.branch} ({outcome.reason})[/green]")
    elif outcome.action in (SUGGESTED, POTENTIAL) and outcome.verdict is not None:
        # No markup, highlighting or wrapping: this is meant for a shell
        console.out(outcome.verdict.compare_command, highlight=False)
        console.out(delete_command(outcome.branch), highlight=False)
        console.out("", highlight=False)


def outcomes_to_dict(trunk: str, outcomes: List[SweepOutcome]) -> Dict[str, Any]:
    """Build the JSON/YAML document for reported outcomes."""
    reported = [outcome for outcome in outcomes if outcome.is_reported]
    return {
        "trunk": trunk,
        "branches": [outcome.to_dict() for outcome in reported],
        "deleted": sum(1 for outcome in reported if outcome.action == DELETED),
        "errors": sum(1 for outcome in reported if outcome.action == ERROR),
    }


def print_document(
    trunk: str, outcomes: List[SweepOutcome], format_type: str, console: Console
) -> None:
    """Print all reported outcomes as a single JSON or YAML document."""
    output = outcomes_to_dict(trunk, outcomes)
    if format_type == "json":
        text = json.dumps(output, indent=2)
    elif format_type == "yaml":
        text = yaml.safe_dump(output, default_flow_style=False, sort_keys=False).rstrip("\n")
    else:
        raise ValueError(f"Unsupported document format: {format_type}")
    console.out(text, highlight=False)
