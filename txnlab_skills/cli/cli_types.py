from __future__ import annotations

import argparse
from collections.abc import Callable

from txnlab_skills.agents import AgentRegistry


class CLIArgs(argparse.Namespace):
    """Parsed command line arguments."""

    command: str | None = None
    handler: Callable[[CLIArgs, AgentRegistry], int] | None = None
    verbose: bool = False
    skill_names: list[str]
    skill_name: str | None = None
    agents: list[str]
    local: bool = False
    all: bool = False
    yes: bool = False
    force: bool = False
    quick: bool = False
