"""Command handlers of the txnlab-skills CLI.

Each handler returns the process exit code.
"""

from __future__ import annotations

import logging
import shutil
import sys
import textwrap
from typing import TYPE_CHECKING

from txnlab_skills.skills.installer import (
    dev_link,
    dev_unlink,
    install_skill,
    uninstall_skill,
)
from txnlab_skills.skills.models import SKILL_MD, InstallMethod, ValidationError
from txnlab_skills.skills.scanner import (
    discover_skills,
    find_skill,
    get_skills_dir,
    scan_skills,
)
from txnlab_skills.skills.validator import quick_check, validate_skill

if TYPE_CHECKING:
    from pathlib import Path

    from txnlab_skills.agents import Agent, AgentRegistry
    from txnlab_skills.cli.cli_types import CLIArgs

logger = logging.getLogger(__name__)

PROG = "txnlab-skills"
OK = "✔"
FAIL = "✘"


def _err(message: str) -> None:
    print(message, file=sys.stderr)


def _wrap(text: str, indent: int) -> str:
    columns = shutil.get_terminal_size().columns
    width = max(columns - indent, 20)
    return textwrap.indent(textwrap.fill(text, width=width), " " * indent)


def _resolve_skill_names(args: CLIArgs, usage: str) -> list[str] | None:
    """Skill names given on the command line, or all skills with --all."""
    names = list(args.skill_names)
    if args.all:
        names = [s.name for s in discover_skills()]

    if not names:
        _err("No skills specified.")
        _err(f"Usage: {PROG} {usage} <skill-name...> or {PROG} {usage} --all")
        return None
    return names


def _resolve_agents(
    registry: AgentRegistry, agent_names: list[str], *, announce: bool = False
) -> tuple[list[Agent], bool]:
    """Resolve --agent options, or detect installed agents if none were given.

    Returns:
        The agents and whether every requested agent name was known.
    """
    if agent_names:
        resolved: list[Agent] = []
        all_known = True
        for name in agent_names:
            if (agent := registry.find(name)) is not None:
                resolved.append(agent)
            else:
                all_known = False
                known = ", ".join(registry.names())
                _err(f'  Unknown agent: "{name}" (known agents: {known})')
        return resolved, all_known

    detected = registry.detect_agents()
    logger.debug("no --agent given, using detected agents")
    if announce and detected:
        print("  Detected agents:")
        for agent in detected:
            print(f"  {OK} {agent.display_name}")
    return detected, True


def _no_agents() -> int:
    _err("No agents detected.")
    _err("Use --agent <name> to specify an agent manually.")
    return 1


def list_command(args: CLIArgs, registry: AgentRegistry) -> int:  # noqa: ARG001
    """List all available skills."""
    result = scan_skills(get_skills_dir())

    for skipped in result.skipped:
        _err(f"  Skipping {skipped.dir_path.name}: {skipped.reason}")

    if not result.skills:
        print("No skills found.")
        return 0

    print()
    print("Available skills:")
    print()
    width = max(len(s.name) for s in result.skills) + 2
    for skill in result.skills:
        print(f"  {skill.name.ljust(width)}{skill.description}")
    print()
    print(f"  Install: {PROG} add <skill-name>")
    print()
    return 0


def info_command(args: CLIArgs, registry: AgentRegistry) -> int:  # noqa: ARG001
    """Show detailed info about a skill."""
    skill = find_skill(args.skill_name or "")
    if skill is None:
        _err(f'Skill "{args.skill_name}" not found.')
        _err(f'Run "{PROG} list" to see available skills.')
        return 1

    print()
    print(skill.name)
    print()
    print(_wrap(skill.description, 2))
    print()

    if skill.metadata:
        for key, value in skill.metadata.items():
            print(f"  {key}: {value}")
        print()

    if skill.license:
        print(f"  License: {skill.license}")
    if skill.compatibility:
        print(f"  Compatibility: {skill.compatibility}")
    print(f"  Path: {skill.dir_path}")
    print()
    return 0


def add_command(args: CLIArgs, registry: AgentRegistry) -> int:
    """Install skills to detected or specified agents."""
    names = _resolve_skill_names(args, "add")
    if names is None:
        return 1

    agents, all_known = _resolve_agents(registry, args.agents, announce=True)
    if not agents:
        return _no_agents()

    skills = {s.name: s for s in discover_skills()}
    failed = not all_known
    for name in names:
        skill = skills.get(name)
        if skill is None:
            _err(f'  Skill "{name}" not found, skipping.')
            failed = True
            continue

        print()
        print(f"  Installing: {skill.name}")
        print(f"  -> {skill.description}")
        print()

        for agent in agents:
            result = install_skill(skill, agent, local=args.local)
            if result.success:
                note = " (copied)" if result.method is InstallMethod.COPY else ""
                print(
                    f"  {OK} {agent.display_name}: "
                    f"{result.skill_name} -> {result.target_path}{note}"
                )
            else:
                failed = True
                _err(f"  {FAIL} {agent.display_name}: {result.error}")

    print()
    return 1 if failed else 0


def _confirm(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def remove_command(args: CLIArgs, registry: AgentRegistry) -> int:
    """Remove skills from agents."""
    names = _resolve_skill_names(args, "remove")
    if names is None:
        return 1

    agents, all_known = _resolve_agents(registry, args.agents)
    if not agents:
        return _no_agents()

    if not args.yes and sys.stdin.isatty():
        targets = ", ".join(a.display_name for a in agents)
        if not _confirm(f"Remove {', '.join(names)} from {targets}?"):
            print("Aborted.")
            return 1

    failed = not all_known
    for name in names:
        for agent in agents:
            result = uninstall_skill(name, agent, local=args.local)
            if result.success:
                print(
                    f"  {OK} Removed {name} from {agent.display_name}: "
                    f"{result.target_path}"
                )
            else:
                failed = True
                _err(f"  {FAIL} {agent.display_name}: {result.error}")

    print()
    return 1 if failed else 0


def _print_validation(name: str, errors: list[ValidationError]) -> None:
    if not errors:
        print(f"  {OK} {name}")
        return
    print(f"  {FAIL} {name}")
    for error in errors:
        print(f"    {error.field}: {error.message}")


def _validate_dir(skill_dir: Path, *, quick: bool) -> list[ValidationError]:
    if quick:
        return quick_check(skill_dir)
    return validate_skill(skill_dir / SKILL_MD, skill_dir).errors


def validate_command(args: CLIArgs, registry: AgentRegistry) -> int:  # noqa: ARG001
    """Validate SKILL.md files."""
    skills_dir = get_skills_dir()

    if args.skill_name:
        skill_dir = skills_dir / args.skill_name
        if not skill_dir.is_dir() or (
            not args.quick and not (skill_dir / SKILL_MD).is_file()
        ):
            _err(f'Skill "{args.skill_name}" not found at {skill_dir}')
            return 1
        errors = _validate_dir(skill_dir, quick=args.quick)
        _print_validation(args.skill_name, errors)
        return 1 if errors else 0

    # quick mode reports directories missing SKILL.md, full mode skips them
    skill_dirs = [
        entry
        for entry in sorted(skills_dir.iterdir())
        if entry.is_dir() and (args.quick or (entry / SKILL_MD).is_file())
    ]
    if not skill_dirs:
        print("No skills found to validate.")
        return 0

    print()
    print("Validating skills...")
    print()

    all_valid = True
    for skill_dir in skill_dirs:
        errors = _validate_dir(skill_dir, quick=args.quick)
        _print_validation(skill_dir.name, errors)
        all_valid = all_valid and not errors

    print()
    if not all_valid:
        _err("  Some skills failed validation.")
        return 1
    print(f"  All {len(skill_dirs)} skills passed validation.")
    print()
    return 0


def dev_link_command(args: CLIArgs, registry: AgentRegistry) -> int:
    """Symlink skills from the skills root for local development."""
    names = _resolve_skill_names(args, "dev link")
    if names is None:
        return 1

    agents, all_known = _resolve_agents(registry, args.agents)
    if not agents:
        return _no_agents()

    skills = {s.name: s for s in discover_skills()}
    failed = not all_known
    for name in names:
        skill = skills.get(name)
        if skill is None:
            _err(f'  Skill "{name}" not found, skipping.')
            failed = True
            continue

        for agent in agents:
            result = dev_link(skill, agent, force=args.force)
            if result.success:
                print(f"  Linked: {skill.dir_path} -> {result.target_path}")
            else:
                failed = True
                _err(f"  Error: {result.error}")

    return 1 if failed else 0


def dev_unlink_command(args: CLIArgs, registry: AgentRegistry) -> int:
    """Remove dev symlinks."""
    names = _resolve_skill_names(args, "dev unlink")
    if names is None:
        return 1

    agents, all_known = _resolve_agents(registry, args.agents)
    if not agents:
        return _no_agents()

    failed = not all_known
    for name in names:
        for agent in agents:
            result = dev_unlink(name, agent)
            if result.success:
                print(f"  Unlinked: {result.target_path}")
            else:
                failed = True
                _err(f"  Error: {result.error}")

    return 1 if failed else 0
