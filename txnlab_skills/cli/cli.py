"""txnlab-skills CLI."""

import argparse
import logging
import sys

from txnlab_skills import __version__
from txnlab_skills.agents import AgentRegistry, build_registry
from txnlab_skills.cli import commands
from txnlab_skills.cli.cli_types import CLIArgs
from txnlab_skills.conf import LogConfig, setup_logging
from txnlab_skills.errors import SkillsError

logger = logging.getLogger(__name__)


def _add_agent_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-a",
        "--agent",
        action="append",
        default=[],
        help="Target agent (repeatable). Defaults to detected agents.",
        dest="agents",
    )


def _add_batch_options(
    parser: argparse.ArgumentParser, verb: str, *, with_scope: bool
) -> None:
    parser.add_argument(
        "skill_names",
        nargs="*",
        default=[],
        metavar="skill-name",
        help=f"Skills to {verb}.",
    )
    _add_agent_option(parser)
    parser.add_argument(
        "--all",
        action="store_true",
        help=f"{verb.capitalize()} all skills.",
    )
    if with_scope:
        scope = parser.add_mutually_exclusive_group()
        scope.add_argument(
            "-g",
            "--global",
            action="store_false",
            dest="local",
            default=False,
            help="Use the global skill directory (default).",
        )
        scope.add_argument(
            "-l",
            "--local",
            action="store_true",
            dest="local",
            help="Use the project-level skill directory.",
        )
        parser.add_argument(
            "-y",
            "--yes",
            action="store_true",
            help="Skip confirmation prompts.",
        )


def setup_argument_parser() -> argparse.ArgumentParser:
    """Setup the argument parser."""
    parser = argparse.ArgumentParser(
        prog=commands.PROG,
        description="Agent skills for TxnLab's Algorand ecosystem",
    )
    parser.add_argument(
        "-v", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command")

    list_parser = subparsers.add_parser("list", help="List all available skills")
    list_parser.set_defaults(handler=commands.list_command)

    info_parser = subparsers.add_parser("info", help="Show detailed info about a skill")
    info_parser.add_argument("skill_name", metavar="skill-name")
    info_parser.set_defaults(handler=commands.info_command)

    add_parser = subparsers.add_parser(
        "add", help="Install skill(s) to detected/specified agent(s)"
    )
    _add_batch_options(add_parser, "install", with_scope=True)
    add_parser.set_defaults(handler=commands.add_command)

    remove_parser = subparsers.add_parser(
        "remove", help="Remove skill(s) from agent(s)"
    )
    _add_batch_options(remove_parser, "remove", with_scope=True)
    remove_parser.set_defaults(handler=commands.remove_command)

    validate_parser = subparsers.add_parser(
        "validate", help="Validate SKILL.md file(s)"
    )
    validate_parser.add_argument(
        "skill_name",
        nargs="?",
        default=None,
        metavar="skill-name",
        help="Skill to validate (validates all if omitted).",
    )
    validate_parser.add_argument(
        "--quick",
        action="store_true",
        help="Only check the required frontmatter fields.",
    )
    validate_parser.set_defaults(handler=commands.validate_command)

    dev_parser = subparsers.add_parser(
        "dev", help="Development commands for local skill authoring"
    )
    dev_subparsers = dev_parser.add_subparsers(dest="dev_command", required=True)

    link_parser = dev_subparsers.add_parser(
        "link", help="Symlink skill(s) from repo for local development"
    )
    _add_batch_options(link_parser, "link", with_scope=False)
    link_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite existing non-symlink targets.",
    )
    link_parser.set_defaults(handler=commands.dev_link_command)

    unlink_parser = dev_subparsers.add_parser("unlink", help="Remove dev symlinks")
    _add_batch_options(unlink_parser, "unlink", with_scope=False)
    unlink_parser.set_defaults(handler=commands.dev_unlink_command)

    return parser


def main(
    argv: list[str] | None = None, registry: AgentRegistry | None = None
) -> int:
    """txnlab-skills CLI entrypoint."""
    parser = setup_argument_parser()
    args = parser.parse_args(argv, namespace=CLIArgs())

    setup_logging(LogConfig(level="DEBUG") if args.verbose else LogConfig())

    if args.handler is None:
        parser.print_help()
        return 1

    if registry is None:
        registry = build_registry()
    try:
        return args.handler(args, registry)
    except SkillsError as e:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
