"""txnlab-skills command line interface."""

from txnlab_skills.cli.cli import main

__all__ = ["main"]
