"""Runtime configuration."""

import logging

from pydantic import BaseModel, Field

from txnlab_skills.env import TXNLAB_SKILLS_LOG_LEVEL


class LogConfig(BaseModel):
    """Config for logging."""

    level: str = Field(default=TXNLAB_SKILLS_LOG_LEVEL)
    format: str = "%(levelname)s %(name)s: %(message)s"


def setup_logging(config: LogConfig) -> None:
    """Configure the root logger from the given config."""
    logging.basicConfig(
        level=config.level.upper(),
        format=config.format,
        force=True,
    )
