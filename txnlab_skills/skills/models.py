"""Skill data models.

Ref: https://agentskills.io/specification
"""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from txnlab_skills.agents import Agent

SKILL_MD = "SKILL.md"


class Skill(BaseModel):
    """Content loaded from SKILL.md."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    license: str | None = None
    compatibility: str | None = None
    metadata: dict[str, str] | None = None
    body: str
    dir_path: Path
    manifest_path: Path


class ValidationError(BaseModel):
    """A single schema violation found in a SKILL.md file."""

    field: str
    message: str


class ValidationResult(BaseModel):
    """Outcome of validating one skill."""

    valid: bool
    errors: list[ValidationError]
    skill: Skill | None = None


class InstallMethod(StrEnum):
    """How a skill ended up at its target path."""

    SYMLINK = "symlink"
    COPY = "copy"


@dataclass
class InstallResult:
    """Result of installing or dev-linking one skill for one agent."""

    success: bool
    skill_name: str
    agent: Agent
    target_path: Path
    method: InstallMethod = InstallMethod.SYMLINK
    error: str | None = None


@dataclass
class RemoveResult:
    """Result of uninstalling or dev-unlinking one skill for one agent."""

    success: bool
    skill_name: str
    agent: Agent
    target_path: Path
    error: str | None = None


@dataclass
class SkippedSkill:
    """A skill directory whose SKILL.md could not be loaded."""

    dir_path: Path
    manifest_path: Path
    reason: str


@dataclass
class ScanResult:
    """Everything found under a skills root."""

    skills: list[Skill] = field(default_factory=list)
    skipped: list[SkippedSkill] = field(default_factory=list)
