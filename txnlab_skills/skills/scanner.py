"""Discover skills under a skills root directory."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from frontmatter import YAMLHandler

from txnlab_skills.env import TXNLAB_SKILLS_DIR
from txnlab_skills.errors import ManifestError, SkillsDirNotFoundError
from txnlab_skills.skills.models import (
    SKILL_MD,
    ScanResult,
    Skill,
    SkippedSkill,
)

logger = logging.getLogger(__name__)

_PACKAGE_ROOT = Path(__file__).resolve().parents[2]
_YAML = YAMLHandler()


def get_skills_dir() -> Path:
    """Locate the skills root directory.

    Checked in order: the ``TXNLAB_SKILLS_DIR`` override, ``skills/`` beside
    the installed package, and ``skills/`` in the current directory. An
    override is used as given and never falls back to the other locations.

    Raises:
        SkillsDirNotFoundError: The override is not a directory, or none of
            the candidates exist.
    """
    if TXNLAB_SKILLS_DIR is not None:
        if not TXNLAB_SKILLS_DIR.is_dir():
            raise SkillsDirNotFoundError([TXNLAB_SKILLS_DIR])
        logger.debug("using skills dir from TXNLAB_SKILLS_DIR: %s", TXNLAB_SKILLS_DIR)
        return TXNLAB_SKILLS_DIR

    candidates = [_PACKAGE_ROOT / "skills", Path.cwd() / "skills"]
    for candidate in candidates:
        if candidate.is_dir():
            logger.debug("using skills dir: %s", candidate)
            return candidate

    raise SkillsDirNotFoundError(candidates)


def read_manifest(manifest_path: Path) -> tuple[dict[str, Any], str]:
    """Load raw frontmatter fields and body from a SKILL.md file.

    Raises:
        ManifestError: The file is unreadable, has no frontmatter, or the
            frontmatter is not a YAML mapping.
    """
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(manifest_path, f"cannot read file: {e}") from e

    if not _YAML.detect(text):
        raise ManifestError(
            manifest_path,
            "missing YAML frontmatter (must be between --- delimiters)",
        )

    try:
        fm, content = _YAML.split(text)
    except ValueError as e:
        raise ManifestError(manifest_path, "unterminated YAML frontmatter") from e

    try:
        fields = _YAML.load(fm)
    except yaml.YAMLError as e:
        raise ManifestError(manifest_path, f"invalid YAML frontmatter: {e}") from e

    if fields is None:
        return {}, content
    if not isinstance(fields, dict):
        raise ManifestError(manifest_path, "frontmatter is not a key-value map")
    return fields, content


def _as_text(value: Any) -> str | None:
    """Coerce a YAML scalar to text; containers and null yield None."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, Mapping | list):
        return None
    return str(value)


def _as_metadata(value: Any) -> dict[str, str] | None:
    if not isinstance(value, Mapping):
        return None
    return {
        str(k): text for k, v in value.items() if (text := _as_text(v)) is not None
    }


def load_skill(manifest_path: Path, dir_path: Path) -> Skill:
    """Load a skill from its SKILL.md file.

    Field types are not enforced: scalar values such as ``version: 1.0`` are
    read as text so the skill stays discoverable. ``validate_skill`` reports
    them.

    Raises:
        ManifestError: The manifest cannot be parsed.
    """
    fields, body = read_manifest(manifest_path)
    return Skill(
        name=_as_text(fields.get("name")) or "",
        description=_as_text(fields.get("description")) or "",
        license=_as_text(fields.get("license")),
        compatibility=_as_text(fields.get("compatibility")),
        metadata=_as_metadata(fields.get("metadata")),
        body=body.strip(),
        dir_path=dir_path,
        manifest_path=manifest_path,
    )


def parse_skill_md(manifest_path: Path, dir_path: Path) -> Skill | None:
    """Load a skill, or return None if its SKILL.md cannot be parsed."""
    try:
        return load_skill(manifest_path, dir_path)
    except ManifestError as e:
        logger.debug("failed to load skill: %s", e)
        return None


def scan_skills(skills_dir: Path) -> ScanResult:
    """Scan the immediate subdirectories of ``skills_dir``.

    Directories without a SKILL.md are not skills and are ignored. Skills
    whose SKILL.md cannot be parsed are reported in ``ScanResult.skipped``.
    """
    result = ScanResult()
    if not skills_dir.is_dir():
        logger.warning("skill dir not found: %s", skills_dir)
        return result

    for entry in sorted(skills_dir.iterdir()):
        if not entry.is_dir():
            continue

        manifest_path = entry / SKILL_MD
        if not manifest_path.is_file():
            logger.debug("no %s in %s, skipping", SKILL_MD, entry)
            continue

        try:
            result.skills.append(load_skill(manifest_path, entry))
        except ManifestError as e:
            logger.warning("skipping skill %s: %s", entry.name, e.reason)
            result.skipped.append(
                SkippedSkill(
                    dir_path=entry, manifest_path=manifest_path, reason=e.reason
                )
            )

    result.skills.sort(key=lambda s: s.name)
    logger.debug(
        "scan found %s skills (%s skipped) under: %s",
        len(result.skills),
        len(result.skipped),
        skills_dir,
    )
    return result


def discover_skills(skills_dir: Path | None = None) -> list[Skill]:
    """List all skills, sorted by name."""
    return scan_skills(skills_dir or get_skills_dir()).skills


def find_skill(name: str, skills_dir: Path | None = None) -> Skill | None:
    """Get a skill by name."""
    for skill in discover_skills(skills_dir):
        if skill.name == name:
            return skill
    return None
