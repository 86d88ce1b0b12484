"""Validate SKILL.md files against the skill schema.

Ref: https://agentskills.io/specification
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from txnlab_skills.errors import ManifestError
from txnlab_skills.skills.frontmatter import parse_frontmatter
from txnlab_skills.skills.models import (
    SKILL_MD,
    ValidationError,
    ValidationResult,
)
from txnlab_skills.skills.scanner import load_skill, read_manifest

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 64
DESCRIPTION_MAX_LENGTH = 1024
COMPATIBILITY_MAX_LENGTH = 500

NAME_RE = re.compile(r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?$")

_FENCED_CODE_RE = re.compile(r"```.*?```", re.DOTALL)
_INLINE_CODE_RE = re.compile(r"`[^`]+`")
_LINK_RE = re.compile(r"\[([^\]]*)\]\(([^)]+)\)")
_EXTERNAL_PREFIXES = ("http://", "https://", "mailto:", "#")


def _error(field: str, message: str) -> ValidationError:
    return ValidationError(field=field, message=message)


def extract_file_references(body: str) -> list[str]:
    """Return local link targets in ``body``, in order of appearance.

    Links inside fenced or inline code are ignored.
    """
    stripped = _INLINE_CODE_RE.sub("", _FENCED_CODE_RE.sub("", body))
    return [
        href
        for _, href in _LINK_RE.findall(stripped)
        if href and not href.startswith(_EXTERNAL_PREFIXES)
    ]


def _check_name(name: Any, dir_name: str) -> list[ValidationError]:
    if name is None or name == "":
        return [_error("name", 'Required field "name" is missing')]
    if not isinstance(name, str):
        return [_error("name", "Name must be a string")]

    errors: list[ValidationError] = []
    if len(name) > NAME_MAX_LENGTH:
        errors.append(
            _error(
                "name", f"Name must be 1-{NAME_MAX_LENGTH} characters, got {len(name)}"
            )
        )
    if not NAME_RE.match(name):
        errors.append(
            _error(
                "name",
                "Name must be lowercase alphanumeric with hyphens, "
                "no leading/trailing/consecutive hyphens",
            )
        )
    if "--" in name:
        errors.append(_error("name", "Name must not contain consecutive hyphens"))
    if name != dir_name:
        errors.append(
            _error(
                "name", f'Name "{name}" does not match directory name "{dir_name}"'
            )
        )
    return errors


def _check_description(description: Any) -> list[ValidationError]:
    if description is None or description == "":
        return [_error("description", 'Required field "description" is missing')]
    if not isinstance(description, str):
        return [_error("description", "Description must be a string")]
    if not description.strip():
        return [_error("description", "Description must not be blank")]
    if len(description) > DESCRIPTION_MAX_LENGTH:
        return [
            _error(
                "description",
                f"Description must be 1-{DESCRIPTION_MAX_LENGTH} characters, "
                f"got {len(description)}",
            )
        ]
    return []


def _check_license(fields: Mapping[str, Any]) -> list[ValidationError]:
    license_ = fields.get("license")
    if license_ is not None and not isinstance(license_, str):
        return [_error("license", "License must be a string")]
    return []


def _check_compatibility(fields: Mapping[str, Any]) -> list[ValidationError]:
    if "compatibility" not in fields:
        return []
    compatibility = fields["compatibility"]
    if not isinstance(compatibility, str):
        return [_error("compatibility", "Compatibility must be a string")]
    if not 1 <= len(compatibility) <= COMPATIBILITY_MAX_LENGTH:
        return [
            _error(
                "compatibility",
                f"Compatibility must be 1-{COMPATIBILITY_MAX_LENGTH} characters, "
                f"got {len(compatibility)}",
            )
        ]
    return []


def _check_metadata(fields: Mapping[str, Any]) -> list[ValidationError]:
    metadata = fields.get("metadata")
    if metadata is None:
        return []
    if not isinstance(metadata, Mapping):
        return [_error("metadata", "Metadata must be a key-value map")]

    errors: list[ValidationError] = []
    for key, value in metadata.items():
        if not isinstance(key, str):
            errors.append(_error("metadata", f'Metadata key "{key}" must be a string'))
        if not isinstance(value, str):
            errors.append(
                _error("metadata", f'Metadata value for key "{key}" must be a string')
            )
    return errors


def _check_references(body: str, dir_path: Path) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for ref in extract_file_references(body):
        # a leading slash still resolves under the skill directory
        ref_path = dir_path / ref.split("#", 1)[0].lstrip("/")
        if not ref_path.exists():
            errors.append(
                _error(
                    "references",
                    f'Referenced file "{ref}" does not exist at {ref_path}',
                )
            )
    return errors


def validate_skill(manifest_path: Path, dir_path: Path) -> ValidationResult:
    """Validate a skill's SKILL.md and the files it references.

    Every check runs, so the result lists all problems at once. A manifest
    that cannot be parsed yields a single error under the ``SKILL.md`` field.
    """
    try:
        fields, body = read_manifest(manifest_path)
    except ManifestError as e:
        logger.debug("cannot parse %s: %s", manifest_path, e.reason)
        return ValidationResult(
            valid=False,
            errors=[_error(SKILL_MD, f"Could not parse {SKILL_MD} file: {e.reason}")],
        )

    body = body.strip()
    errors = [
        *_check_name(fields.get("name"), dir_path.name),
        *_check_description(fields.get("description")),
        *_check_license(fields),
        *_check_compatibility(fields),
        *_check_metadata(fields),
    ]
    if not body:
        errors.append(
            _error("body", f"{SKILL_MD} body must contain content after frontmatter")
        )
    errors.extend(_check_references(body, dir_path))

    skill = None
    if not errors:
        try:
            skill = load_skill(manifest_path, dir_path)
        except ManifestError as e:
            errors.append(_error(SKILL_MD, f"Could not load {SKILL_MD}: {e.reason}"))

    logger.debug("validated %s: %s errors", dir_path.name, len(errors))
    return ValidationResult(valid=not errors, errors=errors, skill=skill)


def quick_check(dir_path: Path) -> list[ValidationError]:
    """Check only the required frontmatter fields of a skill directory.

    Uses the lightweight frontmatter parser, so it accepts frontmatter that
    strict YAML would reject.
    """
    manifest_path = dir_path / SKILL_MD
    if not manifest_path.is_file():
        return [_error(SKILL_MD, f"Missing {SKILL_MD}")]

    try:
        text = manifest_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return [_error(SKILL_MD, f"Could not read {SKILL_MD}: {e}")]

    parsed = parse_frontmatter(text)
    if parsed is None:
        return [
            _error(
                SKILL_MD,
                "Missing or invalid frontmatter (must be between --- delimiters)",
            )
        ]

    errors: list[ValidationError] = []
    name = parsed.fields.get("name")
    if not name:
        errors.append(_error("name", "Missing required field: name"))
    elif name != dir_path.name:
        errors.append(
            _error(
                "name",
                f'name "{name}" does not match directory name "{dir_path.name}"',
            )
        )

    description = parsed.fields.get("description")
    if not description:
        errors.append(_error("description", "Missing required field: description"))
    elif not description.strip():
        errors.append(_error("description", "description must be non-empty"))
    return errors
