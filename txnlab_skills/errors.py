"""Errors raised by txnlab_skills."""

from pathlib import Path


class SkillsError(Exception):
    """Base error of txnlab_skills."""


class SkillsDirNotFoundError(SkillsError):
    """The skills root directory could not be located."""

    def __init__(self, searched: list[Path]) -> None:
        """Initialize the error."""
        self.searched = searched
        locations = ", ".join(str(p) for p in searched)
        super().__init__(
            "Could not find skills directory. "
            f"Searched: {locations}. "
            "Set TXNLAB_SKILLS_DIR or run from the package root."
        )


class ManifestError(SkillsError):
    """A SKILL.md file could not be loaded."""

    def __init__(self, manifest_path: Path, reason: str) -> None:
        """Initialize the error."""
        self.manifest_path = manifest_path
        self.reason = reason
        super().__init__(f"{manifest_path}: {reason}")
