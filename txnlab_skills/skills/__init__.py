"""Skill discovery, validation and installation."""

from txnlab_skills.skills.installer import (
    dev_link,
    dev_unlink,
    install_skill,
    is_symlink_to,
    uninstall_skill,
)
from txnlab_skills.skills.models import (
    InstallMethod,
    InstallResult,
    RemoveResult,
    ScanResult,
    Skill,
    SkippedSkill,
    ValidationError,
    ValidationResult,
)
from txnlab_skills.skills.scanner import (
    discover_skills,
    find_skill,
    get_skills_dir,
    parse_skill_md,
    scan_skills,
)
from txnlab_skills.skills.validator import quick_check, validate_skill

__all__ = [
    "InstallMethod",
    "InstallResult",
    "RemoveResult",
    "ScanResult",
    "Skill",
    "SkippedSkill",
    "ValidationError",
    "ValidationResult",
    "dev_link",
    "dev_unlink",
    "discover_skills",
    "find_skill",
    "get_skills_dir",
    "install_skill",
    "is_symlink_to",
    "parse_skill_md",
    "quick_check",
    "scan_skills",
    "uninstall_skill",
    "validate_skill",
]
