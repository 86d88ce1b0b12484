"""Install skills into agent skill directories.

A skill is installed by symlinking ``<agent skill dir>/<skill name>`` to the
skill's source directory. Where the host cannot create symlinks, install
falls back to copying the source tree; dev links never fall back.

Every operation returns a result instead of raising, so a batch over many
(skill, agent) pairs keeps going past individual failures.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from txnlab_skills.skills.models import InstallMethod, InstallResult, RemoveResult

if TYPE_CHECKING:
    from txnlab_skills.agents import Agent
    from txnlab_skills.skills.models import Skill

logger = logging.getLogger(__name__)

# ERROR_PRIVILEGE_NOT_HELD, raised on Windows without developer mode.
_WINERROR_PRIVILEGE_NOT_HELD = 1314
_UNSUPPORTED_ERRNOS = frozenset(
    {errno.EPERM, errno.EACCES, errno.ENOTSUP, errno.EOPNOTSUPP, errno.ENOSYS}
)


def target_dir_for(
    agent: Agent, *, local: bool = False, cwd: Path | None = None
) -> Path:
    """Return the agent's skill directory for the install mode."""
    if local:
        return (cwd or Path.cwd()) / agent.local_skill_dir
    return agent.global_skill_dir


def _exists(path: Path) -> bool:
    """Like ``Path.exists`` but also true for dangling symlinks."""
    return path.is_symlink() or path.exists()


def create_symlink(
    source: Path, target: Path
) -> OSError | NotImplementedError | None:
    """Try to symlink ``target`` to ``source``.

    Returns:
        None on success, otherwise the error raised by the attempt.
    """
    try:
        os.symlink(source, target, target_is_directory=True)
    except (OSError, NotImplementedError) as e:
        return e
    return None


def should_fall_back_to_copy(error: OSError | NotImplementedError) -> bool:
    """Return True if ``error`` means the host cannot create symlinks."""
    if isinstance(error, NotImplementedError | PermissionError):
        return True
    if getattr(error, "winerror", None) == _WINERROR_PRIVILEGE_NOT_HELD:
        return True
    return error.errno in _UNSUPPORTED_ERRNOS


def install_skill(
    skill: Skill,
    agent: Agent,
    *,
    local: bool = False,
    cwd: Path | None = None,
) -> InstallResult:
    """Install a skill for an agent, replacing a previous symlink install."""
    target_dir = target_dir_for(agent, local=local, cwd=cwd)
    target = target_dir / skill.name
    source = skill.dir_path.resolve()
    result = InstallResult(
        success=False, skill_name=skill.name, agent=agent, target_path=target
    )

    try:
        target_dir.mkdir(parents=True, exist_ok=True)

        if _exists(target):
            if not target.is_symlink():
                result.error = (
                    f"Target path already exists and is not a symlink: {target}"
                )
                return result
            logger.debug("replacing existing symlink: %s", target)
            target.unlink()

        if (link_error := create_symlink(source, target)) is not None:
            if not should_fall_back_to_copy(link_error):
                result.error = str(link_error)
                return result
            logger.warning("cannot symlink %s (%s), copying", target, link_error)
            shutil.copytree(source, target)
            result.method = InstallMethod.COPY
    except OSError as e:
        logger.debug("install of %s failed", skill.name, exc_info=True)
        result.error = str(e)
        return result

    logger.info(
        "installed %s for %s at %s (%s)", skill.name, agent.name, target, result.method
    )
    result.success = True
    return result


def uninstall_skill(
    skill_name: str,
    agent: Agent,
    *,
    local: bool = False,
    cwd: Path | None = None,
) -> RemoveResult:
    """Remove a skill installed by symlink or by copy."""
    target = target_dir_for(agent, local=local, cwd=cwd) / skill_name
    result = RemoveResult(
        success=False, skill_name=skill_name, agent=agent, target_path=target
    )

    try:
        if not _exists(target):
            result.error = f'Skill "{skill_name}" is not installed at {target}'
            return result

        if target.is_symlink():
            target.unlink()
        else:
            shutil.rmtree(target)
    except OSError as e:
        result.error = str(e)
        return result

    logger.info("removed %s for %s at %s", skill_name, agent.name, target)
    result.success = True
    return result


def dev_link(skill: Skill, agent: Agent, *, force: bool = False) -> InstallResult:
    """Symlink a skill's source into the agent's global skill directory.

    A non-symlink target is only replaced when ``force`` is set.
    """
    target_dir = agent.global_skill_dir
    target = target_dir / skill.name
    source = skill.dir_path.resolve()
    result = InstallResult(
        success=False, skill_name=skill.name, agent=agent, target_path=target
    )

    try:
        target_dir.mkdir(parents=True, exist_ok=True)

        if _exists(target):
            if target.is_symlink():
                target.unlink()
            elif not force:
                result.error = (
                    f"Target already exists and is not a symlink: {target}. "
                    "Use --force to overwrite."
                )
                return result
            else:
                logger.warning("--force: removing existing directory %s", target)
                shutil.rmtree(target)

        if (link_error := create_symlink(source, target)) is not None:
            result.error = str(link_error)
            return result
    except OSError as e:
        result.error = str(e)
        return result

    logger.info("linked %s -> %s", target, source)
    result.success = True
    return result


def dev_unlink(skill_name: str, agent: Agent) -> RemoveResult:
    """Remove a dev symlink, refusing to touch anything that is not a symlink."""
    target = agent.global_skill_dir / skill_name
    result = RemoveResult(
        success=False, skill_name=skill_name, agent=agent, target_path=target
    )

    try:
        if not _exists(target):
            result.error = f"No skill linked at {target}"
            return result

        if not target.is_symlink():
            result.error = f"{target} is not a symlink (not managed by dev link)"
            return result

        target.unlink()
    except OSError as e:
        result.error = str(e)
        return result

    logger.info("unlinked %s", target)
    result.success = True
    return result


def is_symlink_to(target: Path, source: Path) -> bool:
    """Return True if ``target`` is a symlink resolving to ``source``."""
    try:
        return target.is_symlink() and target.resolve() == source.resolve()
    except (OSError, RuntimeError):
        return False
