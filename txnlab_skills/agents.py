"""Host agents that can consume skills."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from txnlab_skills.env import TXNLAB_SKILLS_HOME

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Agent:
    """Static descriptor of a host agent.

    `local_skill_dir` is relative to the project directory the CLI runs in.
    """

    name: str
    display_name: str
    global_skill_dir: Path
    local_skill_dir: Path
    probe_paths: tuple[Path, ...] = ()

    def detect(self) -> bool:
        """Return True if any probe path exists on this machine."""
        return any(p.exists() for p in self.probe_paths)


def _dot_dir_agent(
    name: str, display_name: str, home: Path, dot_dir: str, *extra_probes: str
) -> Agent:
    return Agent(
        name=name,
        display_name=display_name,
        global_skill_dir=home / dot_dir / "skills",
        local_skill_dir=Path(dot_dir) / "skills",
        probe_paths=(home / dot_dir, *(home / p for p in extra_probes)),
    )


def default_agents(home: Path) -> tuple[Agent, ...]:
    """Known agents, rooted at the given home directory."""
    return (
        _dot_dir_agent("claude-code", "Claude Code", home, ".claude", ".claude.json"),
        _dot_dir_agent("codex", "Codex", home, ".codex"),
        _dot_dir_agent("cursor", "Cursor", home, ".cursor"),
        _dot_dir_agent("opencode", "OpenCode", home, ".opencode"),
    )


class AgentRegistry:
    """Read-only, ordered collection of agents."""

    def __init__(self, agents: Iterable[Agent]) -> None:
        """Initialize the registry."""
        self._agents = tuple(agents)

    def __iter__(self) -> Iterator[Agent]:
        return iter(self._agents)

    def __len__(self) -> int:
        return len(self._agents)

    @property
    def agents(self) -> tuple[Agent, ...]:
        """All agents in registry order."""
        return self._agents

    def names(self) -> list[str]:
        """Names of all agents."""
        return [a.name for a in self._agents]

    def find(self, name: str) -> Agent | None:
        """Get an agent by name."""
        for agent in self._agents:
            if agent.name == name:
                return agent
        return None

    def detect_agents(self) -> list[Agent]:
        """Agents present on this machine, in registry order."""
        detected = [a for a in self._agents if a.detect()]
        logger.debug("detected agents: %s", [a.name for a in detected])
        return detected


def build_registry(home: Path | None = None) -> AgentRegistry:
    """Build the registry of known agents."""
    return AgentRegistry(default_agents(home or TXNLAB_SKILLS_HOME))
