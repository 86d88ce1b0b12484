from pathlib import Path

from txnlab_skills.agents import Agent
from txnlab_skills.skills.models import Skill


def write_skill(root: Path, dir_name: str, content: str) -> Path:
    """Write a SKILL.md into ``root/dir_name`` and return the directory."""
    d = root / dir_name
    d.mkdir(parents=True, exist_ok=True)
    (d / "SKILL.md").write_text(content, encoding="utf-8")
    return d


def skill_md(frontmatter: str, body: str) -> str:
    """Build SKILL.md content from frontmatter lines and a body."""
    return f"---\n{frontmatter}---\n\n{body}"


def make_agent(root: Path, name: str = "test-agent") -> Agent:
    """Agent whose directories all live under ``root``."""
    return Agent(
        name=name,
        display_name="Test Agent",
        global_skill_dir=root / "agent-skills",
        local_skill_dir=Path(".test-agent") / "skills",
        probe_paths=(root / f".{name}",),
    )


def make_skill(dir_path: Path, name: str = "my-skill") -> Skill:
    """Skill record pointing at ``dir_path``."""
    return Skill(
        name=name,
        description="Test skill",
        body="# Test",
        dir_path=dir_path,
        manifest_path=dir_path / "SKILL.md",
    )
