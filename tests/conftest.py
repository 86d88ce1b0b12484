import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from tests.helper import make_agent, make_skill, skill_md, write_skill
from txnlab_skills.agents import Agent
from txnlab_skills.skills.models import Skill


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """A temporary directory, resolved so symlink targets compare equal."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp).resolve()


@pytest.fixture
def skills_dir(temp_dir: Path) -> Path:
    """An empty skills root."""
    d = temp_dir / "skills"
    d.mkdir()
    return d


@pytest.fixture
def mock_agent(temp_dir: Path) -> Agent:
    """An agent whose skill directory does not exist yet."""
    return make_agent(temp_dir)


@pytest.fixture
def source_skill(temp_dir: Path) -> Skill:
    """A skill source directory with a SKILL.md."""
    d = write_skill(
        temp_dir / "source",
        "my-skill",
        skill_md("name: my-skill\ndescription: Test skill\n", "# Test"),
    )
    return make_skill(d)
