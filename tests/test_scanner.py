"""Tests for skill discovery."""

from pathlib import Path

import pytest

from tests.helper import skill_md, write_skill
from txnlab_skills.errors import ManifestError, SkillsDirNotFoundError
from txnlab_skills.skills import scanner
from txnlab_skills.skills.scanner import (
    discover_skills,
    find_skill,
    get_skills_dir,
    load_skill,
    parse_skill_md,
    scan_skills,
)

ALPHA_SKILL = skill_md(
    'name: alpha\ndescription: "Alpha skill."\n', "# Alpha\n\nContent."
)
BETA_SKILL = skill_md(
    "name: beta\ndescription: Beta skill.\nmetadata:\n  author: test\n",
    "# Beta\n\nContent.",
)
INVALID_YAML_SKILL = """\
---
name: [invalid
description: : bad yaml {{
---

Body content.
"""


@pytest.fixture
def populated_dir(skills_dir: Path) -> Path:
    """Skills root with two skills, a non-skill directory and a stray file."""
    write_skill(skills_dir, "beta", BETA_SKILL)
    write_skill(skills_dir, "alpha", ALPHA_SKILL)
    not_a_skill = skills_dir / "not-a-skill"
    not_a_skill.mkdir()
    (not_a_skill / "README.md").write_text("# Not a skill", encoding="utf-8")
    (skills_dir / "stray-file.txt").write_text("nothing", encoding="utf-8")
    return skills_dir


class TestDiscoverSkills:
    """Tests for discover_skills and scan_skills."""

    def test_discovers_skills_sorted_by_name(self, populated_dir: Path) -> None:
        """Test that skills are returned sorted by name."""
        skills = discover_skills(populated_dir)

        assert [s.name for s in skills] == ["alpha", "beta"]

    def test_single_skill(self, skills_dir: Path) -> None:
        """Test discovering one skill with its fields and trimmed body."""
        write_skill(skills_dir, "alpha", ALPHA_SKILL)

        skills = discover_skills(skills_dir)

        assert len(skills) == 1
        skill = skills[0]
        assert skill.name == "alpha"
        assert skill.description == "Alpha skill."
        assert skill.body == "# Alpha\n\nContent."
        assert skill.dir_path == skills_dir / "alpha"
        assert skill.manifest_path == skills_dir / "alpha" / "SKILL.md"

    def test_sorted_by_frontmatter_name(self, skills_dir: Path) -> None:
        """Test that sorting uses the declared name, not the directory."""
        write_skill(skills_dir, "a-dir", skill_md("name: zeta\ndescription: z\n", "z"))
        write_skill(skills_dir, "z-dir", skill_md("name: eta\ndescription: e\n", "e"))

        assert [s.name for s in discover_skills(skills_dir)] == ["eta", "zeta"]

    def test_nonexistent_dir(self, temp_dir: Path) -> None:
        """Test that a missing root yields no skills."""
        assert discover_skills(temp_dir / "nonexistent") == []

    def test_ignores_directories_without_skill_md(self, populated_dir: Path) -> None:
        """Test that directories without SKILL.md are not skills."""
        result = scan_skills(populated_dir)

        assert "not-a-skill" not in [s.name for s in result.skills]
        assert result.skipped == []

    def test_unparseable_skill_reported_as_skipped(self, skills_dir: Path) -> None:
        """Test that a broken manifest is skipped with a reason."""
        write_skill(skills_dir, "alpha", ALPHA_SKILL)
        write_skill(skills_dir, "broken", INVALID_YAML_SKILL)
        write_skill(skills_dir, "plain", "# No frontmatter\n")

        result = scan_skills(skills_dir)

        assert [s.name for s in result.skills] == ["alpha"]
        assert [s.dir_path.name for s in result.skipped] == ["broken", "plain"]
        assert "YAML" in result.skipped[0].reason
        assert "frontmatter" in result.skipped[1].reason

    def test_non_string_scalars_kept(self, skills_dir: Path) -> None:
        """Test that scalar field types do not hide a skill from discovery."""
        write_skill(
            skills_dir,
            "typed",
            skill_md(
                "name: typed\ndescription: d\nlicense: 2\n"
                "metadata:\n  version: 1.0\n  nested: {a: b}\n",
                "b",
            ),
        )

        result = scan_skills(skills_dir)

        assert result.skipped == []
        [skill] = result.skills
        assert skill.license == "2"
        assert skill.metadata == {"version": "1.0"}
        assert find_skill("typed", skills_dir) == skill

    def test_non_mapping_frontmatter_skipped(self, skills_dir: Path) -> None:
        """Test that frontmatter that is not a mapping is a parse failure."""
        write_skill(skills_dir, "listy", "---\n- a\n- b\n---\n\nBody\n")

        result = scan_skills(skills_dir)

        assert result.skills == []
        assert "key-value map" in result.skipped[0].reason


class TestParseSkillMd:
    """Tests for parse_skill_md and load_skill."""

    def test_parses_metadata(self, skills_dir: Path) -> None:
        """Test that nested metadata is loaded as a mapping."""
        d = write_skill(skills_dir, "beta", BETA_SKILL)

        skill = parse_skill_md(d / "SKILL.md", d)

        assert skill is not None
        assert skill.metadata == {"author": "test"}

    def test_missing_file(self, temp_dir: Path) -> None:
        """Test that a missing file yields None."""
        assert parse_skill_md(temp_dir / "SKILL.md", temp_dir) is None

    def test_load_skill_raises(self, temp_dir: Path) -> None:
        """Test that load_skill reports the manifest path."""
        with pytest.raises(ManifestError) as exc_info:
            load_skill(temp_dir / "SKILL.md", temp_dir)

        assert exc_info.value.manifest_path == temp_dir / "SKILL.md"


class TestFindSkill:
    """Tests for find_skill."""

    def test_finds_skill_by_name(self, populated_dir: Path) -> None:
        """Test finding a skill by name."""
        skill = find_skill("alpha", populated_dir)

        assert skill is not None
        assert skill.name == "alpha"

    def test_missing_skill(self, populated_dir: Path) -> None:
        """Test that an unknown name yields None."""
        assert find_skill("nonexistent", populated_dir) is None


class TestGetSkillsDir:
    """Tests for skills root resolution."""

    def test_env_override(
        self, skills_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that TXNLAB_SKILLS_DIR wins."""
        monkeypatch.setattr(scanner, "TXNLAB_SKILLS_DIR", skills_dir)

        assert get_skills_dir() == skills_dir

    def test_falls_back_to_cwd(
        self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that ./skills is used when the package has none."""
        (temp_dir / "skills").mkdir()
        monkeypatch.setattr(scanner, "TXNLAB_SKILLS_DIR", None)
        monkeypatch.setattr(scanner, "_PACKAGE_ROOT", temp_dir / "pkg")
        monkeypatch.chdir(temp_dir)

        assert get_skills_dir() == temp_dir / "skills"

    def test_not_found(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a missing root is a configuration error."""
        monkeypatch.setattr(scanner, "TXNLAB_SKILLS_DIR", None)
        monkeypatch.setattr(scanner, "_PACKAGE_ROOT", temp_dir / "pkg")
        monkeypatch.chdir(temp_dir)

        with pytest.raises(SkillsDirNotFoundError):
            get_skills_dir()

    def test_missing_override_does_not_fall_back(
        self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that an override pointing nowhere is an error."""
        (temp_dir / "skills").mkdir()
        monkeypatch.setattr(scanner, "TXNLAB_SKILLS_DIR", temp_dir / "missing")
        monkeypatch.chdir(temp_dir)

        with pytest.raises(SkillsDirNotFoundError) as exc_info:
            get_skills_dir()

        assert exc_info.value.searched == [temp_dir / "missing"]
