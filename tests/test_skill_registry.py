"""
Tests for the skill registry.

Covers discovery, frontmatter parsing, exact-match lookup, tag filtering,
duplicate identifiers and reload.
"""

import pytest

from conftest import ALPHA_ENTRY, BETA_ENTRY, write_file


class TestFrontmatter:
    """_parse_frontmatter handles the simple key/value subset."""

    def test_parses_scalars_lists_and_ints(self):
        from skillshelf.skills.registry import _parse_frontmatter

        meta, body = _parse_frontmatter(ALPHA_ENTRY)
        assert meta["name"] == "alpha"
        assert meta["tags"] == ["security", "demo"]
        assert meta["version"] == 3
        assert body.lstrip().startswith("# Alpha")

    def test_quoted_values_are_unquoted(self):
        from skillshelf.skills.registry import _parse_frontmatter

        meta, _ = _parse_frontmatter('---\ndescription: "Quoted: with colon"\ntags: ["a", \'b\']\n---\nbody\n')
        assert meta["description"] == "Quoted: with colon"
        assert meta["tags"] == ["a", "b"]

    def test_no_frontmatter(self):
        from skillshelf.skills.registry import _parse_frontmatter

        assert _parse_frontmatter(BETA_ENTRY) == ({}, BETA_ENTRY)

    def test_unterminated_frontmatter_is_body(self):
        from skillshelf.skills.registry import _parse_frontmatter

        text = "---\nname: x\nno closing fence\n"
        assert _parse_frontmatter(text) == ({}, text)


class TestDiscovery:
    """Skill directories are found under the library root."""

    def test_loads_only_directories_with_entry(self, registry):
        assert registry.load() == 2
        assert registry.names() == ["alpha", "beta"]
        assert "notaskill" not in registry

    def test_metadata(self, registry):
        alpha = registry.get("alpha")
        assert alpha.description == "Alpha skill for tests"
        assert alpha.tags == ("security", "demo")
        assert alpha.version == 3

    def test_defaults_without_frontmatter(self, registry):
        beta = registry.get("beta")
        assert beta.name == "beta"
        assert beta.description == ""
        assert beta.tags == ()
        assert beta.version == 1

    def test_document_is_verbatim(self, registry):
        alpha = registry.get("alpha")
        assert alpha.document == ALPHA_ENTRY
        assert registry.entry_document("alpha") == ALPHA_ENTRY
        assert not alpha.content.startswith("---")

    def test_resources_exclude_entry_and_hidden_files(self, registry):
        assert registry.get("alpha").resources == (
            "assets/template.md",
            "references/guide.md",
            "references/nested/deep.md",
        )
        assert registry.get("beta").resources == ()

    def test_missing_library_dir(self, tmp_path):
        from skillshelf.skills import SkillRegistry

        registry = SkillRegistry(tmp_path / "absent")
        assert registry.load() == 0
        assert registry.list_skills() == []

    def test_custom_entry_filename(self, tmp_path):
        from skillshelf.skills import SkillRegistry

        write_file(tmp_path / "lib" / "gamma" / "README.md", "# Gamma\n")
        registry = SkillRegistry(tmp_path / "lib", entry_filename="README.md")
        assert registry.names() == ["gamma"]

    def test_entry_filename_defaults_from_settings(self, tmp_path, monkeypatch):
        from skillshelf.config import settings
        from skillshelf.skills import SkillRegistry

        monkeypatch.setattr(settings.skills, "entry_filename", "README.md")
        write_file(tmp_path / "lib" / "gamma" / "README.md", "# Gamma\n")
        registry = SkillRegistry(tmp_path / "lib")
        assert registry.entry_filename == "README.md"
        assert registry.names() == ["gamma"]

    def test_blank_name_falls_back_to_directory(self, library):
        from skillshelf.skills import SkillRegistry

        write_file(library / "gamma" / "SKILL.md", "---\nname:\ndescription: x\n---\n# G\n")
        registry = SkillRegistry(library)
        assert registry.names() == ["alpha", "beta", "gamma"]
        assert "" not in registry
        assert registry.get("gamma").description == "x"

    @pytest.mark.parametrize("name", ["team/gamma", "team gamma", "team\\gamma"])
    def test_unaddressable_name_is_skipped(self, library, name):
        from skillshelf.skills import SkillRegistry

        write_file(library / "gamma" / "SKILL.md", f"---\nname: {name}\n---\n# G\n")
        registry = SkillRegistry(library)
        assert registry.load() == 2
        assert registry.names() == ["alpha", "beta"]


class TestSkillNames:
    """is_valid_skill_name() accepts names that fit a URI segment."""

    @pytest.mark.parametrize("name", ["alpha", "owasp-appsec", "commit_style", "v2.skill"])
    def test_valid(self, name):
        from skillshelf.skills.registry import is_valid_skill_name

        assert is_valid_skill_name(name)

    @pytest.mark.parametrize("name", ["", "a/b", "a\\b", "a b", "tab\tname", "trailing\n"])
    def test_invalid(self, name):
        from skillshelf.skills.registry import is_valid_skill_name

        assert not is_valid_skill_name(name)


class TestLookup:
    """Lookups are exact and report missing skills."""

    def test_unknown_skill_raises(self, registry):
        from skillshelf.skills import NotFoundError, SkillNotFoundError

        with pytest.raises(SkillNotFoundError) as exc_info:
            registry.get("nonexistent-skill")
        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.skill_name == "nonexistent-skill"

    def test_no_partial_or_case_insensitive_match(self, registry):
        from skillshelf.skills import SkillNotFoundError

        for name in ("alp", "ALPHA", "alpha "):
            with pytest.raises(SkillNotFoundError):
                registry.get(name)

    def test_find_returns_none(self, registry):
        assert registry.find("nonexistent-skill") is None

    def test_entry_document_unknown(self, registry):
        from skillshelf.skills import SkillNotFoundError

        with pytest.raises(SkillNotFoundError):
            registry.entry_document("nonexistent-skill")

    def test_list_skills_sorted_with_descriptions(self, registry):
        summaries = registry.list_skills()
        assert [s.name for s in summaries] == ["alpha", "beta"]
        assert summaries[0].description == "Alpha skill for tests"

    def test_get_by_tag(self, registry):
        assert [s.name for s in registry.get_by_tag("security")] == ["alpha"]
        assert registry.get_by_tag("missing") == []

    def test_len(self, registry):
        assert len(registry) == 2


class TestUniqueness:
    """Two skills may not share an identifier."""

    def test_duplicate_name_raises(self, library):
        from skillshelf.skills import DuplicateSkillError, SkillRegistry

        write_file(library / "gamma" / "SKILL.md", "---\nname: alpha\n---\n# Copy\n")
        registry = SkillRegistry(library)

        with pytest.raises(DuplicateSkillError) as exc_info:
            registry.load()
        assert exc_info.value.name == "alpha"

    def test_registry_keeps_refusing_after_duplicate(self, library):
        from skillshelf.skills import DuplicateSkillError, SkillRegistry

        registry = SkillRegistry(library)
        assert registry.load() == 2
        write_file(library / "gamma" / "SKILL.md", "---\nname: beta\n---\n# Copy\n")

        with pytest.raises(DuplicateSkillError):
            registry.reload()
        with pytest.raises(DuplicateSkillError):
            registry.find("alpha")


class TestReload:
    """reload() re-reads the library."""

    def test_reload_picks_up_new_skill(self, library, registry):
        assert registry.names() == ["alpha", "beta"]
        write_file(library / "gamma" / "SKILL.md", "# Gamma\n")
        assert registry.names() == ["alpha", "beta"]
        assert registry.reload() == 3
        assert "gamma" in registry

    def test_unreadable_entry_is_skipped(self, library):
        from skillshelf.skills import SkillRegistry

        (library / "gamma").mkdir()
        (library / "gamma" / "SKILL.md").write_bytes(b"\xff\xfe\xfa not utf-8")
        registry = SkillRegistry(library)
        assert registry.load() == 2
        assert registry.find("gamma") is None


class TestResourceKind:
    """Paths are classified by their top-level directory."""

    def test_kinds(self):
        from skillshelf.skills.registry import resource_kind

        assert resource_kind("") == "entry"
        assert resource_kind("SKILL.md") == "entry"
        assert resource_kind("references/cheatsheets/authentication.md") == "reference"
        assert resource_kind("assets/report.md") == "asset"
        assert resource_kind("scripts/run.sh") == "other"
