"""Tests for deepflow utility functions."""

from pathlib import Path
from unittest.mock import patch

import pytest

from deepflow.config import DeepflowConfig
from deepflow.exceptions import FileOperationError
from deepflow.utils import copy_tree, describe_assets, parse_frontmatter, remove_path


class TestParseFrontmatter:
    """Test cases for parse_frontmatter."""

    def test_with_frontmatter(self):
        frontmatter, body = parse_frontmatter("---\nname: reasoner\n---\n\nBody text")

        assert frontmatter == {'name': 'reasoner'}
        assert body == "Body text"

    def test_without_frontmatter(self):
        assert parse_frontmatter("# Title") == ({}, "# Title")

    def test_unclosed_frontmatter(self):
        content = "---\nname: x\nno closing"
        assert parse_frontmatter(content) == ({}, content)

    def test_invalid_yaml(self):
        frontmatter, _ = parse_frontmatter("---\nname: [unclosed\n---\nbody")
        assert frontmatter == {}

    def test_non_mapping_yaml(self):
        frontmatter, _ = parse_frontmatter("---\n- a\n- b\n---\nbody")
        assert frontmatter == {}


class TestCopyTree:
    """Test cases for copy_tree."""

    def test_recursive_copy(self, temp_dir: Path):
        source = temp_dir / "src"
        (source / "nested").mkdir(parents=True)
        (source / "a.md").write_text("a")
        (source / "nested" / "b.md").write_text("b")

        copied = copy_tree(source, temp_dir / "dest")

        assert (temp_dir / "dest" / "a.md").read_text() == "a"
        assert (temp_dir / "dest" / "nested" / "b.md").read_text() == "b"
        assert len(copied) == 2

    def test_skips_bytecode_cache(self, temp_dir: Path):
        source = temp_dir / "src"
        (source / "__pycache__").mkdir(parents=True)
        (source / "__pycache__" / "x.pyc").write_bytes(b"\0")
        (source / "hook.py").write_text("")

        copy_tree(source, temp_dir / "dest")

        assert not (temp_dir / "dest" / "__pycache__").exists()

    def test_missing_source(self, temp_dir: Path):
        assert copy_tree(temp_dir / "missing", temp_dir / "dest") == []
        assert not (temp_dir / "dest").exists()

    def test_copy_failure(self, temp_dir: Path):
        source = temp_dir / "src"
        source.mkdir()
        (source / "a.md").write_text("a")

        with patch('shutil.copy2', side_effect=OSError("disk full")):
            with pytest.raises(FileOperationError, match="Failed to copy"):
                copy_tree(source, temp_dir / "dest")


class TestRemovePath:
    """Test cases for remove_path."""

    def test_remove_file(self, temp_dir: Path):
        target = temp_dir / "a.md"
        target.write_text("a")

        assert remove_path(target) is True
        assert not target.exists()

    def test_remove_directory(self, temp_dir: Path):
        target = temp_dir / "dir"
        (target / "nested").mkdir(parents=True)
        (target / "nested" / "a.md").write_text("a")

        assert remove_path(target) is True
        assert not target.exists()

    def test_missing(self, temp_dir: Path):
        assert remove_path(temp_dir / "missing") is False


class TestDescribeAssets:
    """Test cases for describe_assets."""

    def test_bundled_assets(self):
        summary = describe_assets(DeepflowConfig().assets_dir)

        assert '/df:spec' in summary['commands']
        assert '/df:update' in summary['commands']
        assert summary['skills'] == ['atomic-commits', 'code-completeness', 'gap-discovery']
        assert summary['agents'] == ['reasoner']

    def test_names_fall_back_to_paths(self, temp_dir: Path):
        (temp_dir / "skills" / "plain").mkdir(parents=True)
        (temp_dir / "agents").mkdir()
        (temp_dir / "agents" / "helper.md").write_text("no frontmatter")

        summary = describe_assets(temp_dir)

        assert summary == {'commands': [], 'skills': ['plain'], 'agents': ['helper']}
