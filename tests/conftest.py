"""Pytest configuration and fixtures for deepflow tests."""

import tempfile
from pathlib import Path
from typing import Generator, Optional

import pytest

from deepflow.config import DeepflowConfig
from deepflow.installer import Installer
from deepflow.store import Store
from deepflow.versioning import TriggerThrottle, VersionCache


class MemoryStore(Store):
    """In-memory store standing in for a cache file."""

    def __init__(self, content: Optional[str] = None):
        self.content = content
        self.writes = 0

    def read(self) -> Optional[str]:
        return self.content

    def write(self, content: str):
        self.content = content
        self.writes += 1

    def clear(self) -> bool:
        existed = self.content is not None
        self.content = None
        return existed


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def config(temp_dir: Path) -> DeepflowConfig:
    """Create a configuration rooted in a temporary home and project."""
    project_root = temp_dir / "project"
    project_root.mkdir()
    return DeepflowConfig(global_dir=temp_dir / "home" / ".claude", project_root=project_root)


@pytest.fixture
def installer(config: DeepflowConfig) -> Installer:
    """Create an installer for the bundled assets with a fixed version."""
    return Installer(config, version="1.2.0")


@pytest.fixture
def memory_store() -> MemoryStore:
    """Create an empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def version_cache(memory_store: MemoryStore) -> VersionCache:
    """Create a version cache backed by memory."""
    return VersionCache(memory_store)


@pytest.fixture
def throttle() -> TriggerThrottle:
    """Create a trigger throttle backed by memory."""
    return TriggerThrottle(MemoryStore(), window_seconds=60)
