"""
Configuration for deepflow.

Resolves the install scopes, cache locations and bundled asset paths, and holds
the constants shared by the installer, the update checker and the statusline.
"""

import os
import shlex
import sys
from pathlib import Path
from typing import Dict, List, Optional, Union


class DeepflowConfig:
    """Paths and constants for deepflow install scopes and runtime files."""

    PACKAGE_NAME = 'deepflow'

    GLOBAL_SCOPE = 'global'
    PROJECT_SCOPE = 'project'
    SCOPES = (GLOBAL_SCOPE, PROJECT_SCOPE)

    CLAUDE_DIR = '.claude'
    SETTINGS_FILE = 'settings.json'
    CACHE_DIR = 'cache'
    UPDATE_CACHE_FILE = 'df-update-check.json'
    TRIGGER_FILE = 'df-trigger-time'
    CONTEXT_DIR = '.deepflow'
    CONTEXT_FILE = 'context.json'

    # Asset categories copied into a scope: (bundled source, destination)
    ASSET_DIRS = {
        'commands': ('commands/df', 'commands/df'),
        'skills': ('skills', 'skills'),
        'agents': ('agents', 'agents'),
    }
    HOOKS_DIR = 'hooks'
    STATUSLINE_HOOK = 'df-statusline.py'
    UPDATE_CHECK_HOOK = 'df-check-update.py'

    # Substrings identifying our own registrations in the host settings
    STATUSLINE_MARKER = 'df-statusline'
    UPDATE_CHECK_MARKER = 'df-check-update'

    TRIGGER_THROTTLE_SECONDS = 60
    REGISTRY_TIMEOUT_SECONDS = 10

    GLOBAL_DIR_ENV = 'CLAUDE_CONFIG_DIR'
    REGISTRY_COMMAND_ENV = 'DEEPFLOW_REGISTRY_COMMAND'

    def __init__(self, global_dir: Optional[Union[str, Path]] = None,
                 project_root: Optional[Union[str, Path]] = None,
                 assets_dir: Optional[Union[str, Path]] = None):
        if global_dir is None:
            env_dir = os.environ.get(self.GLOBAL_DIR_ENV)
            global_dir = Path(env_dir) if env_dir else Path.home() / self.CLAUDE_DIR
        if project_root is None:
            project_root = Path.cwd()
        if assets_dir is None:
            assets_dir = Path(__file__).parent / 'assets'

        self.global_dir = Path(global_dir)
        self.project_root = Path(project_root)
        self.project_dir = self.project_root / self.CLAUDE_DIR
        self.assets_dir = Path(assets_dir)

        self.cache_dir = self.global_dir / self.CACHE_DIR
        self.update_cache_path = self.cache_dir / self.UPDATE_CACHE_FILE
        self.trigger_path = self.cache_dir / self.TRIGGER_FILE

    def get_scope_dir(self, scope: str) -> Path:
        """Get the configuration directory for an install scope."""
        if scope == self.GLOBAL_SCOPE:
            return self.global_dir
        if scope == self.PROJECT_SCOPE:
            return self.project_dir
        raise ValueError(f"Unknown install scope: {scope}")

    def get_settings_path(self, scope: str) -> Path:
        """Get the host settings document for an install scope."""
        return self.get_scope_dir(scope) / self.SETTINGS_FILE

    def get_hook_path(self, scope: str, hook_file: str) -> Path:
        """Get the installed location of a bundled hook script."""
        return self.get_scope_dir(scope) / self.HOOKS_DIR / hook_file

    def get_context_path(self, cwd: Optional[Union[str, Path]] = None) -> Path:
        """Get the context usage record for a working directory."""
        base = Path(cwd) if cwd else self.project_root
        return base / self.CONTEXT_DIR / self.CONTEXT_FILE

    def get_hook_command(self, scope: str, hook_file: str) -> str:
        """Build the shell command the host tool runs for an installed hook."""
        return f'"{sys.executable}" "{self.get_hook_path(scope, hook_file)}"'

    def get_registry_command(self) -> List[str]:
        """Get the command that prints the latest published version."""
        override = os.environ.get(self.REGISTRY_COMMAND_ENV)
        if override and shlex.split(override):
            return shlex.split(override)
        return [sys.executable, '-m', 'pip', 'index', 'versions', self.PACKAGE_NAME]

    def get_asset_sources(self, scope: str) -> Dict[str, Path]:
        """Get bundled asset directories to copy for a scope, keyed by destination."""
        sources = {
            dest: self.assets_dir / src
            for src, dest in self.ASSET_DIRS.values()
        }
        if scope == self.GLOBAL_SCOPE:
            sources[self.HOOKS_DIR] = self.assets_dir / self.HOOKS_DIR
        return sources
