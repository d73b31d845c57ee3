"""
Install and uninstall orchestration for deepflow.

Copies the bundled commands, skills, agents and hook scripts into the global
or project configuration directory, seeds the version cache and, for the
global scope, registers the statusline and update check in the host settings.
"""

from pathlib import Path
from typing import Callable, List, Optional

from deepflow import __version__
from deepflow.config import DeepflowConfig
from deepflow.exceptions import AssetNotFoundError, FileOperationError
from deepflow.formatting import Colors, dim, heading, log_success, log_warning
from deepflow.settings import SettingsMerger
from deepflow.store import FileStore
from deepflow.utils import copy_tree, describe_assets, remove_path
from deepflow.versioning import TriggerThrottle, VersionCache


class Installer:
    """Interactive installer for the deepflow assets."""

    def __init__(self, config: Optional[DeepflowConfig] = None, version: Optional[str] = __version__,
                 input_func: Optional[Callable[[str], str]] = None):
        self.config = config or DeepflowConfig()
        self.version = version
        self.input_func = input_func
        self.version_cache = VersionCache(FileStore(self.config.update_cache_path))
        self.throttle = TriggerThrottle(FileStore(self.config.trigger_path),
                                        self.config.TRIGGER_THROTTLE_SECONDS)

    def ask(self, question: str) -> str:
        """Prompt the operator. End of input counts as an empty answer."""
        try:
            return (self.input_func or input)(question).strip()
        except EOFError:
            return ''

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question that defaults to no."""
        return self.ask(question).lower() in ['y', 'yes']

    def is_installed(self, scope: str) -> bool:
        """Check whether deepflow commands are present in a scope."""
        commands_dir = self.config.get_scope_dir(scope) / self.config.ASSET_DIRS['commands'][1]
        try:
            return commands_dir.is_dir() and any(commands_dir.iterdir())
        except OSError:
            return False

    def installed_scopes(self) -> List[str]:
        """List the scopes that currently have deepflow installed."""
        return [scope for scope in self.config.SCOPES if self.is_installed(scope)]

    def ask_install_scope(self, prompt: str) -> str:
        """Ask for a scope. Anything other than '2' selects global."""
        print(prompt)
        print()
        print(f"  {heading('1')}) Global  {dim(f'({self.config.global_dir} - available in all projects)')}")
        print(f"  {heading('2')}) Project {dim(f'({self.config.project_dir} - only this project)')}")
        print()

        answer = self.ask('Choose [1/2]: ')
        if answer == '2':
            return self.config.PROJECT_SCOPE
        return self.config.GLOBAL_SCOPE

    def _print_both_locations(self):
        print(f"  Global:  {self.config.global_dir}")
        print(f"  Project: {self.config.project_dir}")
        print()

    def choose_install_scope(self) -> str:
        """Pick the scope to install into based on what is already installed."""
        installed = self.installed_scopes()

        if len(installed) == 2:
            log_warning("Found installations in both locations:")
            self._print_both_locations()
            return self.ask_install_scope('Which do you want to update?')
        if installed == [self.config.GLOBAL_SCOPE]:
            print("Updating global installation...")
            return self.config.GLOBAL_SCOPE
        if installed == [self.config.PROJECT_SCOPE]:
            print("Updating project installation...")
            return self.config.PROJECT_SCOPE
        return self.ask_install_scope('Where do you want to install deepflow?')

    def install(self, scope: str) -> Path:
        """Copy assets into a scope and register runtime hooks.

        Returns:
            The scope directory installed into
        """
        if not self.config.assets_dir.is_dir():
            raise AssetNotFoundError(f"Bundled assets not found: {self.config.assets_dir}")

        scope_dir = self.config.get_scope_dir(scope)
        sources = self.config.get_asset_sources(scope)

        for destination in sources:
            try:
                (scope_dir / destination).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FileOperationError(f"Could not create directory {scope_dir / destination}: {e}") from e

        labels = {
            'commands/df': 'Commands installed',
            'skills': 'Skills installed',
            'agents': 'Agents installed',
            self.config.HOOKS_DIR: 'Hooks installed',
        }
        for destination, source in sources.items():
            if copy_tree(source, scope_dir / destination):
                log_success(labels.get(destination, f"{destination} installed"))

        if self.version:
            self.version_cache.initialize(self.version)
        else:
            self.version_cache.clear()

        if scope == self.config.GLOBAL_SCOPE:
            merger = SettingsMerger(
                self.config.get_settings_path(scope),
                self.config.get_hook_command(scope, self.config.STATUSLINE_HOOK),
                self.config.get_hook_command(scope, self.config.UPDATE_CHECK_HOOK)
            )
            merger.merge(lambda: self.confirm(
                f"  {Colors.colorize('!', Colors.YELLOW)} Existing statusLine found. "
                f"Replace with deepflow? [y/N] "))

        return scope_dir

    def print_summary(self, scope: str, scope_dir: Path):
        """Print what was installed and how to get started."""
        summary = describe_assets(self.config.assets_dir)

        print()
        print(Colors.colorize('Installation complete!', Colors.GREEN))
        print()
        print(f"Installed to {heading(str(scope_dir))}:")
        print(f"  commands/df/     - {', '.join(summary['commands']) or 'none'}")
        print(f"  skills/          - {', '.join(summary['skills']) or 'none'}")
        print(f"  agents/          - {', '.join(summary['agents']) or 'none'}")
        if scope == self.config.GLOBAL_SCOPE:
            print("  hooks/           - statusline, update checker")
        print()
        if scope == self.config.PROJECT_SCOPE:
            print(dim('Note: Statusline is only available with global install.'))
            print()
        print('Quick start:')
        step = 1
        if scope == self.config.GLOBAL_SCOPE:
            print(f"  {step}. cd your-project")
            step += 1
        print(f"  {step}. claude")
        print(f"  {step + 1}. Describe what you want to build")
        print(f"  {step + 2}. /df:spec feature-name")
        print()

    def run_install(self) -> Path:
        """Interactive install/update flow."""
        print()
        print(heading('deepflow installer'))
        print()

        scope = self.choose_install_scope()
        label = 'globally' if scope == self.config.GLOBAL_SCOPE else 'in this project'

        print()
        print(f"Installing {label}...")
        print()

        scope_dir = self.install(scope)
        self.print_summary(scope, scope_dir)
        return scope_dir

    def removal_targets(self, scope: str) -> List[str]:
        """Paths, relative to the scope directory, that deepflow owns."""
        targets = [self.config.ASSET_DIRS['commands'][1]]

        skills_dir = self.config.assets_dir / 'skills'
        if skills_dir.is_dir():
            targets.extend(f"skills/{p.name}" for p in sorted(skills_dir.iterdir()) if p.is_dir())

        agents_dir = self.config.assets_dir / 'agents'
        if agents_dir.is_dir():
            targets.extend(f"agents/{p.name}" for p in sorted(agents_dir.iterdir()) if p.is_file())

        if scope == self.config.GLOBAL_SCOPE:
            targets.extend(f"{self.config.HOOKS_DIR}/{hook}" for hook in
                           (self.config.STATUSLINE_HOOK, self.config.UPDATE_CHECK_HOOK))
        return targets

    def uninstall(self, scope: str) -> List[str]:
        """Remove deepflow from a scope without prompting.

        Returns:
            The relative paths that were removed
        """
        scope_dir = self.config.get_scope_dir(scope)
        removed = []
        for item in self.removal_targets(scope):
            if remove_path(scope_dir / item):
                log_success(f"Removed {item}")
                removed.append(item)

        self.version_cache.clear()
        self.throttle.clear()

        if scope == self.config.GLOBAL_SCOPE:
            SettingsMerger(
                self.config.get_settings_path(scope),
                self.config.get_hook_command(scope, self.config.STATUSLINE_HOOK),
                self.config.get_hook_command(scope, self.config.UPDATE_CHECK_HOOK)
            ).revert()

        return removed

    def run_uninstall(self) -> bool:
        """Interactive uninstall flow.

        Returns:
            True if an installation was removed
        """
        print()
        print(heading('deepflow uninstaller'))
        print()

        installed = self.installed_scopes()
        if not installed:
            print('No deepflow installation found.')
            return False

        if len(installed) == 2:
            print('Found installations in both locations:')
            self._print_both_locations()
            scope = self.ask_install_scope('Which do you want to remove?')
        else:
            scope = installed[0]

        scope_dir = self.config.get_scope_dir(scope)
        if not self.confirm(f"Remove {scope} installation from {scope_dir}? [y/N] "):
            print('Cancelled.')
            return False

        print()
        self.uninstall(scope)

        print()
        print(Colors.colorize('Uninstall complete.', Colors.GREEN))
        print()
        return True
