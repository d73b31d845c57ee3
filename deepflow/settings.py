"""
Host settings merge for deepflow.

The host settings document belongs to the operator. deepflow owns only the
``statusLine`` registration and its own ``hooks.SessionStart`` entries; those
are replaced wholesale and every other key is written back untouched.
"""

import json
from pathlib import Path
from typing import Callable, Dict, List

from deepflow.config import DeepflowConfig
from deepflow.formatting import log_success, log_warning

STATUS_LINE_KEY = 'statusLine'
HOOKS_KEY = 'hooks'
SESSION_START_KEY = 'SessionStart'

STATUSLINE_MARKER = DeepflowConfig.STATUSLINE_MARKER
UPDATE_CHECK_MARKER = DeepflowConfig.UPDATE_CHECK_MARKER


def load_settings(settings_path: Path) -> Dict:
    """Load the settings document, or an empty one if missing or corrupt."""
    try:
        with open(settings_path, encoding='utf-8') as f:
            settings = json.load(f)
    except (OSError, ValueError):
        return {}
    if not isinstance(settings, dict):
        return {}
    return settings


def save_settings(settings_path: Path, settings: Dict):
    """Write the whole settings document back, pretty-printed."""
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    with open(settings_path, 'w', encoding='utf-8') as f:
        json.dump(settings, f, indent=2)
        f.write('\n')


def _hook_command(entry) -> str:
    """Get the command of the first hook in a SessionStart entry."""
    if not isinstance(entry, dict):
        return ''
    hooks = entry.get('hooks')
    if not isinstance(hooks, list) or not hooks or not isinstance(hooks[0], dict):
        return ''
    command = hooks[0].get('command')
    return command if isinstance(command, str) else ''


def is_own_statusline(settings: Dict) -> bool:
    """Check whether the registered status line is ours."""
    status_line = settings.get(STATUS_LINE_KEY)
    if not isinstance(status_line, dict):
        return False
    command = status_line.get('command')
    return isinstance(command, str) and STATUSLINE_MARKER in command


def configure_statusline(settings: Dict, command: str, confirm: Callable[[], bool]) -> bool:
    """Point the status line at ``command``.

    A foreign registration is only replaced when ``confirm()`` returns True.

    Returns:
        True if the status line now points at ``command``
    """
    if settings.get(STATUS_LINE_KEY) and not is_own_statusline(settings):
        if not confirm():
            return False
    settings[STATUS_LINE_KEY] = {'type': 'command', 'command': command}
    return True


def _without_own_hooks(entries: List) -> List:
    return [entry for entry in entries if UPDATE_CHECK_MARKER not in _hook_command(entry)]


def configure_session_hook(settings: Dict, command: str) -> bool:
    """Register ``command`` as our single SessionStart hook.

    A ``hooks`` or ``SessionStart`` value of an unexpected type belongs to the
    operator and is left untouched.

    Returns:
        True if the hook was registered
    """
    if settings.get(HOOKS_KEY) is None:
        settings[HOOKS_KEY] = {}
    hooks = settings[HOOKS_KEY]
    if not isinstance(hooks, dict):
        return False
    entries = hooks.get(SESSION_START_KEY)
    if entries is None:
        entries = []
    elif not isinstance(entries, list):
        return False

    entries = _without_own_hooks(entries)
    entries.append({'hooks': [{'type': 'command', 'command': command}]})
    hooks[SESSION_START_KEY] = entries
    return True


def remove_session_hooks(settings: Dict) -> bool:
    """Drop our SessionStart entries, pruning containers left empty.

    Returns:
        True if there was a SessionStart list to clean up
    """
    hooks = settings.get(HOOKS_KEY)
    if not isinstance(hooks, dict) or not isinstance(hooks.get(SESSION_START_KEY), list):
        return False

    entries = _without_own_hooks(hooks[SESSION_START_KEY])
    if entries:
        hooks[SESSION_START_KEY] = entries
    else:
        del hooks[SESSION_START_KEY]
    if not hooks:
        del settings[HOOKS_KEY]
    return True


def remove_statusline(settings: Dict) -> bool:
    """Drop the status line registration if it is ours."""
    if not is_own_statusline(settings):
        return False
    del settings[STATUS_LINE_KEY]
    return True


class SettingsMerger:
    """Applies and reverts deepflow's registrations in a settings file."""

    def __init__(self, settings_path: Path, statusline_command: str, update_check_command: str):
        self.settings_path = Path(settings_path)
        self.statusline_command = statusline_command
        self.update_check_command = update_check_command

    def merge(self, confirm: Callable[[], bool]) -> Dict:
        """Register the status line and the update check hook.

        Args:
            confirm: Asked before replacing a foreign status line

        Returns:
            The settings document as written
        """
        settings = load_settings(self.settings_path)

        if configure_statusline(settings, self.statusline_command, confirm):
            log_success("Statusline configured")
        else:
            log_warning("Skipped statusline configuration")

        if configure_session_hook(settings, self.update_check_command):
            log_success("SessionStart hook configured")
        else:
            log_warning("Skipped SessionStart hook: unrecognized hooks setting left unchanged")

        save_settings(self.settings_path, settings)
        return settings

    def revert(self) -> bool:
        """Remove deepflow's registrations. Never raises.

        Returns:
            True if the settings file was rewritten
        """
        if not self.settings_path.exists():
            return False
        try:
            with open(self.settings_path, encoding='utf-8') as f:
                settings = json.load(f)
            if not isinstance(settings, dict):
                return False

            removed_hooks = remove_session_hooks(settings)
            removed_statusline = remove_statusline(settings)
            if not (removed_hooks or removed_statusline):
                return False

            save_settings(self.settings_path, settings)
        except (OSError, ValueError):
            return False

        if removed_hooks:
            log_success("Removed SessionStart hook")
        if removed_statusline:
            log_success("Removed statusline")
        return True
