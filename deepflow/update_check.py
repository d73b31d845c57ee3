"""
Background update checker for deepflow.

Run without arguments (as the SessionStart hook does) it relaunches itself
with ``--background`` in a detached session and exits at once. The detached
worker asks the package registry for the latest version and records the
result in the version cache. Every failure is silent.
"""

import os
import re
import subprocess
import sys
from typing import List, Optional

from deepflow.config import DeepflowConfig
from deepflow.store import FileStore
from deepflow.versioning import VersionCache, VersionRecord

BACKGROUND_FLAG = '--background'

_VERSION_PATTERN = re.compile(r'\d+(?:\.[0-9A-Za-z]+)*')


def _debug_enabled() -> bool:
    return bool(os.getenv('DEBUG'))


def spawn_background_check() -> bool:
    """Launch the update check worker detached from the current process.

    Returns:
        True if the worker process was started
    """
    command = [sys.executable, '-m', 'deepflow.update_check', BACKGROUND_FLAG]
    kwargs = {
        'stdin': subprocess.DEVNULL,
        'stdout': subprocess.DEVNULL,
        'stderr': subprocess.DEVNULL,
        'close_fds': True,
    }
    if sys.platform == 'win32':
        kwargs['creationflags'] = (subprocess.DETACHED_PROCESS |
                                   subprocess.CREATE_NEW_PROCESS_GROUP)
    else:
        kwargs['start_new_session'] = True

    try:
        subprocess.Popen(command, **kwargs)
        return True
    except OSError:
        return False


def extract_version(output: str) -> Optional[str]:
    """Pick the version out of registry output.

    Accepts a bare version (``1.2.3``) or pip's ``deepflow (1.2.3)`` header.
    """
    for line in output.strip().splitlines():
        line = line.strip()
        if not line:
            continue
        if '(' in line and ')' in line:
            line = line[line.index('(') + 1:line.index(')')]
        match = _VERSION_PATTERN.search(line)
        if match:
            return match.group(0)
        return None
    return None


class UpdateChecker:
    """Queries the registry and records whether an update is available."""

    def __init__(self, version_cache: VersionCache, registry_command: List[str],
                 timeout: int = DeepflowConfig.REGISTRY_TIMEOUT_SECONDS):
        self.version_cache = version_cache
        self.registry_command = registry_command
        self.timeout = timeout

    def get_current_version(self) -> Optional[str]:
        """Get the installed version as recorded by the installer."""
        record = self.version_cache.read()
        return record.current_version if record else None

    def fetch_latest_version(self) -> Optional[str]:
        """Ask the registry for the latest published version, or None."""
        try:
            result = subprocess.run(
                self.registry_command,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except (subprocess.TimeoutExpired, OSError):
            return None

        if result.returncode != 0 or not result.stdout.strip():
            return None
        return extract_version(result.stdout)

    def run(self) -> Optional[VersionRecord]:
        """Perform one check. Returns the written record, or None if skipped."""
        try:
            current = self.get_current_version()
            if not current:
                return None

            latest = self.fetch_latest_version()
            if not latest:
                return None

            return self.version_cache.record_check_result(current, latest)
        except Exception:
            if _debug_enabled():
                import traceback
                traceback.print_exc()
            return None


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the SessionStart hook."""
    argv = sys.argv[1:] if argv is None else argv

    if BACKGROUND_FLAG not in argv:
        spawn_background_check()
        return 0

    config = DeepflowConfig()
    checker = UpdateChecker(
        VersionCache(FileStore(config.update_cache_path)),
        config.get_registry_command()
    )
    checker.run()
    return 0


if __name__ == '__main__':
    sys.exit(main())
