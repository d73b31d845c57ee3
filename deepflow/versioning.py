"""
Version comparison and the update cache protocol.

The installer seeds the version cache with the installed version, the
background update checker overwrites it with each successful registry query,
and the statusline only ever reads it. The trigger throttle bounds how often
the statusline may launch a background check.
"""

import json
import math
from typing import Dict, List, Optional

from deepflow.store import Store
from deepflow.utils import now_ms


def parse_version(version: str) -> List[float]:
    """Split a dotted version into exactly three numeric components.

    Missing components are 0. Components that are not integers become NaN,
    which compares neither greater nor smaller than anything.
    """
    parts = version.strip().split('.')[:3]
    components = []
    for part in parts:
        part = part.strip()
        if not part:
            components.append(0)
            continue
        try:
            components.append(int(part))
        except ValueError:
            components.append(math.nan)
    while len(components) < 3:
        components.append(0)
    return components


def is_newer_version(latest: str, current: str) -> bool:
    """Check whether ``latest`` is strictly newer than ``current``.

    The first component that differs decides. A NaN component never decides,
    so e.g. ``is_newer_version('1.x.0', '1.2.0')`` is False and the comparison
    moves on to the next component.
    """
    for latest_part, current_part in zip(parse_version(latest), parse_version(current)):
        if latest_part > current_part:
            return True
        if latest_part < current_part:
            return False
    return False


class VersionRecord:
    """Result of the most recent update check."""

    def __init__(self, current_version: str, latest_version: str,
                 update_available: bool = False, timestamp: Optional[int] = None):
        self.current_version = current_version
        self.latest_version = latest_version
        self.update_available = update_available
        self.timestamp = timestamp if timestamp is not None else now_ms()

    def __repr__(self) -> str:
        return (f"VersionRecord(current={self.current_version!r}, latest={self.latest_version!r}, "
                f"update_available={self.update_available})")

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'updateAvailable': self.update_available,
            'currentVersion': self.current_version,
            'latestVersion': self.latest_version,
            'timestamp': self.timestamp
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'VersionRecord':
        """Create VersionRecord from dictionary.

        Raises:
            ValueError: If the record is missing its current version
        """
        if not isinstance(data, dict):
            raise ValueError("Version record must be a JSON object")
        current = data.get('currentVersion')
        if not current or not isinstance(current, str):
            raise ValueError("Version record has no currentVersion")
        latest = data.get('latestVersion')
        return cls(
            current_version=current,
            latest_version=latest if isinstance(latest, str) and latest else current,
            update_available=bool(data.get('updateAvailable', False)),
            timestamp=data.get('timestamp')
        )


class VersionCache:
    """Reads and writes the version cache record through a store."""

    def __init__(self, store: Store):
        self.store = store

    def initialize(self, version: str) -> VersionRecord:
        """Record a fresh install: current and latest are both ``version``."""
        record = VersionRecord(current_version=version, latest_version=version)
        self._write(record)
        return record

    def read(self) -> Optional[VersionRecord]:
        """Return the cached record, or None if absent or unreadable."""
        try:
            content = self.store.read()
            if content is None:
                return None
            return VersionRecord.from_dict(json.loads(content))
        except (OSError, ValueError):
            return None

    def record_check_result(self, current: str, latest: str) -> VersionRecord:
        """Store the outcome of a registry query."""
        record = VersionRecord(
            current_version=current,
            latest_version=latest,
            update_available=is_newer_version(latest, current)
        )
        self._write(record)
        return record

    def clear(self) -> bool:
        """Delete the cached record, tolerating absence."""
        return self.store.clear()

    def _write(self, record: VersionRecord):
        self.store.write(json.dumps(record.to_dict(), indent=2))


class TriggerThrottle:
    """Limits how often a background update check may be launched."""

    def __init__(self, store: Store, window_seconds: int = 60):
        self.store = store
        self.window_ms = window_seconds * 1000

    def last_triggered(self) -> Optional[int]:
        """Return the last launch time in ms, or None if never launched."""
        try:
            content = self.store.read()
            if content is None:
                return None
            return int(content.strip())
        except (OSError, ValueError):
            return None

    def should_trigger(self, now: Optional[int] = None) -> bool:
        """Check whether the throttle window has elapsed."""
        last = self.last_triggered()
        if last is None:
            return True
        now = now if now is not None else now_ms()
        return now - last > self.window_ms

    def mark(self, now: Optional[int] = None):
        """Record a launch at ``now``."""
        self.store.write(str(now if now is not None else now_ms()))

    def clear(self) -> bool:
        """Delete the trigger record, tolerating absence."""
        return self.store.clear()
