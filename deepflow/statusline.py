"""
deepflow statusline for Claude Code.

Reads the session JSON the host tool writes to stdin and prints one line:
update badge | model | project | context meter. Nothing here may fail
visibly; a broken render prints an empty line.
"""

import json
import math
import os
import sys
from pathlib import Path
from typing import Callable, Dict, Optional, TextIO

from deepflow.config import DeepflowConfig
from deepflow.formatting import Colors
from deepflow.store import FileStore, Store
from deepflow.update_check import spawn_background_check
from deepflow.utils import now_ms
from deepflow.versioning import TriggerThrottle, VersionCache, VersionRecord

SEPARATOR = f" {Colors.DIM}│{Colors.NC} "
UPDATE_BADGE = Colors.colorize('⬆ /df:update', Colors.YELLOW)

METER_SEGMENTS = 10
METER_FILLED = '█'
METER_EMPTY = '░'

# (upper bound exclusive, color); anything at or above the last bound is critical
CONTEXT_BANDS = (
    (50, Colors.GREEN),
    (70, Colors.YELLOW),
    (90, Colors.ORANGE),
)
CONTEXT_CRITICAL = Colors.BLINK + Colors.RED


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _number(value) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value):
        return None
    return float(value)


def context_percentage(context_window: Dict) -> int:
    """Compute context usage as an integer percentage in [0, 100].

    Uses ``used_percentage`` when the host provides it, otherwise the sum of
    input, cache creation and cache read tokens over the window size.
    """
    if not isinstance(context_window, dict):
        return 0

    percentage = _number(context_window.get('used_percentage'))
    if percentage is None:
        usage = context_window.get('current_usage') or {}
        if not isinstance(usage, dict):
            usage = {}
        used = sum(
            _number(usage.get(key)) or 0
            for key in ('input_tokens', 'cache_creation_input_tokens', 'cache_read_input_tokens')
        )
        size = _number(context_window.get('context_window_size')) or 0
        percentage = used / size * 100 if size > 0 else 0

    return _round_half_up(min(100.0, max(0.0, percentage)))


def context_color(percentage: int) -> str:
    """Get the meter color for a usage percentage."""
    for bound, color in CONTEXT_BANDS:
        if percentage < bound:
            return color
    return CONTEXT_CRITICAL


def build_context_meter(percentage: int) -> str:
    """Render the 10-segment context meter followed by the percentage."""
    filled = min(METER_SEGMENTS, max(0, _round_half_up(percentage / 10)))
    bar = METER_FILLED * filled + METER_EMPTY * (METER_SEGMENTS - filled)
    return f"{context_color(percentage)}{bar}{Colors.NC} {percentage}%"


def _text(value) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def format_model(model) -> str:
    """Get the display name of the session model."""
    if isinstance(model, dict):
        return _text(model.get('display_name')) or _text(model.get('id')) or 'unknown'
    return _text(model) or 'unknown'


def session_directory(data: Dict) -> str:
    """Get the working directory of the session."""
    workspace = data.get('workspace')
    if isinstance(workspace, dict) and _text(workspace.get('current_dir')):
        return workspace['current_dir']
    return _text(data.get('cwd')) or os.getcwd()


def project_name(directory: str) -> str:
    """Get the project name shown for a working directory."""
    trimmed = directory.rstrip('/\\')
    return os.path.basename(trimmed) or directory


class StatusLineRenderer:
    """Builds the statusline from session data and the update cache."""

    def __init__(self, version_cache: VersionCache, throttle: TriggerThrottle,
                 context_store_for: Callable[[str], Store],
                 spawn: Callable[[], bool] = spawn_background_check):
        self.version_cache = version_cache
        self.throttle = throttle
        self.context_store_for = context_store_for
        self.spawn = spawn

    def check_for_update(self) -> Optional[VersionRecord]:
        """Launch a throttled background check, then return the cached record."""
        try:
            if self.throttle.should_trigger():
                self.throttle.mark()
                self.spawn()
        except Exception:
            pass
        return self.version_cache.read()

    def record_context_usage(self, directory: str, percentage: int):
        """Persist the context percentage for other commands to read."""
        try:
            store = self.context_store_for(directory)
            store.write(json.dumps({'percentage': percentage, 'timestamp': now_ms()}))
        except Exception:
            pass

    def render(self, data: Dict) -> str:
        """Build the statusline for one session snapshot."""
        parts = []

        update_info = self.check_for_update()
        if update_info and update_info.update_available:
            parts.append(UPDATE_BADGE)

        parts.append(format_model(data.get('model')))

        directory = session_directory(data)
        parts.append(Colors.colorize(project_name(directory), Colors.CYAN))

        percentage = context_percentage(data.get('context_window') or {})
        self.record_context_usage(directory, percentage)
        parts.append(build_context_meter(percentage))

        return SEPARATOR.join(parts)


def create_renderer(config: Optional[DeepflowConfig] = None) -> StatusLineRenderer:
    """Create a renderer wired to the on-disk cache files."""
    config = config or DeepflowConfig()
    return StatusLineRenderer(
        VersionCache(FileStore(config.update_cache_path)),
        TriggerThrottle(FileStore(config.trigger_path), config.TRIGGER_THROTTLE_SECONDS),
        lambda directory: FileStore(config.get_context_path(Path(directory)))
    )


def write_line(stdout: TextIO, line: str):
    """Write one line as UTF-8 whatever encoding the stream was opened with.

    The meter and separator glyphs are not representable in legacy code pages
    such as cp1252, which Windows uses for piped stdout.
    """
    buffer = getattr(stdout, 'buffer', None)
    if buffer is None:
        stdout.write(line + '\n')
        stdout.flush()
        return
    stdout.flush()
    buffer.write((line + '\n').encode('utf-8'))
    buffer.flush()


def main(stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None,
         renderer: Optional[StatusLineRenderer] = None) -> int:
    """Entry point invoked by the host tool for every statusline refresh."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    try:
        # json.loads detects UTF-8 on bytes
        data = json.loads(stdin.buffer.read() if hasattr(stdin, 'buffer') else stdin.read())
        if not isinstance(data, dict):
            raise ValueError("Statusline input must be a JSON object")
        line = (renderer or create_renderer()).render(data)
    except Exception:
        if os.getenv('DEBUG'):
            import traceback
            traceback.print_exc()
        line = ''

    try:
        write_line(stdout, line)
    except (OSError, ValueError):
        # UnicodeEncodeError included; still end the refresh with a newline
        try:
            stdout.write('\n')
            stdout.flush()
        except (OSError, ValueError):
            pass
    return 0


if __name__ == '__main__':
    sys.exit(main())
