"""
Persistent stores for deepflow runtime records.

Each store holds exactly one text document. Writes replace the whole document
atomically so readers see either the previous or the new content.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union


class Store:
    """Read/write/clear access to a single persisted document."""

    def read(self) -> Optional[str]:
        """Return the stored text, or None if nothing is stored."""
        raise NotImplementedError

    def write(self, content: str):
        """Replace the stored text."""
        raise NotImplementedError

    def clear(self) -> bool:
        """Delete the stored text. Returns False if nothing was stored."""
        raise NotImplementedError


class FileStore(Store):
    """Store backed by a file, written via temp file and rename."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"FileStore({str(self.path)!r})"

    def read(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return None

    def write(self, content: str):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(content)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def clear(self) -> bool:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        return True
