"""
deepflow utility functions.

This module contains helpers for file operations on installed assets,
frontmatter parsing of bundled markdown and timestamps.
"""

import shutil
import time
from pathlib import Path
from typing import Dict, List

import yaml

from deepflow.exceptions import FileOperationError


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def parse_frontmatter(content: str) -> tuple[dict, str]:
    """Parse YAML frontmatter from markdown content.

    Args:
        content: Markdown content that may contain frontmatter

    Returns:
        Tuple of (frontmatter_dict, body_content)
    """
    lines = content.split('\n')

    # Check if file starts with frontmatter delimiter
    if not lines or lines[0].strip() != '---':
        return {}, content

    frontmatter_lines = []
    body_start_idx = 0

    for i in range(1, len(lines)):
        if lines[i].strip() == '---':
            body_start_idx = i + 1
            break
        frontmatter_lines.append(lines[i])
    else:
        # No closing delimiter found
        return {}, content

    try:
        frontmatter = yaml.safe_load('\n'.join(frontmatter_lines)) or {}
    except yaml.YAMLError:
        frontmatter = {}
    if not isinstance(frontmatter, dict):
        frontmatter = {}

    body_lines = lines[body_start_idx:]
    while body_lines and not body_lines[0].strip():
        body_lines.pop(0)

    return frontmatter, '\n'.join(body_lines)


def copy_tree(source: Path, destination: Path) -> List[Path]:
    """Recursively copy a directory, overwriting files of the same name.

    A missing source is not an error; nothing is copied.

    Returns:
        List of destination files written
    """
    if not source.is_dir():
        return []

    copied = []
    try:
        destination.mkdir(parents=True, exist_ok=True)
        for entry in sorted(source.iterdir()):
            if entry.name == '__pycache__':
                continue
            target = destination / entry.name
            if entry.is_dir():
                copied.extend(copy_tree(entry, target))
            else:
                shutil.copy2(entry, target)
                copied.append(target)
    except (OSError, shutil.Error) as e:
        raise FileOperationError(f"Failed to copy {source} to {destination}: {e}") from e
    return copied


def remove_path(path: Path) -> bool:
    """Remove a file or directory tree. Returns False if it did not exist."""
    if not path.exists() and not path.is_symlink():
        return False
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as e:
        raise FileOperationError(f"Failed to remove {path}: {e}") from e
    return True


def describe_assets(assets_dir: Path) -> Dict[str, List[str]]:
    """Collect display names of the bundled commands, skills and agents.

    Names come from each file's frontmatter ``name`` and fall back to the
    file or directory name.
    """
    summary = {'commands': [], 'skills': [], 'agents': []}

    commands_dir = assets_dir / 'commands' / 'df'
    if commands_dir.is_dir():
        for command_file in sorted(commands_dir.glob('*.md')):
            summary['commands'].append(f"/df:{command_file.stem}")

    skills_dir = assets_dir / 'skills'
    if skills_dir.is_dir():
        for skill_dir in sorted(p for p in skills_dir.iterdir() if p.is_dir()):
            skill_file = skill_dir / 'SKILL.md'
            name = skill_dir.name
            if skill_file.exists():
                frontmatter, _ = parse_frontmatter(skill_file.read_text(encoding='utf-8'))
                name = frontmatter.get('name') or name
            summary['skills'].append(str(name))

    agents_dir = assets_dir / 'agents'
    if agents_dir.is_dir():
        for agent_file in sorted(agents_dir.glob('*.md')):
            frontmatter, _ = parse_frontmatter(agent_file.read_text(encoding='utf-8'))
            summary['agents'].append(str(frontmatter.get('name') or agent_file.stem))

    return summary
