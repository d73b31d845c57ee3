"""
Output formatting utilities for deepflow.

Provides color codes for installer output and the statusline palette.
"""


class Colors:
    """ANSI color codes for terminal output."""
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'
    ORANGE = '\033[38;5;208m'
    DIM = '\033[2m'
    BLINK = '\033[5m'
    NC = '\033[0m'  # No Color

    @staticmethod
    def colorize(text: str, color: str) -> str:
        """Wrap text in color codes."""
        return f"{color}{text}{Colors.NC}"


def colored_status(status_type: str, message: str = "") -> str:
    """Return a colored status message.

    Args:
        status_type: Type of status (SUCCESS, ERROR, WARNING, INFO)
        message: Optional message to append after the status

    Returns:
        Colored status string
    """
    color_map = {
        'SUCCESS': Colors.GREEN,
        'ERROR': Colors.RED,
        'WARNING': Colors.YELLOW,
        'INFO': Colors.CYAN,
    }

    color = color_map.get(status_type, Colors.NC)
    status_text = Colors.colorize(f"[{status_type}]", color)

    if message:
        return f"{status_text} {message}"
    return status_text


def log_success(message: str):
    """Print an indented progress line with a green check mark."""
    print(f"  {Colors.colorize('✓', Colors.GREEN)} {message}")


def log_warning(message: str):
    """Print an indented progress line with a yellow bang."""
    print(f"  {Colors.colorize('!', Colors.YELLOW)} {message}")


def heading(text: str) -> str:
    """Format a section heading for installer output."""
    return Colors.colorize(text, Colors.CYAN)


def dim(text: str) -> str:
    """Format secondary text."""
    return Colors.colorize(text, Colors.DIM)
