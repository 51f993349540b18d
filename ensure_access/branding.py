"""Console output helpers."""

from rich.console import Console
from rich.markup import escape

VERSION = "0.1.0"

console = Console(stderr=True)

_STYLES = {
    "info": ("cyan", "│"),
    "success": ("green", "✓"),
    "warning": ("yellow", "⚠"),
    "error": ("red", "✗"),
}


def ea_print(message: str, status: str = "info") -> None:
    """Print a status line with a coloured prefix."""
    style, icon = _STYLES.get(status, _STYLES["info"])
    console.print(f"[{style}]{icon}[/{style}] {escape(message)}")
