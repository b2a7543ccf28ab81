"""
Levelled console output shared by the command-line tools.
"""
import sys


class Console:
    """Simple console output handler with configurable log level.

    Levels: none < error < info < debug
    Default: 'none' (no output). Notifications are always shown.
    """

    LEVELS = {
        "none": 0,
        "error": 1,
        "info": 2,
        "debug": 3,
    }

    def __init__(self, level: str = "none", dry_run: bool = False, tag: str = "codefresh"):
        self.level_name = level
        self.level = self.LEVELS.get(level, 0)
        self.dry_run = dry_run
        self.tag = tag

    def info(self, message: str) -> None:
        if self.level >= self.LEVELS["info"]:
            print(f"[INFO] {message}")

    def error(self, message: str) -> None:
        if self.level >= self.LEVELS["error"]:
            print(f"[ERROR] {message}", file=sys.stderr)

    def dry(self, message: str) -> None:
        if self.dry_run:
            print(f"[DRY] {message}")

    def debug(self, message: str) -> None:
        if self.level >= self.LEVELS["debug"]:
            print(f"[DEBUG] {message}")

    def notify(self, message: str, level: str = "INFO") -> None:
        """User-facing message, printed whatever the log level."""
        stream = sys.stderr if level == "ERROR" else sys.stdout
        print(f"[{self.tag}] {message}", file=stream)
