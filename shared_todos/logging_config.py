import logging
import sys


def setup_logging(level: str = "INFO", error_log_path: str | None = "error.log") -> None:
    """
    Configure logging with:
    - Console handler for everything at `level` and above
    - File handler that only keeps errors (unhandled exceptions end up there)

    Safe to call more than once; handlers are only installed the first time.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    if getattr(root, "_shared_todos_configured", False):
        return

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    if error_log_path:
        errors = logging.FileHandler(error_log_path, encoding="utf-8", delay=True)
        errors.setLevel(logging.ERROR)
        errors.setFormatter(formatter)
        root.addHandler(errors)

    root._shared_todos_configured = True
