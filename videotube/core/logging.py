# ============================================================================
# FILE: videotube/core/logging.py
# ============================================================================
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once for the whole service"""
    root = logging.getLogger()
    root.setLevel(level.upper())

    if not any(getattr(h, "_videotube", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._videotube = True
        root.addHandler(handler)

    # SQL echo is noisy at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
