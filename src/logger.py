"""Structured JSON logging."""

import logging
import sys

from pythonjsonlogger import jsonlogger

ROOT_LOGGER = "famgraph"


def get_logger(name: str, level: str | int | None = None) -> logging.Logger:
    """
    Return a logger under the 'famgraph' namespace that writes JSON lines to stdout.

    The handler lives on the namespace root, configured once; `level` (if given) is applied
    to the whole namespace.
    """
    root = logging.getLogger(ROOT_LOGGER)

    # Prevent duplicate handlers if the logger is already configured
    if not root.handlers:
        root.setLevel(logging.INFO)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            jsonlogger.JsonFormatter("%(asctime)s %(name)s %(levelname)s %(message)s")
        )
        root.addHandler(handler)
        root.propagate = False

    if level is not None:
        root.setLevel(level)

    if name == ROOT_LOGGER:
        return root
    return root.getChild(name)
