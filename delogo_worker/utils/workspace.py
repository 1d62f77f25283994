"""Request-scoped temporary directories."""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from delogo_worker.core.config import settings

logger = logging.getLogger(__name__)


@contextmanager
def request_workspace(prefix: str = "delogo-") -> Iterator[Path]:
    """Yield a fresh directory that is removed on every exit path."""

    root = settings.TEMP_DIR
    if root is not None:
        root.mkdir(parents=True, exist_ok=True)

    with tempfile.TemporaryDirectory(prefix=prefix, dir=root) as tmpdir:
        workdir = Path(tmpdir)
        logger.debug("Created workspace %s", workdir)
        try:
            yield workdir
        finally:
            logger.debug("Purging workspace %s", workdir)
