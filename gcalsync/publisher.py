"""Atomic Publisher - write-temp-then-rename for rendered artifacts."""

import logging
import os
from pathlib import Path

from gcalsync.errors import PublishFailure

logger = logging.getLogger(__name__)

PART_SUFFIX = ".part"


def publish(content: str, path: str | Path) -> Path:
    """Atomically replace the file at path with content.

    The text is written to ``path + ".part"`` first and then renamed over
    ``path``, so readers never see a half-written artifact. If writing
    fails the existing file is left as it was.

    Args:
        content: Rendered artifact text.
        path: Final destination of the artifact.

    Returns:
        The destination path.

    Raises:
        PublishFailure: If the temporary file cannot be written or renamed.
    """
    target = Path(path)
    part = Path(f"{target}{PART_SUFFIX}")

    try:
        with open(part, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
        os.replace(part, target)
    except OSError as e:
        raise PublishFailure(f"Unable to publish {target}: {e}") from e

    logger.info("Published %s", target)
    return target
