from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Union

from .errors import OfferWriteError

logger = logging.getLogger(__name__)


def write_rows(lines: Iterable[str], filepath: Union[str, Path]) -> int:
    """Drain ``lines`` into ``filepath`` in order and return the row count.

    Writes are blocking, so the next line is only pulled from ``lines`` once
    the file has accepted the previous one.
    """
    path = Path(filepath)
    written = 0
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as f:
            for line in lines:
                f.write(line)
                written += 1
    except OSError as e:
        raise OfferWriteError(f"Cannot write offers to {path}: {e}") from e

    logger.debug(f"Wrote {written} rows to {path}")
    return written
