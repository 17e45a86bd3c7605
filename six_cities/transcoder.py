"""
Streaming TSV -> JSON conversion.

Input arrives in arbitrary chunks; only complete lines are converted and the
unterminated tail is carried over to the next chunk, so the output does not
depend on where the chunk boundaries fall.
"""

from __future__ import annotations

import codecs
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO, Union

from .errors import OfferImportError
from .models import OFFER_COLUMNS, Offer

logger = logging.getLogger(__name__)


class TsvToJsonTranscoder:
    """Converts TSV offer rows into newline-delimited JSON objects.

    One instance per stream: feed chunks with ``on_chunk`` and call ``on_end``
    once after the last chunk. Both return the JSON lines ready for output.
    """

    def __init__(self, typed: bool = False) -> None:
        self.columns = OFFER_COLUMNS
        self.typed = typed
        self.remainder = ""
        self.emitted = 0
        self.skipped = 0
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def on_chunk(self, chunk: Union[bytes, str]) -> List[str]:
        text = self._decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
        lines = (self.remainder + text).split("\n")
        self.remainder = lines.pop()

        output: List[str] = []
        for line in lines:
            converted = self._convert_line(line)
            if converted is not None:
                output.append(converted)
        return output

    def on_end(self) -> List[str]:
        self.remainder += self._decoder.decode(b"", final=True)
        remainder, self.remainder = self.remainder, ""
        converted = self._convert_line(remainder)
        return [converted] if converted is not None else []

    def _convert_line(self, line: str) -> Optional[str]:
        line = line.rstrip("\r")
        if not line.strip():
            return None

        values = line.split("\t")
        if len(values) != len(self.columns):
            logger.warning(f"Skipping invalid line ({len(values)} columns, expected {len(self.columns)}): {line}")
            self.skipped += 1
            return None

        record = dict(zip(self.columns, values))
        if self.typed:
            try:
                payload = Offer.from_record(record).model_dump_json(by_alias=True)
            except ValueError as e:
                logger.warning(f"Skipping unparsable line: {line} ({e})")
                self.skipped += 1
                return None
        else:
            payload = json.dumps(record, ensure_ascii=False, separators=(",", ":"))

        self.emitted += 1
        return f"{payload}\n"


def transcode_file(
    filepath: Union[str, Path],
    sink: Optional[TextIO] = None,
    chunk_size: int = 64 * 1024,
    typed: bool = False,
) -> TsvToJsonTranscoder:
    """Stream ``filepath`` through a transcoder into ``sink`` (stdout by default)."""
    sink = sys.stdout if sink is None else sink
    path = Path(filepath)
    transcoder = TsvToJsonTranscoder(typed=typed)

    try:
        f = path.open("rb")
    except OSError as e:
        raise OfferImportError(f"Cannot read {path}: {e}") from e

    with f:
        while True:
            try:
                chunk = f.read(chunk_size)
            except OSError as e:
                raise OfferImportError(f"Cannot read {path}: {e}") from e
            if not chunk:
                break
            # Sink errors (e.g. a closed stdout pipe) propagate unwrapped
            sink.writelines(transcoder.on_chunk(chunk))

    sink.writelines(transcoder.on_end())
    sink.flush()
    logger.info(f"Imported {transcoder.emitted} offers from {path}, skipped {transcoder.skipped} lines")
    return transcoder
