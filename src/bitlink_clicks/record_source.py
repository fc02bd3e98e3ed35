"""Streaming record sources for CSV and JSON files.

A RecordSource turns a file into an async iterable of field mappings. The
encoding is chosen from the file extension; both readers feed the same
validation layer, which enforces the required fields:

- The first record must carry every required field name, otherwise the whole
  file is rejected with MissingFieldsError.
- Any record with a required field absent or empty is skipped with a warning.
- Malformed encoding aborts the whole file with RecordSyntaxError.
"""

from __future__ import annotations

import asyncio
import csv
import json
import logging
import os
from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import aclosing
from pathlib import Path
from typing import Any, Optional, TextIO

from .errors import (
    InputFileNotFoundError,
    MissingFieldsError,
    RecordReadError,
    RecordSyntaxError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)

CSV_BATCH_ROWS = 1000
JSON_CHUNK_CHARS = 64 * 1024

_JSON_WHITESPACE = " \t\r\n"
# Longest partial token (e.g. a "\uXXXX" escape) that can fail to decode only
# because the buffer ends.
_JSON_TRUNCATION_WINDOW = 12

Record = dict[str, str]
Reader = Callable[[TextIO, str], AsyncIterator[Record]]


def _take_rows(reader: Any, limit: int) -> list[tuple[int, list[str]]]:
    """Pull up to `limit` rows from a csv reader, tagged with their line numbers."""
    rows: list[tuple[int, list[str]]] = []
    for row in reader:
        rows.append((reader.line_num, row))
        if len(rows) >= limit:
            break
    return rows


async def _read_csv(handle: TextIO, path: str) -> AsyncIterator[Record]:
    reader = csv.reader(handle, strict=True)
    header: Optional[list[str]] = None

    while True:
        try:
            rows = await asyncio.to_thread(_take_rows, reader, CSV_BATCH_ROWS)
        except csv.Error as e:
            raise RecordSyntaxError("CSV", path, f"line {reader.line_num}: {e}") from e
        if not rows:
            return
        logger.debug(f"Read {len(rows)} CSV rows from {path}")

        for line_num, row in rows:
            if not row:
                continue
            if header is None:
                header = [name.strip() for name in row]
                continue
            if len(row) != len(header):
                raise RecordSyntaxError(
                    "CSV",
                    path,
                    f"line {line_num}: expected {len(header)} fields, got {len(row)}",
                )
            yield {name: value.strip() for name, value in zip(header, row)}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return json.dumps(value)


class _JsonArrayStream:
    """Incremental decoder for a top-level JSON array of objects."""

    def __init__(self, handle: TextIO, path: str) -> None:
        self._handle = handle
        self._path = path
        self._decoder = json.JSONDecoder()
        self._buffer = ""
        self._pos = 0
        self._offset = 0  # characters already discarded from the buffer
        self._eof = False

    def _error(self, message: str, pos: Optional[int] = None) -> RecordSyntaxError:
        where = self._offset + (self._pos if pos is None else pos)
        return RecordSyntaxError("JSON", self._path, f"{message} (char {where})")

    async def _fill(self) -> bool:
        if self._eof:
            return False
        chunk = await asyncio.to_thread(self._handle.read, JSON_CHUNK_CHARS)
        if not chunk:
            self._eof = True
            return False
        self._offset += self._pos
        self._buffer = self._buffer[self._pos:] + chunk
        self._pos = 0
        return True

    async def _peek(self) -> str:
        """Skip whitespace and return the next character, or "" at end of input."""
        while True:
            while self._pos < len(self._buffer) and self._buffer[self._pos] in _JSON_WHITESPACE:
                self._pos += 1
            if self._pos < len(self._buffer):
                return self._buffer[self._pos]
            if not await self._fill():
                return ""

    def _maybe_truncated(self, e: json.JSONDecodeError) -> bool:
        """Whether the error could come from the object running past the buffer."""
        if e.msg.startswith("Unterminated string"):
            return True
        return e.pos >= len(self._buffer) - _JSON_TRUNCATION_WINDOW

    async def _decode_object(self) -> dict:
        while True:
            try:
                value, end = self._decoder.raw_decode(self._buffer, self._pos)
            except json.JSONDecodeError as e:
                if self._maybe_truncated(e) and await self._fill():
                    continue
                raise self._error(e.msg, e.pos) from e
            self._pos = end
            return value

    async def objects(self) -> AsyncIterator[dict]:
        token = await self._peek()
        if token == "":
            return
        if token != "[":
            raise self._error("expected a top-level array")
        self._pos += 1

        index = 0
        if await self._peek() == "]":
            self._pos += 1
        else:
            while True:
                token = await self._peek()
                if token == "":
                    raise self._error("unterminated array")
                if token != "{":
                    raise self._error(f"expected an object at element {index}")
                yield await self._decode_object()
                index += 1

                token = await self._peek()
                if token == ",":
                    self._pos += 1
                elif token == "]":
                    self._pos += 1
                    break
                elif token == "":
                    raise self._error("unterminated array")
                else:
                    raise self._error(f"expected ',' or ']' after element {index - 1}")

        if await self._peek() != "":
            raise self._error("unexpected content after the top-level array")


async def _read_json(handle: TextIO, path: str) -> AsyncIterator[Record]:
    async with aclosing(_JsonArrayStream(handle, path).objects()) as objects:
        async for obj in objects:
            yield {str(key): _as_text(value) for key, value in obj.items()}


_READERS: dict[str, tuple[str, Reader]] = {
    ".csv": ("CSV", _read_csv),
    ".json": ("JSON", _read_json),
}
SUPPORTED_EXTENSIONS = tuple(_READERS)


class RecordSource:
    """Validated, lazily-read records from a CSV or JSON file.

    Construction checks the extension and that the file is readable. Every
    `async for` over the source opens the file again and reads it from the
    start; the handle is closed however iteration ends.
    """

    def __init__(
        self,
        path: str | os.PathLike,
        required_fields: Sequence[str],
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.path = os.fspath(path)
        self.required_fields = tuple(required_fields)
        self.log = log or logger
        self.records_read = 0
        self.records_skipped = 0

        extension = Path(self.path).suffix.lower()
        if extension not in _READERS:
            raise UnsupportedFormatError(self.path, extension, SUPPORTED_EXTENSIONS)
        self.kind, self._reader = _READERS[extension]

        if not os.path.isfile(self.path):
            raise InputFileNotFoundError(self.path)
        if not os.access(self.path, os.R_OK):
            raise InputFileNotFoundError(self.path, "permission denied")

    def __aiter__(self) -> AsyncIterator[Record]:
        return self._records()

    def _open(self) -> TextIO:
        try:
            return open(self.path, encoding="utf-8-sig", newline="")
        except FileNotFoundError as e:
            raise InputFileNotFoundError(self.path) from e
        except OSError as e:
            raise InputFileNotFoundError(self.path, e.strerror or str(e)) from e

    async def _records(self) -> AsyncIterator[Record]:
        self.records_read = 0
        self.records_skipped = 0
        self.log.debug(f"Reading {self.kind} records from {self.path}")

        with self._open() as handle:
            try:
                async with aclosing(self._reader(handle, self.path)) as rows:
                    async for record in rows:
                        index = self.records_read
                        self.records_read += 1

                        if index == 0:
                            missing = [f for f in self.required_fields if f not in record]
                            if missing:
                                raise MissingFieldsError(self.path, missing, list(record))

                        empty = [f for f in self.required_fields if not record.get(f)]
                        if empty:
                            self.records_skipped += 1
                            self.log.warning(
                                f"Skipping record {index} in {self.path}: "
                                f"missing required fields {empty}"
                            )
                            continue

                        yield record
            except UnicodeDecodeError as e:
                raise RecordSyntaxError(self.kind, self.path, str(e)) from e
            except OSError as e:
                raise RecordReadError(self.path, e) from e

        self.log.debug(
            f"Finished {self.path}: {self.records_read} records read, "
            f"{self.records_skipped} skipped"
        )
