"""Helpers shared by the command-line commands: flag checks, input and output."""

from __future__ import annotations

import dataclasses
import json
import math
import sys
from collections.abc import Mapping
from decimal import Decimal
from pathlib import Path
from typing import IO, Any, Optional


class CommandError(Exception):
    """A command failed in a way that should be reported to the user."""


def get_non_negative_int(value: int, name: str) -> int:
    """Return value, or raise CommandError if it is negative."""
    if value < 0:
        raise CommandError(f"--{name} must be zero or greater")
    return value


def get_positive_int_if_given(value: Optional[int], name: str) -> Optional[int]:
    """Return None if the flag was not given, else a positive value."""
    if value is None:
        return None
    if value <= 0:
        raise CommandError(f"--{name} must be a positive integer")
    return value


def _read_stream(stream: IO[Any]) -> bytes:
    data = stream.read()
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data or b"")


def read_input(file: Optional[str] = None, stdin: Optional[IO[Any]] = None) -> bytes:
    """Read JSON input from a file if one is named, otherwise from stdin."""
    if file:
        try:
            return Path(file).read_bytes()
        except OSError as exc:
            raise CommandError(f'read file "{file}": {exc}') from exc
    stream = stdin if stdin is not None else sys.stdin
    try:
        data = _read_stream(stream)
    except OSError as exc:
        raise CommandError(f"read stdin: {exc}") from exc
    if not data:
        raise CommandError(
            "no input provided: specify --file or provide JSON on stdin"
        )
    return data


def read_json_input(data: Optional[str] = None, stdin: Optional[IO[Any]] = None) -> bytes:
    """Return the --data value if given, otherwise whatever stdin holds."""
    if data:
        return data.encode("utf-8")
    stream = stdin if stdin is not None else sys.stdin
    try:
        raw = _read_stream(stream)
    except OSError as exc:
        raise CommandError(f"read input: {exc}") from exc
    if not raw:
        raise CommandError("no input: use --data flag or pipe JSON to stdin")
    return raw


def _is_record(value: Any) -> bool:
    if value is None or isinstance(value, type):
        return False
    if callable(getattr(value, "to_dict", None)):
        return True
    return dataclasses.is_dataclass(value)


def _record_dict(value: Any) -> dict[str, Any]:
    if callable(getattr(value, "to_dict", None)):
        return dict(value.to_dict())
    return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}


def _jsonable(value: Any) -> Any:
    if _is_record(value):
        return {key: _jsonable(item) for key, item in _record_dict(value).items()}
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    number = Decimal(repr(value)).normalize()
    exponent = number.adjusted()
    if exponent < -4 or exponent >= 6:
        sign, digits, _ = number.as_tuple()
        mantissa = str(digits[0])
        if len(digits) > 1:
            mantissa += "." + "".join(map(str, digits[1:]))
        exp_sign = "+" if exponent >= 0 else "-"
        return f"{'-' if sign else ''}{mantissa}e{exp_sign}{abs(exponent):02d}"
    return format(number, "f")


def _compact_json(value: Any) -> str:
    return json.dumps(_jsonable(value), separators=(",", ":"), ensure_ascii=False)


def _format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple, Mapping)):
        return _compact_json(value) if value else ""
    if _is_record(value):
        return _compact_json(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    return str(value)


def _output_json(value: Any, out: IO[str]) -> None:
    out.write(json.dumps(_jsonable(value), indent=2, ensure_ascii=False) + "\n")


def _write_aligned(lines: list[list[str]], out: IO[str]) -> None:
    # Every column but the last is padded to its widest cell plus two spaces.
    widths = [max(map(len, column)) + 2 for column in list(zip(*lines))[:-1]]
    for line in lines:
        padded = [cell.ljust(width) for cell, width in zip(line[:-1], widths)]
        out.write("".join(padded) + line[-1] + "\n")


def _output_table(value: Any, out: IO[str]) -> None:
    if value is None:
        out.write("(nil)\n")
        return
    if isinstance(value, (list, tuple)):
        rows = list(value)
    elif _is_record(value):
        rows = [value]
    else:
        _output_json(value, out)
        return

    if not rows:
        out.write("(empty)\n")
        return

    records = [_record_dict(row) if _is_record(row) else None for row in rows]
    columns: list[str] = []
    for record in records:
        for key in record or {}:
            if key not in columns:
                columns.append(key)
    if not columns:
        _output_json(rows, out)
        return

    lines = [[column.upper() for column in columns]]
    for record in records:
        if record is None:
            lines.append([""] * len(columns))
        else:
            lines.append([_format_cell(record.get(column)) for column in columns])
    _write_aligned(lines, out)


def output_result(
    value: Any, output_format: Optional[str] = "", out: Optional[IO[str]] = None
) -> None:
    """Write value as pretty JSON (the default) or as an aligned table."""
    stream = out if out is not None else sys.stdout
    fmt = output_format or "json"
    if fmt == "json":
        _output_json(value, stream)
    elif fmt == "table":
        _output_table(value, stream)
    else:
        raise CommandError(f"unsupported output format: {fmt}")