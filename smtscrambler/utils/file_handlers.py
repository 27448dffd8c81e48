"""
Reading the benchmark and the side files the scrambler consumes.

Text is decoded as strict UTF-8; undecodable bytes raise :class:`InputError`.
The side-file readers turn I/O failures into :class:`FatalConfigError`
subclasses so the command line reports them like any other configuration
problem.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

from smtscrambler.errors import CoreFileFormatError, InputError, RankFileError

PathLike = Union[str, Path]


def decode_text(data: bytes, origin: str) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InputError(f"{origin} is not valid UTF-8: {exc}") from exc


def read_text(path: PathLike) -> str:
    return decode_text(Path(path).read_bytes(), str(path))


def read_rank_file(path: PathLike) -> List[float]:
    """Whitespace-separated floating-point scores, in file order."""
    try:
        content = read_text(path)
    except OSError as exc:
        raise RankFileError(f"cannot read ranks file {path}: {exc}") from exc
    ranks: List[float] = []
    for token in content.split():
        try:
            ranks.append(float(token))
        except ValueError:
            raise RankFileError(f"non-numeric rank {token!r} in {path}") from None
    return ranks


def read_core_file(path: PathLike) -> str:
    try:
        return read_text(path)
    except OSError as exc:
        raise CoreFileFormatError(f"cannot read core file {path}: {exc}") from exc
