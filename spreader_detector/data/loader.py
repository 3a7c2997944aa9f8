"""
Data Loader for the Spreader Detector

This module handles:
1. Opening the two input datasets (people, meetings)
2. Parsing people records into the PersonRegistry
3. Parsing meeting records lazily, one at a time

Line formats (whitespace-separated):
- People:    <name> <id> <age>
- Meetings:  <spreader_id>                                   (first line)
             <infector_id> <infected_id> <distance> <duration> (other lines)
"""
import re
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterator, Optional, Tuple, Union

import numpy as np

from spreader_detector.common.errors import InputFormatError, InputOpenError, ResourceError
from spreader_detector.data.registry import Person, PersonRegistry

PathLike = Union[str, Path]

DEFAULT_MAX_LINE_LENGTH = 1024

_ID_PATTERN = re.compile(r'[0-9]+')
_MAX_ID = int(np.iinfo(np.uint64).max)


@dataclass(frozen=True)
class Meeting:
    """One encounter between an infector and an infected person."""
    infector_id: int
    infected_id: int
    distance: float
    duration: float


@contextmanager
def open_dataset(path: PathLike) -> Iterator[IO[str]]:
    """Open an input dataset for reading, mapping OS failures to InputOpenError."""
    try:
        handle = open(path, 'r', encoding='utf-8')
    except OSError as e:
        raise InputOpenError(f"Cannot open {path}: {e}") from e
    with handle:
        yield handle


def iter_lines(
    handle: IO[str],
    path: PathLike,
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
) -> Iterator[Tuple[int, str]]:
    """
    Yield (line_number, text) for each line, newline stripped.

    Raises InputFormatError for lines over max_line_length or undecodable bytes.
    """
    line_number = 0
    try:
        for line_number, raw in enumerate(handle, start=1):
            text = raw.rstrip('\r\n')
            if len(text) > max_line_length:
                raise InputFormatError(
                    path, line_number, f"line exceeds {max_line_length} characters"
                )
            yield line_number, text
    except UnicodeDecodeError as e:
        raise InputFormatError(path, line_number + 1, f"undecodable text: {e}") from e


def parse_id(token: str) -> Optional[int]:
    """
    Parse a person identifier (non-negative integer that fits in 64 bits).

    Returns:
        The identifier, or None when the token is not a valid identifier
    """
    if not _ID_PATTERN.fullmatch(token):
        return None
    value = int(token)
    if value > _MAX_ID:
        return None
    return value


def parse_float(token: str) -> Optional[float]:
    try:
        return float(token)
    except ValueError:
        return None


def parse_person_line(text: str, path: PathLike, line_number: int) -> Person:
    fields = text.split()
    if len(fields) != 3:
        raise InputFormatError(
            path, line_number, f"expected <name> <id> <age>, got {len(fields)} fields"
        )

    name, id_token, age_token = fields
    person_id = parse_id(id_token)
    if person_id is None:
        raise InputFormatError(path, line_number, f"invalid id {id_token!r}")
    age = parse_float(age_token)
    if age is None:
        raise InputFormatError(path, line_number, f"invalid age {age_token!r}")

    return Person(id=person_id, name=name, age=age)


def parse_spreader_line(text: str, path: PathLike, line_number: int = 1) -> int:
    fields = text.split()
    if len(fields) != 1:
        raise InputFormatError(
            path, line_number, f"expected <spreader_id>, got {len(fields)} fields"
        )
    spreader_id = parse_id(fields[0])
    if spreader_id is None:
        raise InputFormatError(path, line_number, f"invalid spreader id {fields[0]!r}")
    return spreader_id


def parse_meeting_line(text: str, path: PathLike, line_number: int) -> Meeting:
    fields = text.split()
    if len(fields) != 4:
        raise InputFormatError(
            path, line_number,
            f"expected <infector_id> <infected_id> <distance> <duration>, got {len(fields)} fields"
        )

    infector_id = parse_id(fields[0])
    infected_id = parse_id(fields[1])
    distance = parse_float(fields[2])
    duration = parse_float(fields[3])
    if infector_id is None or infected_id is None:
        raise InputFormatError(path, line_number, "invalid person id")
    if distance is None or duration is None:
        raise InputFormatError(path, line_number, "invalid distance or duration")

    return Meeting(
        infector_id=infector_id,
        infected_id=infected_id,
        distance=distance,
        duration=duration,
    )


def load_people(
    path: PathLike,
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
) -> Tuple[PersonRegistry, int]:
    """
    Load the people dataset into a new registry.

    Args:
        path: Path to the people file
        max_line_length: Longest accepted record (newline excluded)

    Returns:
        Tuple of (registry, number of people). An empty file gives (empty registry, 0).
    """
    registry = PersonRegistry()
    try:
        with open_dataset(path) as handle:
            for line_number, text in iter_lines(handle, path, max_line_length):
                registry.add(parse_person_line(text, path, line_number))
    except MemoryError as e:
        registry.release()
        raise ResourceError("Out of memory while loading people") from e
    except Exception:
        registry.release()
        raise

    return registry, len(registry)
