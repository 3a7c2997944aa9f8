"""Data module - people registry and dataset parsing."""

from spreader_detector.data.registry import (
    NOT_FOUND,
    Person,
    PersonRegistry,
)

from spreader_detector.data.loader import (
    Meeting,
    load_people,
    open_dataset,
    parse_meeting_line,
    parse_person_line,
    parse_spreader_line,
)

__all__ = [
    # Registry
    'NOT_FOUND',
    'Person',
    'PersonRegistry',
    # Loader
    'Meeting',
    'load_people',
    'open_dataset',
    'parse_meeting_line',
    'parse_person_line',
    'parse_spreader_line',
]
