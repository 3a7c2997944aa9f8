"""
Person Registry for the Spreader Detector

Owns every Person read from the people dataset for the duration of a run.
Supports two orderings:
- by identifier ascending (required for lookup)
- by infection probability descending (report order)

Lookup is a binary search over an immutable numpy snapshot of the sorted
identifiers, taken when sort_by_id() runs. Any later reordering drops the
snapshot, so a lookup on a registry that is not sorted by id fails loudly
instead of returning a wrong position.
"""
from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, List, Optional

import numpy as np
import pandas as pd

from spreader_detector.common.errors import PersonNotFoundError, RegistryOrderError

if TYPE_CHECKING:
    from spreader_detector.decision.triage import TriageThresholds


# Sentinel position for identifiers absent from the registry
NOT_FOUND = -1

# Probability every person starts with ("innocent until proven otherwise")
INITIAL_PROBABILITY = 0.0


@dataclass
class Person:
    """A single record of the people dataset."""
    id: int
    name: str
    age: float
    probability: float = INITIAL_PROBABILITY


class PersonRegistry:
    """In-memory collection of people, indexed by identifier once sorted."""

    def __init__(self, people: Optional[List[Person]] = None):
        self._people: List[Person] = list(people) if people else []
        self._sorted_ids: Optional[np.ndarray] = None

    def __len__(self) -> int:
        return len(self._people)

    def __iter__(self) -> Iterator[Person]:
        return iter(self._people)

    def __getitem__(self, position: int) -> Person:
        return self._people[position]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(people={len(self)}, sorted_by_id={self.is_sorted_by_id})"

    @property
    def is_sorted_by_id(self) -> bool:
        return self._sorted_ids is not None

    def add(self, person: Person) -> None:
        self._people.append(person)
        self._sorted_ids = None

    def sort_by_id(self) -> None:
        """Order people by identifier ascending and freeze the lookup index."""
        self._people.sort(key=lambda p: p.id)
        ids = np.fromiter((p.id for p in self._people), dtype=np.uint64, count=len(self._people))
        ids.setflags(write=False)

        if len(ids) > 1:
            duplicates = np.unique(ids[1:][ids[1:] == ids[:-1]])
            if len(duplicates) > 0:
                warnings.warn(
                    f"Duplicate person identifiers in registry: {duplicates.tolist()}"
                )

        self._sorted_ids = ids

    def sort_by_probability(self) -> None:
        """Order people by infection probability, highest first (NaN last)."""
        self._people.sort(key=lambda p: (math.isnan(p.probability), -p.probability))
        self._sorted_ids = None

    def index_by_id(self, person_id: int) -> int:
        """
        Binary search for a person's position.

        Args:
            person_id: Identifier to look for

        Returns:
            Position in the registry, or NOT_FOUND
        """
        if self._sorted_ids is None:
            raise RegistryOrderError("index_by_id() requires sort_by_id() first")

        if person_id < 0 or person_id > np.iinfo(np.uint64).max:
            return NOT_FOUND

        position = int(np.searchsorted(self._sorted_ids, np.uint64(person_id), side='left'))
        if position < len(self._sorted_ids) and int(self._sorted_ids[position]) == person_id:
            return position
        return NOT_FOUND

    def lookup(self, person_id: int) -> Person:
        """Return the person with the given identifier."""
        position = self.index_by_id(person_id)
        if position == NOT_FOUND:
            raise PersonNotFoundError(person_id)
        return self._people[position]

    def to_frame(self, thresholds: Optional[TriageThresholds] = None) -> pd.DataFrame:
        """
        Tabular view of the registry in its current order.

        Args:
            thresholds: When given, adds a 'category' column with each
                person's triage category label
        """
        frame = pd.DataFrame(
            {
                'id': [p.id for p in self._people],
                'name': [p.name for p in self._people],
                'age': [p.age for p in self._people],
                'probability': [p.probability for p in self._people],
            },
            columns=['id', 'name', 'age', 'probability'],
        )

        if thresholds is not None:
            from spreader_detector.decision.triage import classify

            frame['category'] = frame['probability'].map(
                lambda p: classify(p, thresholds).value
            ).astype(object)

        return frame

    def release(self) -> None:
        """Drop every owned person."""
        self._people.clear()
        self._sorted_ids = None
