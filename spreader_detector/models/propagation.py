"""
Infection Propagation for the Spreader Detector

Replays the meetings dataset in file order. The first record names the
index case, who is infected with certainty. Every following meeting
overwrites the infected party's probability with:

    factor = (duration * reference_distance) / (distance * reference_time)
    P(infected) = P(infector) * factor

File order is the causal chain of transmission: the last meeting naming a
person as infected decides their probability (no accumulation). Results are
never clamped, so a short distance with a long duration can push the
probability above 1.
"""
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np

from spreader_detector.config import DetectorParams
from spreader_detector.data.loader import (
    Meeting,
    iter_lines,
    open_dataset,
    parse_meeting_line,
    parse_spreader_line,
)
from spreader_detector.data.registry import PersonRegistry

# The index case is sick for sure
SPREADER_PROBABILITY = 1.0


@dataclass
class PropagationResult:
    """What a pass over the meetings file did."""
    spreader_id: Optional[int] = None
    meetings_applied: int = 0


def transmission_factor(distance: float, duration: float, params: DetectorParams) -> float:
    """
    Multiplier for one meeting relative to the safety reference values.

    A zero distance gives inf (or nan for a zero duration) instead of raising.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        factor = (np.float64(duration) * params.reference_distance) / (
            np.float64(distance) * params.reference_time
        )
    return float(factor)


class InfectionPropagator:
    """Applies a meetings dataset to a registry sorted by identifier."""

    def __init__(self, params: DetectorParams):
        self.params = params

    def apply_meeting(self, meeting: Meeting, registry: PersonRegistry) -> float:
        """Apply one meeting and return the infected person's new probability."""
        infector = registry.lookup(meeting.infector_id)
        infected = registry.lookup(meeting.infected_id)

        factor = transmission_factor(meeting.distance, meeting.duration, self.params)
        if not np.isfinite(factor):
            warnings.warn(
                f"Non-finite transmission factor for meeting "
                f"{meeting.infector_id} -> {meeting.infected_id} "
                f"(distance={meeting.distance}, duration={meeting.duration})"
            )

        infected.probability = infector.probability * factor
        return infected.probability

    def apply(
        self,
        meetings_path: Union[str, Path],
        registry: PersonRegistry
    ) -> PropagationResult:
        """
        Read the meetings file and update probabilities in place.

        The file is opened even when the registry is empty, so a missing
        meetings file is always reported.

        Args:
            meetings_path: Path to the meetings file
            registry: People, sorted by identifier unless empty

        Returns:
            PropagationResult
        """
        result = PropagationResult()
        max_line_length = self.params.max_line_length

        with open_dataset(meetings_path) as handle:
            if len(registry) == 0:
                return result

            lines = iter_lines(handle, meetings_path, max_line_length)
            first = next(lines, None)
            if first is None:
                return result

            line_number, text = first
            spreader_id = parse_spreader_line(text, meetings_path, line_number)
            registry.lookup(spreader_id).probability = SPREADER_PROBABILITY
            result.spreader_id = spreader_id

            for line_number, text in lines:
                meeting = parse_meeting_line(text, meetings_path, line_number)
                self.apply_meeting(meeting, registry)
                result.meetings_applied += 1

        return result
