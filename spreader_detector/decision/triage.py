"""
Triage Decision Layer for the Spreader Detector

Decision categories, evaluated high to low (boundaries closed at the top):
- MEDICAL_SUPERVISION: probability >= hospitalization threshold
- REGULAR_QUARANTINE:  probability >= quarantine threshold
- CLEAN:               anything lower
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict

from spreader_detector.config import DetectorParams
from spreader_detector.data.registry import Person


class TriageCategory(Enum):
    """Triage outcome for one person."""
    MEDICAL_SUPERVISION = "medical supervision"
    REGULAR_QUARANTINE = "regular quarantine"
    CLEAN = "clean"


@dataclass(frozen=True)
class TriageThresholds:
    """Thresholds for triage categories."""
    hospitalization: float = 0.3
    quarantine: float = 0.1

    @classmethod
    def from_params(cls, params: DetectorParams) -> 'TriageThresholds':
        return cls(
            hospitalization=params.hospitalization_threshold,
            quarantine=params.quarantine_threshold,
        )


def classify(probability: float, thresholds: TriageThresholds) -> TriageCategory:
    """
    Assign a triage category to a raw (unclamped) probability.

    NaN fails every comparison and therefore classifies as CLEAN.
    """
    if probability >= thresholds.hospitalization:
        return TriageCategory.MEDICAL_SUPERVISION

    elif probability >= thresholds.quarantine:
        return TriageCategory.REGULAR_QUARANTINE

    else:
        return TriageCategory.CLEAN


class RiskClassifier:
    """Classifies people and renders their report entries."""

    def __init__(self, params: DetectorParams):
        self.thresholds = TriageThresholds.from_params(params)
        self.templates: Dict[TriageCategory, str] = {
            TriageCategory.MEDICAL_SUPERVISION: params.medical_supervision_msg,
            TriageCategory.REGULAR_QUARANTINE: params.regular_quarantine_msg,
            TriageCategory.CLEAN: params.clean_msg,
        }

    def classify(self, probability: float) -> TriageCategory:
        return classify(probability, self.thresholds)

    def render(self, person: Person) -> str:
        """Report entry for one person: name, id and category instructions."""
        template = self.templates[self.classify(person.probability)]
        return template.format(name=person.name, id=person.id)
