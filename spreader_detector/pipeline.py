"""
Detection Pipeline

load people -> sort by id -> propagate meetings -> sort by probability
-> write report -> release registry

Any failure aborts the remaining stages. The registry is released on every
path, and a report left by an earlier run is removed so a failed run never
leaves a stale report behind.
"""
import contextlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from spreader_detector.common.errors import OutputOpenError
from spreader_detector.config import DetectorParams
from spreader_detector.data.loader import load_people
from spreader_detector.data.registry import PersonRegistry
from spreader_detector.decision.triage import RiskClassifier, TriageCategory
from spreader_detector.models.propagation import InfectionPropagator, PropagationResult

PathLike = Union[str, Path]


@dataclass
class DetectionSummary:
    """Outcome of one pipeline run."""
    output_path: Path
    people: int = 0
    spreader_id: Optional[int] = None
    meetings_applied: int = 0
    category_counts: Dict[str, int] = field(default_factory=dict)


def render_report(registry: PersonRegistry, classifier: RiskClassifier) -> List[str]:
    """Report entries for every person, in the registry's current order."""
    return [classifier.render(person) for person in registry]


def write_report(output_path: PathLike, entries: List[str]) -> None:
    try:
        with open(output_path, 'w', encoding='utf-8') as f:
            f.writelines(entries)
    except OSError as e:
        raise OutputOpenError(f"Cannot write {output_path}: {e}") from e


def count_categories(registry: PersonRegistry, classifier: RiskClassifier) -> Dict[str, int]:
    """Number of people per triage category (every category present, possibly 0)."""
    frame = registry.to_frame(classifier.thresholds)
    counts = frame['category'].value_counts()
    return {c.value: int(counts.get(c.value, 0)) for c in TriageCategory}


def print_summary(summary: DetectionSummary) -> None:
    print("\n" + "=" * 60)
    print("DETECTION SUMMARY")
    print("=" * 60)
    print(f"People:           {summary.people}")
    print(f"Spreader id:      {summary.spreader_id if summary.spreader_id is not None else '-'}")
    print(f"Meetings applied: {summary.meetings_applied}")
    for category, count in summary.category_counts.items():
        print(f"  {category}: {count}")
    print(f"\n✓ Report saved to: {summary.output_path}")


def _remove_stale_report(output_path: Path) -> None:
    # Best effort: the pipeline failure is what gets reported.
    with contextlib.suppress(OSError):
        output_path.unlink(missing_ok=True)


def run_pipeline(
    people_path: PathLike,
    meetings_path: PathLike,
    params: DetectorParams,
    output_path: Optional[PathLike] = None,
    verbose: bool = False
) -> DetectionSummary:
    """
    Run the full detection pipeline and write the triage report.

    Args:
        people_path: Path to the people file
        meetings_path: Path to the meetings file
        params: Typed configuration
        output_path: Report path (defaults to params.output_file)
        verbose: Print progress and a run summary to stdout

    Returns:
        DetectionSummary
    """
    output_path = Path(output_path if output_path is not None else params.output_file)
    summary = DetectionSummary(output_path=output_path)
    registry: Optional[PersonRegistry] = None

    try:
        if verbose:
            print(f"Loading people from {people_path}...")
        registry, summary.people = load_people(people_path, params.max_line_length)
        if verbose:
            print(f"  → {summary.people} people loaded")

        propagator = InfectionPropagator(params)
        classifier = RiskClassifier(params)

        if summary.people == 0:
            # Nothing to propagate; the meetings file must still open.
            propagator.apply(meetings_path, registry)
        else:
            registry.sort_by_id()
            if verbose:
                print(f"Replaying meetings from {meetings_path}...")
            result: PropagationResult = propagator.apply(meetings_path, registry)
            summary.spreader_id = result.spreader_id
            summary.meetings_applied = result.meetings_applied
            if verbose:
                print(f"  → {result.meetings_applied} meetings applied")
            registry.sort_by_probability()

        write_report(output_path, render_report(registry, classifier))
        summary.category_counts = count_categories(registry, classifier)

    except Exception:
        _remove_stale_report(output_path)
        raise

    finally:
        if registry is not None:
            registry.release()

    if verbose:
        print_summary(summary)

    return summary
