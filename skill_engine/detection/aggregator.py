"""
Evidence aggregation.

Merges every Evidence record for one (person, skill) into a SkillAggregate.
Complexity is already attached to each record by the extractor and is only
averaged here, never recomputed.
"""

from collections import Counter
from typing import Sequence

from skill_engine.common.error_handling import InvalidArgument
from skill_engine.common.utils import skill_key
from skill_engine.detection.types import Evidence, EvidenceKind, EvidenceSource, SkillAggregate


def aggregate(evidence_list: Sequence[Evidence]) -> SkillAggregate:
    """
    Merge evidence for a single skill.

    - total_projects: number of records
    - total_lines / total_frequency: sums
    - contributing_projects: sum of project_count, persisted as projects_used
    - mean_complexity: unweighted mean
    - most_recent_observation: latest recency

    Raises:
        InvalidArgument: If the list is empty or mixes skill names
    """
    if not evidence_list:
        raise InvalidArgument("Cannot aggregate an empty evidence list")

    keys = {skill_key(e.skill_name) for e in evidence_list}
    if len(keys) > 1:
        raise InvalidArgument(f"Evidence for different skills cannot be aggregated: {sorted(keys)}")

    count = len(evidence_list)
    return SkillAggregate(
        total_projects=count,
        total_lines=sum(e.lines_of_code for e in evidence_list),
        total_frequency=sum(e.frequency for e in evidence_list),
        mean_complexity=sum(e.complexity for e in evidence_list) / count,
        most_recent_observation=max(e.recency for e in evidence_list),
        contributing_projects=sum(e.project_count for e in evidence_list),
    )


def dominant_kind(evidence_list: Sequence[Evidence]) -> EvidenceKind:
    """Most frequent kind; ties go to the kind seen first."""
    if not evidence_list:
        raise InvalidArgument("Cannot pick a dominant kind from no evidence")
    return Counter(e.kind for e in evidence_list).most_common(1)[0][0]


def dominant_source(evidence_list: Sequence[Evidence]) -> EvidenceSource:
    """Most frequent source; ties go to the source seen first."""
    if not evidence_list:
        raise InvalidArgument("Cannot pick a dominant source from no evidence")
    return Counter(e.source for e in evidence_list).most_common(1)[0][0]
