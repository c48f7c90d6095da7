"""
Persisted document shapes for the skill engine.

These TypedDicts describe what the repositories read and write. The engine
itself works on the dataclasses in skill_engine.detection.types and
skill_engine.matching.types; conversion happens at the repository boundary.
"""

from datetime import datetime
from typing import Any, Dict, Optional, TypedDict
from typing_extensions import NotRequired


class SkillDocument(TypedDict):
    """Master skill record, one per case-insensitive skill name."""
    _id: str                           # skill_key(name), e.g. "typescript"
    name: str                          # Display name from first detection
    category: str                      # "Programming Language", "Framework", "Tool", "Practice"
    description: str
    created_at: datetime


class SkillRecordDocument(TypedDict):
    """Current per-person projection for one skill (overwritten on every build)."""
    person_id: str
    skill_id: str
    level: str                         # SkillLevel value
    confidence: Optional[float]        # None for manually entered skills
    lines_of_code: int
    projects_used: int
    last_used: Optional[datetime]
    is_auto_detected: bool
    source: str                        # EvidenceSource value
    updated_at: datetime
    created_at: NotRequired[datetime]
    skill_name: NotRequired[str]       # Joined in by find_skill_records


class EvolutionSnapshotDocument(TypedDict):
    """Append-only history entry; never updated or deleted."""
    person_id: str
    skill_id: str
    date: datetime
    level: str
    confidence: float
    evidence_type: str                 # EvidenceSource value of the build
    evidence_data: Dict[str, Any]      # Raw aggregate metrics
    total_projects: int
    total_lines: int
