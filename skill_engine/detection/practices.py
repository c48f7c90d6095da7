"""
Practice detection (testing, documentation, CI/CD).

Coarse boolean heuristics over a person's repositories. Detected practices
get a fixed confidence and level and skip the numeric scorer; they are
persisted through the same upsert/evolution path as scored skills.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Sequence, Tuple

from skill_engine.detection.types import (
    EvidenceKind,
    EvidenceSource,
    RepositorySummary,
    SkillLevel,
    SkillProfileEntry,
)


@dataclass(frozen=True)
class PracticeRule:
    """One practice and the repository test that reveals it."""

    name: str
    confidence: float
    matches: Callable[[RepositorySummary], bool]
    level: SkillLevel = SkillLevel.INTERMEDIATE


def _name_contains(markers: Tuple[str, ...], lower: bool = False) -> Callable[[RepositorySummary], bool]:
    def check(repo: RepositorySummary) -> bool:
        name = repo.name.lower() if lower else repo.name
        return any(marker in name for marker in markers)
    return check


DEFAULT_PRACTICE_RULES: Tuple[PracticeRule, ...] = (
    PracticeRule("testing", 0.7, _name_contains(("test", "spec", "__tests__", "tests"))),
    # Larger repositories are likely to carry documentation
    PracticeRule("documentation", 0.6, lambda repo: repo.size > 1000),
    PracticeRule(
        "ci/cd",
        0.65,
        _name_contains((".github", ".gitlab", "jenkinsfile", ".circleci"), lower=True),
    ),
)


class PracticeDetector:
    """Applies practice rules to a person's repositories."""

    def __init__(self, rules: Sequence[PracticeRule] = DEFAULT_PRACTICE_RULES):
        self.rules = tuple(rules)

    def detect(self, person_id: str, repositories: Iterable[RepositorySummary]) -> List[SkillProfileEntry]:
        """One entry per rule satisfied by at least one repository."""
        repositories = list(repositories)
        practices = []
        for rule in self.rules:
            if any(rule.matches(repo) for repo in repositories):
                practices.append(
                    SkillProfileEntry(
                        person_id=person_id,
                        skill_name=rule.name,
                        category=EvidenceKind.PRACTICE.category(),
                        confidence=rule.confidence,
                        level=rule.level,
                        source=EvidenceSource.REPOSITORY_SCAN,
                        aggregate=None,
                        kind=EvidenceKind.PRACTICE,
                    )
                )
        return practices
