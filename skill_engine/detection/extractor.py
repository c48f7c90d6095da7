"""
Evidence extraction from already-fetched repository and commit payloads.

Fetching from GitHub/GitLab is someone else's job; this module only turns
the payloads those clients return into Evidence records:

- from_repository(): one LANGUAGE record per language byte count and one
  FRAMEWORK record per framework hint, all carrying the repository's
  complexity score
- from_commits(): one COMMIT_DIFF record per language touched by the
  commits' file-level diffs

Language tags are normalized here (the engine does not renormalize names),
and code volume is estimated as bytes / 25.

Usage:
    extractor = EvidenceExtractor()
    evidence = merge_evidence(
        extractor.from_repository(repo),
        extractor.from_commits(commits),
    )
    entries = builder.build_profile("emp-42", evidence)
"""

import logging
from collections import OrderedDict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from skill_engine.common.error_handling import InvalidArgument
from skill_engine.common.utils import clamp, ensure_utc, skill_key
from skill_engine.detection.types import (
    Evidence,
    EvidenceKind,
    EvidenceSource,
    RepositorySummary,
)

logger = logging.getLogger(__name__)

EvidenceMap = Dict[str, List[Evidence]]

# Rough characters-per-line used to turn byte counts into lines
BYTES_PER_LINE = 25

# Framework hints carry no byte count; size (KB) * 10 approximates lines
LINES_PER_SIZE_UNIT = 10

LANGUAGE_ALIASES: Dict[str, str] = {
    "Shell": "Shell Scripting",
    "Dockerfile": "Docker",
    "YAML": "YAML Configuration",
}

EXTENSION_LANGUAGES: Dict[str, str] = {
    "js": "JavaScript",
    "jsx": "JavaScript",
    "ts": "TypeScript",
    "tsx": "TypeScript",
    "py": "Python",
    "java": "Java",
    "go": "Go",
    "rs": "Rust",
    "cpp": "C++",
    "cc": "C++",
    "c": "C",
    "cs": "C#",
    "rb": "Ruby",
    "php": "PHP",
    "swift": "Swift",
    "kt": "Kotlin",
    "scala": "Scala",
    "html": "HTML",
    "css": "CSS",
    "scss": "CSS",
    "sass": "CSS",
    "sql": "SQL",
    "sh": "Shell",
    "bash": "Shell",
    "yml": "YAML",
    "yaml": "YAML",
    "json": "JSON",
    "xml": "XML",
    "md": "Markdown",
}


def normalize_language(tag: str) -> str:
    """Canonical skill name for a raw language tag; unknown tags pass through."""
    tag = (tag or "").strip()
    return LANGUAGE_ALIASES.get(tag, tag)


def language_from_filename(path: str) -> Optional[str]:
    """Language of a file by extension, or None when unknown."""
    name = (path or "").rsplit("/", 1)[-1]
    if "." not in name:
        return None
    extension = name.rsplit(".", 1)[-1].lower()
    return EXTENSION_LANGUAGES.get(extension)


def repository_complexity(
    size: int,
    languages: Iterable[str],
    stars: int = 0,
    forks: int = 0,
    watchers: int = 0,
) -> float:
    """
    Contextual richness of a repository in [0, 1].

    Size:       +0.3 if > 10,000, +0.2 if > 1,000, +0.1 if > 100
    Languages:  +0.3 if > 5, +0.2 if > 3, +0.1 if > 1
    Popularity: +0.2 if stars > 100 else +0.1 if > 10,
                +0.1 if forks > 10, +0.1 if watchers > 10
    """
    complexity = 0.0

    if size > 10000:
        complexity += 0.3
    elif size > 1000:
        complexity += 0.2
    elif size > 100:
        complexity += 0.1

    language_count = len(set(languages))
    if language_count > 5:
        complexity += 0.3
    elif language_count > 3:
        complexity += 0.2
    elif language_count > 1:
        complexity += 0.1

    if stars > 100:
        complexity += 0.2
    elif stars > 10:
        complexity += 0.1

    if forks > 10:
        complexity += 0.1
    if watchers > 10:
        complexity += 0.1

    return clamp(round(complexity, 6))


def merge_evidence(*maps: Mapping[str, List[Evidence]]) -> EvidenceMap:
    """
    Combine evidence maps, keying skills case-insensitively.

    The first spelling seen for a skill becomes the key in the result.
    """
    merged: "OrderedDict[str, List[Evidence]]" = OrderedDict()
    display: Dict[str, str] = {}
    for evidence_map in maps:
        for name, records in evidence_map.items():
            key = skill_key(name)
            if key not in display:
                display[key] = name
                merged[name] = []
            merged[display[key]].extend(records)
    return dict(merged)


class EvidenceExtractor:
    """Builds Evidence records from repository and commit payloads."""

    def __init__(self, source: EvidenceSource = EvidenceSource.REPOSITORY_SCAN):
        self.source = source

    def from_repository(self, repo: RepositorySummary, observed_at: Optional[datetime] = None) -> EvidenceMap:
        """
        Evidence for every language and framework hint of one repository.

        Args:
            repo: Repository summary with language byte counts and framework hints
            observed_at: Fallback recency when the repository has no activity date
        """
        recency = repo.last_activity_at or observed_at
        if recency is None:
            raise InvalidArgument(f"Repository {repo.name} has no activity date and no fallback was given")

        complexity = repository_complexity(
            repo.size, repo.languages.keys(), repo.stars, repo.forks, repo.watchers
        )
        evidence: EvidenceMap = {}

        for language, byte_count in repo.languages.items():
            name = normalize_language(language)
            evidence.setdefault(name, []).append(
                Evidence(
                    skill_name=name,
                    kind=EvidenceKind.LANGUAGE,
                    source=self.source,
                    frequency=byte_count,
                    recency=recency,
                    complexity=complexity,
                    project_count=1,
                    lines_of_code=round(byte_count / BYTES_PER_LINE),
                )
            )

        for framework in repo.frameworks:
            evidence.setdefault(framework, []).append(
                Evidence(
                    skill_name=framework,
                    kind=EvidenceKind.FRAMEWORK,
                    source=self.source,
                    frequency=1,
                    recency=recency,
                    complexity=complexity,
                    project_count=1,
                    lines_of_code=repo.size * LINES_PER_SIZE_UNIT,
                )
            )

        logger.debug(f"Extracted {len(evidence)} skills from repository {repo.name}")
        return evidence

    def from_commits(
        self,
        commits: Iterable[Mapping[str, Any]],
        complexity: float = 0.0,
    ) -> EvidenceMap:
        """
        Evidence from commit file-level diffs.

        Each commit is a mapping with ``date`` (datetime) and ``files``, a list
        of ``{"filename", "additions", "deletions"}``. Files with unknown
        extensions are ignored; commits without files are skipped.

        Args:
            commits: Commit payloads
            complexity: Complexity to attach (commit payloads carry no repository context)
        """
        touches: Dict[str, Dict[str, Any]] = {}

        for commit in commits:
            files = commit.get("files") or []
            if not files:
                continue
            committed_at = ensure_utc(commit["date"])

            for changed in files:
                language = language_from_filename(changed.get("filename", ""))
                if not language:
                    continue
                name = normalize_language(language)
                stats = touches.setdefault(
                    name, {"touches": 0, "lines": 0, "latest": committed_at}
                )
                stats["touches"] += 1
                stats["lines"] += (changed.get("additions") or 0) + (changed.get("deletions") or 0)
                stats["latest"] = max(stats["latest"], committed_at)

        evidence: EvidenceMap = {}
        for name, stats in touches.items():
            evidence[name] = [
                Evidence(
                    skill_name=name,
                    kind=EvidenceKind.LANGUAGE,
                    source=EvidenceSource.COMMIT_DIFF,
                    frequency=stats["touches"],
                    recency=stats["latest"],
                    complexity=complexity,
                    project_count=1,
                    lines_of_code=stats["lines"],
                )
            ]

        logger.debug(f"Extracted {len(evidence)} languages from commit diffs")
        return evidence
