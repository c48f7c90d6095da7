"""
Skill engine: evidence-based skill profiles and team recommendations.

Subpackages:
- common: config, logging, errors and MongoDB persistence
- detection: evidence extraction, confidence scoring, level classification
- matching: weighted candidate-to-requirement matching
- services: batch refresh and repository-backed recommendations
"""

__version__ = "0.1.0"
__version_info__ = (0, 1, 0)
