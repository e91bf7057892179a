"""Configuration for the centrematch query resolution engine."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

# Static tables (synonyms, area aliases) ship with the package; point
# CENTREMATCH_CONFIG_DATA at another directory to override them.
DATA_DIR = Path(
    os.environ.get("CENTREMATCH_CONFIG_DATA")
    or Path(__file__).resolve().parent / "data"
)


@dataclass
class DisambiguationConfig:
    min_top_score: float = 0.5
    near_tie_ratio: float = 0.9
    collapse_score: float = 0.7


@dataclass
class CategoryConfig:
    match_threshold: float = 0.6
    best_match_threshold: float = 0.5
    max_results: int = 5
    detect_threshold: float = 0.85  # stricter: detection scans every query token


@dataclass
class NearbyConfig:
    default_radius_km: float = 10.0


@dataclass
class SuggestionConfig:
    max_total: int = 5
    max_similar: int = 3
    similar_threshold: float = 0.4
    max_nearby: int = 3


@dataclass
class EngineConfig:
    disambiguation: DisambiguationConfig = field(default_factory=DisambiguationConfig)
    categories: CategoryConfig = field(default_factory=CategoryConfig)
    nearby: NearbyConfig = field(default_factory=NearbyConfig)
    suggestions: SuggestionConfig = field(default_factory=SuggestionConfig)
