"""centrematch - Shopping centre and category resolution for search queries."""

from centrematch.config import EngineConfig
from centrematch.location_index import LocationIndex, StaticSnapshotSource
from centrematch.resolver import CentreResolver, ResolverStats, disambiguate
from centrematch.types import LocationEntry, NearbyCentre, QueryResolution, ScoredCandidate

__all__ = [
    "CentreResolver",
    "EngineConfig",
    "LocationEntry",
    "LocationIndex",
    "NearbyCentre",
    "QueryResolution",
    "ResolverStats",
    "ScoredCandidate",
    "StaticSnapshotSource",
    "disambiguate",
]
