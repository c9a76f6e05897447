"""Entity resolution for poster attribution.

Submodules:
- matcher: name / alias / website lookup against the canonical store
- alias_merge: idempotent resolve-or-create with alias union
"""

from poster_attribution.resolution.alias_merge import AliasMergeEngine, MergeOutcome
from poster_attribution.resolution.matcher import EntityMatcher, EntityRef

__all__ = [
    "AliasMergeEngine",
    "EntityMatcher",
    "EntityRef",
    "MergeOutcome",
]
