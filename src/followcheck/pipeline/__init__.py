"""Check pipeline: GitHub API → Reconcile → Enrich → Envelope.

The pipeline coordinates the entire data flow:
1. Fetch the following and followers lists (paged, sequential)
2. Compute the requested asymmetric difference
3. Enrich each resulting user with profile details (bounded fan-out)
4. Return a ResultEnvelope

Components:
- Orchestrator: Main coordinator and public entry point
- PagedFetcher: API → user records, with failure classification
- reconcile: Case-insensitive set difference
- DetailEnricher: Per-user profile details, failures degrade one row
"""

from followcheck.pipeline.enricher import DetailEnricher
from followcheck.pipeline.fetcher import FetchResult, FetchStatus, PagedFetcher
from followcheck.pipeline.orchestrator import Orchestrator, check_relationship_asymmetry
from followcheck.pipeline.reconciler import Difference, reconcile

__all__ = [
    "Orchestrator",
    "check_relationship_asymmetry",
    "PagedFetcher",
    "FetchResult",
    "FetchStatus",
    "DetailEnricher",
    "Difference",
    "reconcile",
]
