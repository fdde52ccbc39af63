from __future__ import annotations

from prometheus_client import Counter, Histogram

SANITY_COMMIT_TOTAL = Counter(
    "sanityset_commit_total",
    "Number of transaction commits attempted",
    ["scope", "status"],
)

SANITY_COMMIT_LATENCY_SECONDS = Histogram(
    "sanityset_commit_latency_seconds",
    "Commit round-trip latency in seconds",
    ["scope"],
)

SANITY_MUTATIONS_COMMITTED_TOTAL = Counter(
    "sanityset_mutations_committed_total",
    "Number of mutations sent in successful commits",
    ["mutation_type"],
)
