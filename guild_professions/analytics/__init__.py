"""
Profession dependency and rank analytics.

Modules
-------
dependencies : full_dependency_chain() + sort_by_tier() — graph walk over the
               catalog, cycle-safe, no recursion.
ranks        : per-member rank counts, limit warnings and summary strings.
coverage     : compute_coverage() — who holds each profession at which rank.
supply_chain : audit_supply_chains() + find_supply_breaks() — crafting chains
               checked for Master+ suppliers.
health       : compute_health_metrics() — scores, tier balance, gaps and
               recommendations.

Every function here is pure: it takes a catalog and a roster snapshot and
returns freshly built values.  Nothing is cached between calls.
"""

from guild_professions.analytics.coverage import (
    CoverageSummary,
    ProfessionCoverage,
    compute_coverage,
    summarize_coverage,
)
from guild_professions.analytics.dependencies import (
    full_dependency_chain,
    ordered_dependency_chain,
    sort_by_tier,
)
from guild_professions.analytics.health import (
    CriticalGap,
    HealthMetrics,
    build_recommendations,
    compute_health_metrics,
    compute_tier_balance,
)
from guild_professions.analytics.ranks import (
    MemberRankReport,
    build_member_rank_report,
    calculate_effective_rank_counts,
    calculate_rank_counts,
    check_rank_limits,
    get_rank_summary,
)
from guild_professions.analytics.supply_chain import (
    CraftingSupplyChain,
    DependencySupply,
    Provider,
    SupplyBreak,
    SupplyStatus,
    audit_supply_chains,
    find_supply_breaks,
)

__all__ = [
    "CoverageSummary",
    "CraftingSupplyChain",
    "CriticalGap",
    "DependencySupply",
    "HealthMetrics",
    "MemberRankReport",
    "ProfessionCoverage",
    "Provider",
    "SupplyBreak",
    "SupplyStatus",
    "audit_supply_chains",
    "build_member_rank_report",
    "build_recommendations",
    "calculate_effective_rank_counts",
    "calculate_rank_counts",
    "check_rank_limits",
    "compute_coverage",
    "compute_health_metrics",
    "compute_tier_balance",
    "find_supply_breaks",
    "full_dependency_chain",
    "get_rank_summary",
    "ordered_dependency_chain",
    "sort_by_tier",
    "summarize_coverage",
]
