"""
CareScope Aggregation & Reporting
Read-side projections over the current delegation set; nothing is cached
"""

import logging
from typing import Callable, Dict, List, Optional
from datetime import date

from carescope.config import settings
from carescope.schemas import (
    DashboardStats, Delegation, DelegationFilter, DelegationGroup, MedTech,
    Resident, StatusFilter
)
from carescope.modules.lifecycle import days_until_end, days_until_supervision, is_signed
from carescope.services.stores import StoreRegistry

logger = logging.getLogger(__name__)


# =============================================================================
# Status Predicates
# =============================================================================

class StatusPredicates:
    """Membership tests shared by dashboard counts and filtered listings"""

    def __init__(self, today: date, due_soon_days: Optional[int] = None, supervision_window_days: Optional[int] = None):
        self.today = today
        self.due_soon_days = due_soon_days if due_soon_days is not None else settings.due_soon_days
        self.supervision_window_days = (
            supervision_window_days if supervision_window_days is not None
            else settings.supervision_due_window_days
        )

    def active(self, d: Delegation) -> bool:
        return d.is_active

    def due_soon(self, d: Delegation) -> bool:
        return d.is_active and 0 <= days_until_end(d, self.today) <= self.due_soon_days

    def overdue(self, d: Delegation) -> bool:
        return d.is_active and d.end_date < self.today

    def supervision_due(self, d: Delegation) -> bool:
        # Includes supervision already past due
        remaining = days_until_supervision(d, self.today)
        return d.is_active and remaining is not None and remaining <= self.supervision_window_days

    def unsigned(self, d: Delegation) -> bool:
        return d.is_active and not is_signed(d)

    def for_filter(self, status_filter: StatusFilter) -> Callable[[Delegation], bool]:
        return {
            StatusFilter.ALL: lambda d: True,
            StatusFilter.ACTIVE: self.active,
            StatusFilter.DUE_SOON: self.due_soon,
            StatusFilter.OVERDUE: self.overdue,
            StatusFilter.SUPERVISION_DUE: self.supervision_due,
            StatusFilter.UNSIGNED: self.unsigned,
        }[status_filter]


def compute_dashboard_stats(delegations: List[Delegation], today: date) -> DashboardStats:
    """
    Count delegations per dashboard category

    Categories overlap: an overdue delegation also counts as active, since
    "active" is the stored status and "overdue" is derived from it.
    """
    p = StatusPredicates(today)
    return DashboardStats(
        active=sum(1 for d in delegations if p.active(d)),
        due_soon=sum(1 for d in delegations if p.due_soon(d)),
        overdue=sum(1 for d in delegations if p.overdue(d)),
        supervision_due=sum(1 for d in delegations if p.supervision_due(d)),
        unsigned=sum(1 for d in delegations if p.unsigned(d)),
        total=len(delegations),
    )


def group_by_pair(delegations: List[Delegation]) -> List[DelegationGroup]:
    """Group delegations sharing a resident and med-tech, in first-seen order"""
    groups: Dict[str, DelegationGroup] = {}
    for d in delegations:
        key = f"{d.resident_id}_{d.med_tech_id}"
        if key not in groups:
            groups[key] = DelegationGroup(resident_id=d.resident_id, med_tech_id=d.med_tech_id)
        groups[key].delegations.append(d)
    return list(groups.values())


# =============================================================================
# Reporter
# =============================================================================

class DelegationReporter:
    """Filtered views over the registry"""

    def __init__(self, registry: StoreRegistry):
        self.registry = registry

    @staticmethod
    def _matches(query: str, *names: Optional[str]) -> bool:
        needle = query.strip().lower()
        if not needle:
            return True
        return any(needle in (name or "").lower() for name in names)

    def filter_delegations(self, criteria: Optional[DelegationFilter] = None) -> List[Delegation]:
        """
        Apply community and name filters

        The community is taken from the delegation's resident; the query
        matches resident or med-tech name, case-insensitively.
        """
        criteria = criteria or DelegationFilter()
        residents = {r.id: r for r in self.registry.residents.list()}
        med_techs = {m.id: m for m in self.registry.med_techs.list()}

        results = []
        for d in self.registry.delegations.list():
            resident = residents.get(d.resident_id)
            med_tech = med_techs.get(d.med_tech_id)
            if not criteria.all_communities and (resident is None or resident.community_id != criteria.community_id):
                continue
            if not self._matches(
                criteria.query,
                resident.name if resident else None,
                med_tech.name if med_tech else None
            ):
                continue
            results.append(d)
        return results

    def stats(self, today: date, criteria: Optional[DelegationFilter] = None) -> DashboardStats:
        delegations = self.filter_delegations(criteria)
        stats = compute_dashboard_stats(delegations, today)
        logger.debug(f"Dashboard stats over {stats.total} delegations: {stats.model_dump()}")
        return stats

    def list_by_status(
        self,
        status_filter: StatusFilter,
        today: date,
        criteria: Optional[DelegationFilter] = None
    ) -> List[Delegation]:
        predicate = StatusPredicates(today).for_filter(status_filter)
        return [d for d in self.filter_delegations(criteria) if predicate(d)]

    def grouped(
        self,
        today: date,
        status_filter: StatusFilter = StatusFilter.ALL,
        criteria: Optional[DelegationFilter] = None
    ) -> List[DelegationGroup]:
        return group_by_pair(self.list_by_status(status_filter, today, criteria))

    def filter_residents(self, criteria: Optional[DelegationFilter] = None) -> List[Resident]:
        criteria = criteria or DelegationFilter()
        return [
            r for r in self.registry.residents.list()
            if (criteria.all_communities or r.community_id == criteria.community_id)
            and self._matches(criteria.query, r.name)
        ]

    def filter_med_techs(self, criteria: Optional[DelegationFilter] = None) -> List[MedTech]:
        criteria = criteria or DelegationFilter()
        return [
            m for m in self.registry.med_techs.list()
            if (criteria.all_communities or m.community_id == criteria.community_id)
            and self._matches(criteria.query, m.name)
        ]


# =============================================================================
# Public API
# =============================================================================

def get_dashboard_stats(
    registry: StoreRegistry,
    today: date,
    criteria: Optional[DelegationFilter] = None
) -> DashboardStats:
    """Dashboard counts for the filtered delegation set"""
    return DelegationReporter(registry).stats(today, criteria)
