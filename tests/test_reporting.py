"""
Unit tests for dashboard aggregation and filtering
"""

import pytest
from datetime import date, datetime

from carescope.schemas import (
    DelegationFilter, DelegationSignatures, DelegationStatus, MedTech, Resident,
    SignatureRecord, StatusFilter
)
from carescope.modules.reporting import (
    DelegationReporter, compute_dashboard_stats, get_dashboard_stats, group_by_pair
)

TODAY = date(2024, 1, 1)


def signed():
    at = datetime(2024, 1, 1, 10, 0)
    return DelegationSignatures(
        rn=SignatureRecord(signed_at=at, typed_name="Rita Okafor"),
        mt=SignatureRecord(signed_at=at, typed_name="Maria Lopez"),
    )


class TestDashboardStats:
    """Test counts over a fixed delegation set"""

    @pytest.fixture
    def three(self, make_delegation):
        return [
            make_delegation(end_date=date(2024, 3, 31)),
            make_delegation(end_date=date(2024, 1, 10)),
            make_delegation(start_date=date(2023, 10, 1), end_date=date(2023, 12, 20)),
        ]

    def test_three_delegation_fixture(self, three):
        """Test overlapping categories; overdue records still count as active"""
        stats = compute_dashboard_stats(three, TODAY)

        assert stats.active == 3
        assert stats.due_soon == 1
        assert stats.overdue == 1
        assert stats.total == 3

    def test_active_current_due_soon_overdue(self, make_delegation):
        """Test rescinded records drop out of every derived count"""
        delegations = [
            make_delegation(end_date=date(2024, 3, 31)),
            make_delegation(end_date=date(2024, 1, 10)),
            make_delegation(start_date=date(2023, 10, 1), end_date=date(2023, 12, 20),
                            status=DelegationStatus.RESCINDED),
        ]
        stats = compute_dashboard_stats(delegations, TODAY)

        assert stats.active == 2
        assert stats.due_soon == 1
        assert stats.overdue == 0
        assert stats.unsigned == 2
        assert stats.total == 3

    def test_supervision_due_includes_past_due(self, make_delegation):
        delegations = [
            make_delegation(supervision_due_date=date(2023, 12, 1)),
            make_delegation(supervision_due_date=date(2024, 1, 8)),
            make_delegation(supervision_due_date=date(2024, 1, 9)),
            make_delegation(supervision_due_date=None),
        ]
        assert compute_dashboard_stats(delegations, TODAY).supervision_due == 2

    def test_unsigned(self, make_delegation):
        delegations = [make_delegation(signatures=signed()), make_delegation()]
        assert compute_dashboard_stats(delegations, TODAY).unsigned == 1

    def test_recomputed_per_day(self, make_delegation):
        """Test the same record moves between categories as time passes"""
        delegations = [make_delegation(end_date=date(2024, 1, 20))]
        assert compute_dashboard_stats(delegations, TODAY).due_soon == 0
        assert compute_dashboard_stats(delegations, date(2024, 1, 10)).due_soon == 1
        assert compute_dashboard_stats(delegations, date(2024, 1, 21)).overdue == 1


class TestFiltering:
    """Test community and name filters"""

    @pytest.fixture
    def populated(self, registry, make_delegation):
        registry.residents.save(Resident(id="res-002", community_id="cm-02", name="Bonnie Link"))
        registry.med_techs.save(MedTech(id="mt-002", community_id="cm-02", name="Alicia Perez"))
        registry.delegations.save(make_delegation(id="dlg-a"))
        registry.delegations.save(make_delegation(id="dlg-b", task_id="glucose-monitoring"))
        registry.delegations.save(make_delegation(id="dlg-c", resident_id="res-002", med_tech_id="mt-002",
                                                  end_date=date(2024, 1, 10)))
        return registry

    def test_community_filter(self, populated):
        reporter = DelegationReporter(populated)
        assert [d.id for d in reporter.filter_delegations(DelegationFilter(community_id="cm-02"))] == ["dlg-c"]
        assert len(reporter.filter_delegations(DelegationFilter(community_id="all"))) == 3

    def test_query_matches_resident_or_med_tech(self, populated):
        reporter = DelegationReporter(populated)
        assert [d.id for d in reporter.filter_delegations(DelegationFilter(query="bonnie"))] == ["dlg-c"]
        assert [d.id for d in reporter.filter_delegations(DelegationFilter(query="LOPEZ"))] == ["dlg-a", "dlg-b"]

    def test_stats_after_filter(self, populated):
        stats = get_dashboard_stats(populated, TODAY, DelegationFilter(community_id="cm-01"))
        assert stats.total == 2
        assert stats.due_soon == 0

    def test_list_by_status(self, populated):
        reporter = DelegationReporter(populated)
        assert [d.id for d in reporter.list_by_status(StatusFilter.DUE_SOON, TODAY)] == ["dlg-c"]
        assert len(reporter.list_by_status(StatusFilter.UNSIGNED, TODAY)) == 3

    def test_grouping(self, populated):
        groups = group_by_pair(populated.delegations.list())
        assert [(g.resident_id, g.med_tech_id, len(g.delegations)) for g in groups] == [
            ("res-001", "mt-001", 2),
            ("res-002", "mt-002", 1),
        ]

    def test_resident_and_med_tech_listings(self, populated):
        reporter = DelegationReporter(populated)
        assert [r.id for r in reporter.filter_residents(DelegationFilter(community_id="cm-01"))] == ["res-001"]
        assert [m.id for m in reporter.filter_med_techs(DelegationFilter(query="ali"))] == ["mt-002"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
