"""
Unit tests for the resident assessment tracker
"""

import pytest
from datetime import date

from carescope.errors import DelegationValidationError, NotFoundError
from carescope.schemas import (
    AssessmentDueStatus, AssessmentRequest, AssessmentStatus, AssessmentType, Resident
)
from carescope.modules.assessments import (
    AssessmentTracker, assessment_due_status, next_assessment_due
)


class TestLogAssessment:
    """Test assessment logging"""

    @pytest.fixture
    def tracker(self, registry, clock):
        return AssessmentTracker(registry.residents, clock=clock)

    def test_quarterly_auto_next_due(self, tracker):
        """Test Quarterly defaults next-due to 90 days out"""
        resident = tracker.log_assessment("res-001", AssessmentRequest(
            assessment_date=date(2024, 1, 1), type=AssessmentType.QUARTERLY, stable=True, notes="No events"
        ))

        assert resident.assessments[0].next_due == date(2024, 3, 31)
        assert resident.next_assessment_date == date(2024, 3, 31)
        assert resident.last_assessment_date == date(2024, 1, 1)
        assert resident.assessment_status == AssessmentStatus.STABLE

    def test_prepends_newest_first(self, tracker, registry):
        tracker.log_assessment("res-001", AssessmentRequest(type=AssessmentType.QUARTERLY, stable=False))
        stored = registry.residents.get("res-001")

        assert len(stored.assessments) == 2
        assert stored.assessments[0].assessment_date == date(2024, 1, 1)
        assert stored.assessments[1].assessment_date == date(2023, 11, 9)
        assert stored.assessment_status == AssessmentStatus.UNSTABLE

    def test_status_tracks_latest(self, tracker):
        tracker.log_assessment("res-001", AssessmentRequest(stable=False))
        resident = tracker.log_assessment("res-001", AssessmentRequest(stable=True))
        assert resident.assessment_status == AssessmentStatus.STABLE
        assert tracker.is_stable(resident)

    def test_change_of_condition_needs_next_due(self, tracker, registry):
        with pytest.raises(DelegationValidationError) as exc_info:
            tracker.log_assessment("res-001", AssessmentRequest(type=AssessmentType.CHANGE_OF_CONDITION, stable=False))

        assert exc_info.value.errors == ["Next due date is required for Change of Condition assessments"]
        assert len(registry.residents.get("res-001").assessments) == 1

    def test_change_of_condition_explicit_next_due(self, tracker):
        resident = tracker.log_assessment("res-001", AssessmentRequest(
            type=AssessmentType.CHANGE_OF_CONDITION, stable=False, next_due=date(2024, 1, 15)
        ))
        assert resident.next_assessment_date == date(2024, 1, 15)

    def test_explicit_override_wins(self, tracker):
        resident = tracker.log_assessment("res-001", AssessmentRequest(
            type=AssessmentType.INITIAL, next_due=date(2024, 2, 1)
        ))
        assert resident.next_assessment_date == date(2024, 2, 1)

    def test_unknown_resident(self, tracker):
        with pytest.raises(NotFoundError):
            tracker.log_assessment("res-missing", AssessmentRequest())


class TestDueStatus:
    """Test next-assessment derivation"""

    def make(self, **kwargs):
        return Resident(id="res-x", community_id="cm-01", name="Test Resident", **kwargs)

    def test_initial_needed(self):
        assert assessment_due_status(self.make(), date(2024, 1, 1)) == AssessmentDueStatus.INITIAL_NEEDED

    def test_fallback_from_last_assessment(self):
        resident = self.make(last_assessment_date=date(2023, 11, 9))
        assert next_assessment_due(resident) == date(2024, 2, 7)
        assert assessment_due_status(resident, date(2024, 1, 1)) == AssessmentDueStatus.CURRENT

    def test_explicit_date_preferred(self):
        resident = self.make(last_assessment_date=date(2023, 11, 9), next_assessment_date=date(2024, 1, 5))
        assert assessment_due_status(resident, date(2024, 1, 1)) == AssessmentDueStatus.DUE_SOON

    def test_overdue(self):
        resident = self.make(next_assessment_date=date(2023, 12, 31))
        assert assessment_due_status(resident, date(2024, 1, 1)) == AssessmentDueStatus.OVERDUE

    def test_due_soon_boundary(self):
        assert assessment_due_status(self.make(next_assessment_date=date(2024, 1, 15)), date(2024, 1, 1)) == AssessmentDueStatus.DUE_SOON
        assert assessment_due_status(self.make(next_assessment_date=date(2024, 1, 16)), date(2024, 1, 1)) == AssessmentDueStatus.CURRENT


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
