"""
CareScope Resident Assessment Tracker
Append-only stability assessment history and next-due derivation
"""

import logging
from typing import List, Optional
from datetime import date

from carescope.config import settings
from carescope.errors import DelegationValidationError
from carescope.schemas import (
    Assessment, AssessmentDueStatus, AssessmentRequest, AssessmentStatus,
    AssessmentType, Resident
)
from carescope.modules.dates import add_days, days_between
from carescope.services.clock import Clock, get_clock
from carescope.services.stores import ResidentStore

logger = logging.getLogger(__name__)

AUTO_SCHEDULED_TYPES = (AssessmentType.INITIAL, AssessmentType.QUARTERLY)


# =============================================================================
# Due-Status Derivation
# =============================================================================

def next_assessment_due(resident: Resident, interval_days: Optional[int] = None) -> Optional[date]:
    """Explicit next-due date, else last assessment + interval, else None"""
    if resident.next_assessment_date:
        return resident.next_assessment_date
    if resident.last_assessment_date:
        interval = interval_days if interval_days is not None else settings.assessment_interval_days
        return add_days(resident.last_assessment_date, interval)
    return None


def assessment_due_status(
    resident: Resident,
    today: date,
    due_soon_days: Optional[int] = None,
    interval_days: Optional[int] = None
) -> AssessmentDueStatus:
    """
    Classify a resident's next assessment relative to today

    Args:
        resident: Resident to classify
        today: Reference date
        due_soon_days: Window for "due soon" (settings default)
        interval_days: Fallback interval after the last assessment (settings default)

    Returns:
        INITIAL_NEEDED, OVERDUE, DUE_SOON or CURRENT
    """
    due = next_assessment_due(resident, interval_days)
    if due is None:
        return AssessmentDueStatus.INITIAL_NEEDED

    window = due_soon_days if due_soon_days is not None else settings.assessment_due_soon_days
    remaining = days_between(today, due)
    if remaining < 0:
        return AssessmentDueStatus.OVERDUE
    if remaining <= window:
        return AssessmentDueStatus.DUE_SOON
    return AssessmentDueStatus.CURRENT


def latest_assessment(resident: Resident) -> Optional[Assessment]:
    return resident.assessments[0] if resident.assessments else None


# =============================================================================
# Assessment Tracker
# =============================================================================

class AssessmentTracker:
    """Sole writer of resident assessment history"""

    def __init__(
        self,
        residents: ResidentStore,
        clock: Optional[Clock] = None,
        interval_days: Optional[int] = None
    ):
        self.residents = residents
        self.clock = clock or get_clock()
        self.interval_days = interval_days if interval_days is not None else settings.assessment_interval_days

    def default_next_due(self, assessment_type: AssessmentType, assessed_on: date) -> Optional[date]:
        """Initial and Quarterly assessments schedule themselves; Change of Condition does not"""
        if assessment_type in AUTO_SCHEDULED_TYPES:
            return add_days(assessed_on, self.interval_days)
        return None

    def log_assessment(self, resident_id: str, request: AssessmentRequest) -> Resident:
        """
        Prepend an immutable assessment and refresh the resident's summary fields

        Args:
            resident_id: Resident being assessed
            request: Date (defaults to today), type, stability, narrative, next-due override

        Returns:
            Updated resident

        Raises:
            NotFoundError: Unknown resident
            DelegationValidationError: Change of Condition without an explicit next-due date
        """
        resident = self.residents.get(resident_id)
        today = self.clock.now().date()
        assessed_on = request.assessment_date or today

        next_due = request.next_due or self.default_next_due(request.type, assessed_on)
        errors: List[str] = []
        if next_due is None:
            errors.append(f"Next due date is required for {request.type.value} assessments")
        elif next_due < assessed_on:
            errors.append("Next due date cannot be before the assessment date")
        if errors:
            logger.warning(f"Assessment rejected for resident {resident_id}: {errors}")
            raise DelegationValidationError(errors)

        assessment = Assessment(
            assessment_date=assessed_on,
            type=request.type,
            stable=request.stable,
            notes=request.notes,
            next_due=next_due,
        )
        updated = resident.model_copy(update={
            "assessments": [assessment, *resident.assessments],
            "last_assessment_date": assessed_on,
            "next_assessment_date": next_due,
            "assessment_status": AssessmentStatus.STABLE if request.stable else AssessmentStatus.UNSTABLE,
        })
        self.residents.save(updated)

        logger.info(
            f"Logged {request.type.value} assessment for resident {resident_id}: "
            f"{updated.assessment_status.value}, next due {next_due.isoformat()}"
        )
        return updated

    def is_stable(self, resident: Resident) -> bool:
        """Most recent assessment found the resident stable"""
        latest = latest_assessment(resident)
        return latest is not None and latest.stable

    def due_status(self, resident: Resident, today: Optional[date] = None) -> AssessmentDueStatus:
        return assessment_due_status(
            resident,
            today or self.clock.now().date(),
            interval_days=self.interval_days,
        )


# =============================================================================
# Public API
# =============================================================================

def log_resident_assessment(
    residents: ResidentStore,
    resident_id: str,
    request: AssessmentRequest,
    clock: Optional[Clock] = None
) -> Resident:
    """Record a resident assessment"""
    tracker = AssessmentTracker(residents, clock=clock)
    return tracker.log_assessment(resident_id, request)
