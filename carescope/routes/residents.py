"""
CareScope - Resident API Routes
Resident records, RN assessments and assessment reports
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse

from carescope.schemas import (
    AssessmentReport, AssessmentRequest, DelegationFilter, Resident,
    ResidentCreate, ResidentUpdate
)
from carescope.modules.assessments import AssessmentTracker, log_resident_assessment, next_assessment_due
from carescope.modules.documents import build_assessment_report, render_assessment_markdown
from carescope.modules.registry import RegistryService
from carescope.modules.reporting import DelegationReporter
from carescope.services.clock import Clock, get_clock
from carescope.services.stores import StoreRegistry, get_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/residents", tags=["Residents"])


@router.get("", response_model=List[Resident])
async def list_residents(
    community_id: Optional[str] = Query(None, description="Community id, or 'all'"),
    q: str = Query("", description="Case-insensitive name search"),
    registry: StoreRegistry = Depends(get_registry)
):
    """List residents, optionally filtered"""
    return DelegationReporter(registry).filter_residents(DelegationFilter(community_id=community_id, query=q))


@router.post("", response_model=Resident, status_code=status.HTTP_201_CREATED)
async def add_resident(
    payload: ResidentCreate,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Add a resident (assessment status starts as Pending)"""
    return RegistryService(registry, clock).add_resident(payload)


@router.get("/{resident_id}", response_model=Resident)
async def get_resident(resident_id: str, registry: StoreRegistry = Depends(get_registry)):
    """Get one resident with assessment history"""
    return registry.residents.get(resident_id)


@router.patch("/{resident_id}", response_model=Resident)
async def update_resident(
    resident_id: str,
    changes: ResidentUpdate,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Edit resident demographics"""
    return RegistryService(registry, clock).update_resident(resident_id, changes)


@router.post("/{resident_id}/assessments", response_model=Resident, status_code=status.HTTP_201_CREATED)
async def log_assessment(
    resident_id: str,
    request: AssessmentRequest,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """
    Log an RN assessment

    Initial and Quarterly assessments default their next-due date to 90 days
    out; Change of Condition requires an explicit next-due date.
    """
    return log_resident_assessment(registry.residents, resident_id, request, clock)


@router.get("/{resident_id}/assessment-status")
async def get_assessment_status(
    resident_id: str,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Next assessment due date and due status"""
    resident = registry.residents.get(resident_id)
    tracker = AssessmentTracker(registry.residents, clock=clock)
    due = next_assessment_due(resident, tracker.interval_days)
    return {
        "resident_id": resident_id,
        "assessment_status": resident.assessment_status,
        "next_due": due.isoformat() if due else None,
        "due_status": tracker.due_status(resident),
    }


@router.get("/{resident_id}/assessments/{index}/report", response_model=AssessmentReport)
async def get_assessment_report(resident_id: str, index: int, registry: StoreRegistry = Depends(get_registry)):
    """Printable report for one assessment (0 = most recent)"""
    return build_assessment_report(registry, resident_id, index)


@router.get("/{resident_id}/assessments/{index}/report.md", response_class=PlainTextResponse)
async def get_assessment_report_markdown(resident_id: str, index: int, registry: StoreRegistry = Depends(get_registry)):
    """Assessment report rendered as Markdown"""
    return render_assessment_markdown(build_assessment_report(registry, resident_id, index))
