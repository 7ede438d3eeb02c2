"""
CareScope - Med-Tech API Routes
Delegate records, training transcripts and supervision visits
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import PlainTextResponse

from carescope.schemas import (
    DelegationFilter, JustificationFields, MedTech, MedTechCreate,
    MedTechSupervisionRequest, TrainingLogRequest, TrainingTranscriptReport
)
from carescope.modules.documents import build_training_transcript, render_transcript_markdown
from carescope.modules.registry import RegistryService
from carescope.modules.reporting import DelegationReporter
from carescope.modules.workforce import WorkforceService
from carescope.services.catalog import DIABETIC_TRAINING_CONTENT
from carescope.services.clock import Clock, get_clock
from carescope.services.stores import StoreRegistry, get_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/med-techs", tags=["Med-Techs"])


@router.get("", response_model=List[MedTech])
async def list_med_techs(
    community_id: Optional[str] = Query(None, description="Community id, or 'all'"),
    q: str = Query("", description="Case-insensitive name search"),
    registry: StoreRegistry = Depends(get_registry)
):
    """List med-techs, optionally filtered"""
    return DelegationReporter(registry).filter_med_techs(DelegationFilter(community_id=community_id, query=q))


@router.post("", response_model=MedTech, status_code=status.HTTP_201_CREATED)
async def add_med_tech(
    payload: MedTechCreate,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Add a med-tech; hire date is today"""
    return RegistryService(registry, clock).add_med_tech(payload)


@router.get("/training-content", response_class=PlainTextResponse)
async def get_training_content():
    """Diabetic training handout"""
    return DIABETIC_TRAINING_CONTENT


@router.post("/training", response_model=List[MedTech])
async def log_training(
    request: TrainingLogRequest,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Log one training session for one or more med-techs"""
    return WorkforceService(registry.med_techs, clock).log_training(request)


@router.get("/{med_tech_id}", response_model=MedTech)
async def get_med_tech(med_tech_id: str, registry: StoreRegistry = Depends(get_registry)):
    """Get one med-tech"""
    return registry.med_techs.get(med_tech_id)


@router.post("/{med_tech_id}/supervision", response_model=MedTech)
async def record_supervision(
    med_tech_id: str,
    request: MedTechSupervisionRequest,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Record an RN supervision visit"""
    return WorkforceService(registry.med_techs, clock).record_supervision(med_tech_id, request)


@router.post("/{med_tech_id}/justification-prefill", response_model=JustificationFields)
async def prefill_justification(
    med_tech_id: str,
    fields: Optional[JustificationFields] = Body(None),
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Fill blank justification fields from the med-tech's delegation profile"""
    return WorkforceService(registry.med_techs, clock).prefill_justification(med_tech_id, fields)


@router.get("/{med_tech_id}/transcript", response_model=TrainingTranscriptReport)
async def get_transcript(med_tech_id: str, registry: StoreRegistry = Depends(get_registry)):
    """Training transcript, newest first"""
    return build_training_transcript(registry, med_tech_id)


@router.get("/{med_tech_id}/transcript.md", response_class=PlainTextResponse)
async def get_transcript_markdown(med_tech_id: str, registry: StoreRegistry = Depends(get_registry)):
    """Training transcript rendered as Markdown"""
    return render_transcript_markdown(build_training_transcript(registry, med_tech_id))
