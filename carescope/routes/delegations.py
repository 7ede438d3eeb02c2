"""
CareScope - Delegation API Routes
Lifecycle operations, filtered listings and the printable packet
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse

from carescope.schemas import (
    CreateDelegationRequest, CreateDelegationResult, DelegationFilter,
    DelegationGroup, DelegationPacket, DelegationView, ReauthorizeRequest,
    RescindRequest, SignatureRequest, StatusFilter, SupervisionRequest
)
from carescope.modules.lifecycle import DelegationLifecycleEngine, create_delegations, describe_delegation
from carescope.modules.reporting import DelegationReporter
from carescope.modules.documents import build_delegation_packet, render_packet_markdown
from carescope.services.clock import Clock, get_clock
from carescope.services.signatures import PrecapturedSignatures
from carescope.services.stores import StoreRegistry, get_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/delegations", tags=["Delegations"])


@router.get("", response_model=List[DelegationView])
async def list_delegations(
    status_filter: StatusFilter = Query(StatusFilter.ALL, alias="status"),
    community_id: Optional[str] = Query(None, description="Community id, or 'all'"),
    q: str = Query("", description="Resident or med-tech name search"),
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """
    List delegations with their derived status

    Status filters: all, active, dueSoon, overdue, supervisionDue, unsigned.
    """
    today = clock.now().date()
    delegations = DelegationReporter(registry).list_by_status(
        status_filter, today, DelegationFilter(community_id=community_id, query=q)
    )
    return [describe_delegation(d, today) for d in delegations]


@router.get("/groups", response_model=List[DelegationGroup])
async def list_delegation_groups(
    status_filter: StatusFilter = Query(StatusFilter.ALL, alias="status"),
    community_id: Optional[str] = Query(None),
    q: str = Query(""),
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Delegations grouped by resident and med-tech"""
    return DelegationReporter(registry).grouped(
        clock.now().date(), status_filter, DelegationFilter(community_id=community_id, query=q)
    )


@router.post("", response_model=CreateDelegationResult, status_code=status.HTTP_201_CREATED)
async def submit_delegations(
    request: CreateDelegationRequest,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """
    Create one delegation per selected task

    Returns 422 with every violation when any required input is missing.
    """
    return create_delegations(registry, request, clock)


@router.get("/{delegation_id}", response_model=DelegationView)
async def get_delegation(
    delegation_id: str,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Get one delegation with its derived status"""
    return describe_delegation(registry.delegations.get(delegation_id), clock.now().date())


@router.post("/{delegation_id}/reauthorize", response_model=DelegationView)
async def reauthorize_delegation(
    delegation_id: str,
    request: ReauthorizeRequest,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Extend an active delegation from today"""
    delegation = DelegationLifecycleEngine(registry, clock).reauthorize(delegation_id, request)
    return describe_delegation(delegation, clock.now().date())


@router.post("/{delegation_id}/rescind", response_model=DelegationView)
async def rescind_delegation(
    delegation_id: str,
    request: RescindRequest,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Rescind a delegation (terminal)"""
    delegation = DelegationLifecycleEngine(registry, clock).rescind(delegation_id, request.reason)
    return describe_delegation(delegation, clock.now().date())


@router.post("/{delegation_id}/supervision", response_model=DelegationView)
async def log_supervision(
    delegation_id: str,
    request: SupervisionRequest,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Log a personal observation"""
    delegation = DelegationLifecycleEngine(registry, clock).log_supervision(delegation_id, request.methods)
    return describe_delegation(delegation, clock.now().date())


@router.post("/{delegation_id}/signatures", response_model=DelegationView)
async def record_signatures(
    delegation_id: str,
    request: SignatureRequest,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Record the RN and med-tech signatures with one shared timestamp"""
    capture = PrecapturedSignatures({"rn": request.rn_signature, "mt": request.mt_signature})
    delegation = DelegationLifecycleEngine(registry, clock).capture_signatures(
        delegation_id, request.rn_name, request.mt_name, capture
    )
    return describe_delegation(delegation, clock.now().date())


@router.get("/{delegation_id}/packet", response_model=DelegationPacket)
async def get_packet(delegation_id: str, registry: StoreRegistry = Depends(get_registry)):
    """Printable delegation packet"""
    return build_delegation_packet(registry, delegation_id)


@router.get("/{delegation_id}/packet.md", response_class=PlainTextResponse)
async def get_packet_markdown(delegation_id: str, registry: StoreRegistry = Depends(get_registry)):
    """Delegation packet rendered as Markdown"""
    return render_packet_markdown(build_delegation_packet(registry, delegation_id))
