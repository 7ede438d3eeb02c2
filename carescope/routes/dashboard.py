"""
CareScope - Dashboard API Routes
Summary counts and task catalog
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from carescope.schemas import DashboardStats, DelegationFilter, DelegationTask, TaskPacketTemplate
from carescope.modules.reporting import get_dashboard_stats
from carescope.services import catalog
from carescope.services.clock import Clock, get_clock
from carescope.services.stores import StoreRegistry, get_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Dashboard"])


@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(
    community_id: Optional[str] = Query(None, description="Community id, or 'all'"),
    q: str = Query("", description="Resident or med-tech name search"),
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Active, due-soon, overdue, supervision-due and unsigned counts"""
    return get_dashboard_stats(registry, clock.now().date(), DelegationFilter(community_id=community_id, query=q))


@router.get("/tasks", response_model=List[DelegationTask])
async def list_tasks():
    """Delegable task catalog"""
    return catalog.list_tasks()


@router.get("/tasks/{task_id}/packet", response_model=TaskPacketTemplate)
async def get_task_packet(task_id: str):
    """Procedure packet template for a task"""
    task = catalog.get_task(task_id)
    return catalog.get_packet_template(task_id) or TaskPacketTemplate(title=task.label)
