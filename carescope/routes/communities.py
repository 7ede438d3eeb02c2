"""
CareScope - Community API Routes
Facility records and their designated RN
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, status

from carescope.schemas import Community, CommunityCreate, CommunityUpdate
from carescope.modules.registry import RegistryService
from carescope.services.clock import Clock, get_clock
from carescope.services.stores import StoreRegistry, get_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/communities", tags=["Communities"])


@router.get("", response_model=List[Community])
async def list_communities(registry: StoreRegistry = Depends(get_registry)):
    """List all communities"""
    return registry.communities.list()


@router.post("", response_model=Community, status_code=status.HTTP_201_CREATED)
async def add_community(
    payload: CommunityCreate,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Add a community"""
    return RegistryService(registry, clock).add_community(payload)


@router.get("/{community_id}", response_model=Community)
async def get_community(community_id: str, registry: StoreRegistry = Depends(get_registry)):
    """Get one community"""
    return registry.communities.get(community_id)


@router.patch("/{community_id}", response_model=Community)
async def update_community(
    community_id: str,
    changes: CommunityUpdate,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Update community name or contacts"""
    return RegistryService(registry, clock).update_community(community_id, changes)


@router.delete("/{community_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_community(
    community_id: str,
    registry: StoreRegistry = Depends(get_registry),
    clock: Clock = Depends(get_clock)
):
    """Delete a community with no residents or med-techs"""
    RegistryService(registry, clock).delete_community(community_id)
