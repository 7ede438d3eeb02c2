"""
CareScope Registry
Community, resident and med-tech records
"""

import logging
from typing import Optional

from carescope.errors import DelegationValidationError
from carescope.schemas import (
    Community, CommunityCreate, CommunityUpdate, MedTech, MedTechCreate,
    Resident, ResidentCreate, ResidentUpdate
)
from carescope.services.clock import Clock, get_clock
from carescope.services.stores import StoreRegistry, new_id

logger = logging.getLogger(__name__)


class RegistryService:
    """Admin-side maintenance of the reference records delegations point at"""

    def __init__(self, registry: StoreRegistry, clock: Optional[Clock] = None):
        self.registry = registry
        self.clock = clock or get_clock()

    # -------------------------------------------------------------------------
    # Communities
    # -------------------------------------------------------------------------

    def add_community(self, payload: CommunityCreate) -> Community:
        name = payload.name.strip()
        if not name:
            raise DelegationValidationError(["Community name is required"])

        community = Community(
            id=new_id("cm"),
            name=name,
            admin=payload.admin,
            rn=payload.rn,
            notifications=payload.notifications,
        )
        self.registry.communities.save(community)
        logger.info(f"Added community {community.id} ({name})")
        return community

    def update_community(self, community_id: str, changes: CommunityUpdate) -> Community:
        community = self.registry.communities.get(community_id)
        update = changes.model_dump(exclude_none=True)
        if "name" in update and not update["name"].strip():
            raise DelegationValidationError(["Community name is required"])

        updated = Community.model_validate({**community.model_dump(), **update})
        self.registry.communities.save(updated)
        logger.info(f"Updated community {community_id}: {sorted(update)}")
        return updated

    def delete_community(self, community_id: str) -> None:
        """Remove a community that no resident or med-tech still points at"""
        self.registry.communities.get(community_id)
        if self.registry.residents.in_community(community_id) or self.registry.med_techs.in_community(community_id):
            raise DelegationValidationError(["Community still has residents or med-techs"])
        self.registry.communities.delete(community_id)

    # -------------------------------------------------------------------------
    # Residents
    # -------------------------------------------------------------------------

    def add_resident(self, payload: ResidentCreate) -> Resident:
        """
        Add a resident with no assessment history

        Raises:
            NotFoundError: Unknown community
            DelegationValidationError: Missing name
        """
        self.registry.communities.get(payload.community_id)
        name = payload.name.strip()
        if not name:
            raise DelegationValidationError(["Resident name is required"])

        resident = Resident(
            id=new_id("res"),
            community_id=payload.community_id,
            name=name,
            dob=payload.dob,
            unit=payload.unit,
            diagnosis=payload.diagnosis,
            regimen=payload.regimen,
        )
        self.registry.residents.save(resident)
        logger.info(f"Added resident {resident.id} to community {payload.community_id}")
        return resident

    def update_resident(self, resident_id: str, changes: ResidentUpdate) -> Resident:
        """Edit demographics; assessment history and status are left alone"""
        resident = self.registry.residents.get(resident_id)
        update = changes.model_dump(exclude_none=True)
        if "name" in update and not update["name"].strip():
            raise DelegationValidationError(["Resident name is required"])
        if "community_id" in update:
            self.registry.communities.get(update["community_id"])

        updated = resident.model_copy(update=update)
        self.registry.residents.save(updated)
        logger.info(f"Updated resident {resident_id}: {sorted(update)}")
        return updated

    # -------------------------------------------------------------------------
    # Med-Techs
    # -------------------------------------------------------------------------

    def add_med_tech(self, payload: MedTechCreate) -> MedTech:
        self.registry.communities.get(payload.community_id)
        name = payload.name.strip()
        if not name:
            raise DelegationValidationError(["Med-Tech name is required"])

        med_tech = MedTech(
            id=new_id("mt"),
            community_id=payload.community_id,
            name=name,
            hire_date=self.clock.now().date(),
            experience=payload.experience,
            training=payload.training,
            willingness=payload.willingness,
            delegation_profile=payload.delegation_profile,
        )
        self.registry.med_techs.save(med_tech)
        logger.info(f"Added med-tech {med_tech.id} to community {payload.community_id}")
        return med_tech
