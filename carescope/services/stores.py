"""
CareScope Repositories
In-memory, insertion-ordered stores for communities, residents, med-techs and delegations
"""

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Callable, Dict, Generic, Iterator, List, Optional, TypeVar

from pydantic import BaseModel

from carescope.errors import NotFoundError
from carescope.schemas import Community, Delegation, MedTech, Resident

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def new_id(prefix: str) -> str:
    """Generate a prefixed identifier, e.g. 'dlg-3f9a0c1b2d4e'"""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


# =============================================================================
# Store Interface
# =============================================================================

class EntityStore(ABC, Generic[T]):
    """CRUD-by-identifier capability the engines depend on"""

    entity_name = "Entity"

    @abstractmethod
    def find(self, entity_id: str) -> Optional[T]:
        """Return the entity or None"""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Insert or replace by id"""

    @abstractmethod
    def delete(self, entity_id: str) -> None:
        """Remove by id; raises NotFoundError when absent"""

    @abstractmethod
    def list(self) -> List[T]:
        """All entities in insertion order"""

    def get(self, entity_id: str) -> T:
        """
        Return the entity with the given id

        Raises:
            NotFoundError: No such entity
        """
        entity = self.find(entity_id) if entity_id else None
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)
        return entity

    def filter(self, predicate: Callable[[T], bool]) -> List[T]:
        return [entity for entity in self.list() if predicate(entity)]

    def __contains__(self, entity_id: str) -> bool:
        return self.find(entity_id) is not None

    def __iter__(self) -> Iterator[T]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self.list())


class InMemoryStore(EntityStore[T]):
    """Dict-backed store; replacing an entity keeps its original position"""

    def __init__(self, entities: Optional[List[T]] = None):
        self._items: Dict[str, T] = {}
        for entity in entities or []:
            self.save(entity)

    def find(self, entity_id: str) -> Optional[T]:
        return self._items.get(entity_id)

    def save(self, entity: T) -> T:
        self._items[entity.id] = entity
        return entity

    def delete(self, entity_id: str) -> None:
        if entity_id not in self._items:
            raise NotFoundError(self.entity_name, entity_id)
        del self._items[entity_id]
        logger.info(f"Deleted {self.entity_name} {entity_id}")

    def list(self) -> List[T]:
        return list(self._items.values())


# =============================================================================
# Concrete Stores
# =============================================================================

class CommunityStore(InMemoryStore[Community]):
    entity_name = "Community"


class ResidentStore(InMemoryStore[Resident]):
    entity_name = "Resident"

    def in_community(self, community_id: str) -> List[Resident]:
        return self.filter(lambda r: r.community_id == community_id)


class MedTechStore(InMemoryStore[MedTech]):
    entity_name = "MedTech"

    def in_community(self, community_id: str) -> List[MedTech]:
        return self.filter(lambda m: m.community_id == community_id)


class DelegationStore(InMemoryStore[Delegation]):
    entity_name = "Delegation"


class StoreRegistry:
    """Bundle of the four repositories one application instance owns"""

    def __init__(
        self,
        communities: Optional[CommunityStore] = None,
        residents: Optional[ResidentStore] = None,
        med_techs: Optional[MedTechStore] = None,
        delegations: Optional[DelegationStore] = None
    ):
        self.communities = communities if communities is not None else CommunityStore()
        self.residents = residents if residents is not None else ResidentStore()
        self.med_techs = med_techs if med_techs is not None else MedTechStore()
        self.delegations = delegations if delegations is not None else DelegationStore()

    def community_for_resident(self, resident: Resident) -> Optional[Community]:
        return self.communities.find(resident.community_id)


# =============================================================================
# Singleton Instance
# =============================================================================

_registry: Optional[StoreRegistry] = None


def get_registry() -> StoreRegistry:
    """Get or create the process-wide registry"""
    global _registry
    if _registry is None:
        _registry = StoreRegistry()
        logger.info("Store registry initialized")
    return _registry
