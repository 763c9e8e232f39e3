"""Port interface for hazard report persistence."""

from abc import ABC, abstractmethod

from fieldservice.domain.entities.hazard import Hazard


class HazardRepository(ABC):
    @abstractmethod
    async def save(self, hazard: Hazard) -> Hazard:
        ...

    @abstractmethod
    async def get_by_id(self, hazard_id: int) -> Hazard | None:
        ...

    @abstractmethod
    async def update(self, hazard: Hazard) -> Hazard:
        ...

    @abstractmethod
    async def delete(self, hazard_id: int) -> bool:
        ...

    @abstractmethod
    async def get_all(self) -> list[Hazard]:
        ...
