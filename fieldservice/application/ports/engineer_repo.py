"""Port interface for engineer persistence."""

from abc import ABC, abstractmethod

from fieldservice.domain.entities.engineer import Engineer
from fieldservice.domain.value_objects.enums import Specialization


class EngineerRepository(ABC):
    @abstractmethod
    async def save(self, engineer: Engineer) -> Engineer:
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Engineer | None:
        ...

    @abstractmethod
    async def list_available(
        self, weekday: str, specialization: Specialization | None = None
    ) -> list[Engineer]:
        """Approved engineers whose availability includes *weekday*."""
        ...

    @abstractmethod
    async def update(self, engineer: Engineer) -> Engineer:
        """Persist workload/profile changes guarded by engineer.version.

        Raises StaleRecordError if the stored version moved on.
        """
        ...

    @abstractmethod
    async def get_all(self) -> list[Engineer]:
        ...

    @abstractmethod
    async def list_by_approval(self, approved: bool) -> list[Engineer]:
        ...
