"""Port interface for user persistence."""

from abc import ABC, abstractmethod

from fieldservice.domain.entities.user import User


class UserRepository(ABC):
    @abstractmethod
    async def save(self, user: User) -> User:
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        ...

    @abstractmethod
    async def update(self, user: User) -> User:
        """Persist profile changes. Raises NotFoundError if the user is gone."""
        ...

    @abstractmethod
    async def get_all(self) -> list[User]:
        ...
