from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """One database transaction spanning every repository of a use case"""

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
