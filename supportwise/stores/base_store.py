from abc import ABC, abstractmethod


class BaseStore(ABC):
    """Collaborator with an explicit lifecycle: opened per process (or per test) and closed after."""

    connected: bool = False

    @abstractmethod
    async def connect(self):
        pass

    @abstractmethod
    async def disconnect(self):
        pass
