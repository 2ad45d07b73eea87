"""
Order Service event channel interfaces.
"""

from abc import ABC, abstractmethod
from typing import Optional


class EventPublisher(ABC):
    """Abstract base class for message channel publishers"""

    @abstractmethod
    async def send(self, topic: str, payload: str, key: Optional[str] = None) -> None:
        """Hand a serialized event to the channel; raise on failure"""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Report whether the channel is reachable"""
        pass
