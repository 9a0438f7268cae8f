# src/kubesnap/collectors/base_collector.py
"""
Abstract base class for collectors. Collectors share one async entry point
and an explicit close so callers can manage them interchangeably.
"""

from abc import ABC, abstractmethod
from typing import Any, List


class BaseCollector(ABC):
    """
    Abstract Base Class for all metric collectors.
    """

    @abstractmethod
    async def collect(self) -> List[Any]:
        """
        Fetch data from the collector's source and return a list of
        Pydantic models.
        """
        pass

    async def close(self):
        """
        Clean up resources (e.g., close API clients).
        """
        pass
