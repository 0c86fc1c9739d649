from abc import ABC, abstractmethod

from domain.models.swap import RateEntry


class RateSource(ABC):
    """An upstream provider of swap rates, unaware of caching.

    ``get_rate`` returns None when the source has no rate for the code and
    raises SourceUnavailableError when the source itself cannot be reached.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    async def get_rate(self, code: str) -> RateEntry | None:
        ...

    async def close(self) -> None:
        return None
