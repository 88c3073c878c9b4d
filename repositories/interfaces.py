"""
Abstract repository interfaces for data access.

These interfaces define the contracts implemented by concrete repositories.
Write methods take an optional open connection (`conn`) so a service can
group writes from several repositories into one atomic_transaction().
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from domain.models.match import MatchRecord
from domain.models.player import PlayerRating


class IPlayerRepository(ABC):
    @abstractmethod
    def add(self, name: str, rating: float) -> None: ...

    @abstractmethod
    def get(self, name: str) -> PlayerRating | None: ...

    @abstractmethod
    def get_many(self, names: list[str], conn=None) -> dict[str, PlayerRating]: ...

    @abstractmethod
    def get_all(self) -> list[PlayerRating]: ...

    @abstractmethod
    def exists(self, name: str) -> bool: ...

    @abstractmethod
    def set_rating(self, name: str, rating: float) -> None: ...

    @abstractmethod
    def apply_match_result(
        self, name: str, rating_change: int, outcome: str, initial_rating: float, conn=None
    ) -> None: ...

    @abstractmethod
    def delete(self, name: str) -> bool: ...

    @abstractmethod
    def delete_all(self) -> int: ...

    @abstractmethod
    def replace_all(self, ratings: list[PlayerRating], conn=None) -> None: ...


class IMatchRepository(ABC):
    @abstractmethod
    def atomic_transaction(self): ...

    @abstractmethod
    def record_match(self, record: MatchRecord, conn=None) -> int: ...

    @abstractmethod
    def get(self, match_id: int) -> MatchRecord | None: ...

    @abstractmethod
    def get_all(self, newest_first: bool = True) -> list[MatchRecord]: ...

    @abstractmethod
    def delete(self, match_id: int) -> bool: ...

    @abstractmethod
    def delete_all(self) -> int: ...

    @abstractmethod
    def replace_all(self, records: list[MatchRecord], conn=None) -> None: ...


class ISettingsRepository(ABC):
    @abstractmethod
    def get_handicap_coefficient(self, conn=None) -> float: ...

    @abstractmethod
    def set_handicap_coefficient(self, value: float, conn=None) -> None: ...

    @abstractmethod
    def update_handicap_coefficient(
        self, update: Callable[[float], float], conn=None
    ) -> tuple[float, float]: ...

    @abstractmethod
    def compare_and_set_handicap_coefficient(self, expected: float, new_value: float) -> bool: ...
