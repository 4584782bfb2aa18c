from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, computed_field

T = TypeVar("T")


@dataclass(frozen=True)
class Sort:
    """Сортировка по одному полю"""
    field: str
    descending: bool = False


@dataclass(frozen=True)
class PageRequest:
    """Запрос страницы; страницы нумеруются с нуля"""
    page: int = 0
    size: int = 20
    sort: Optional[Sort] = None

    def __post_init__(self):
        if self.page < 0:
            raise ValueError("Page index must not be negative")
        if self.size < 1:
            raise ValueError("Page size must be positive")

    @property
    def offset(self) -> int:
        return self.page * self.size

    def with_sort(self, sort: Sort) -> "PageRequest":
        """Тот же номер и размер страницы с другой сортировкой"""
        return replace(self, sort=sort)


class Page(BaseModel, Generic[T]):
    """Страница результатов.

    Общее количество записей не считается: has_next определяется выборкой
    size + 1 строк, так что страница всегда стоит ровно один запрос.
    """
    content: List[T]
    page: int
    size: int
    has_next: bool

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @computed_field
    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @computed_field
    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @classmethod
    def from_rows(cls, rows: List[Any], page_request: PageRequest) -> "Page":
        """Сборка страницы из выборки с лимитом size + 1"""
        return cls(
            content=list(rows[:page_request.size]),
            page=page_request.page,
            size=page_request.size,
            has_next=len(rows) > page_request.size,
        )

    def map(self, mapper: Callable[[Any], Any]) -> "Page":
        return Page(
            content=[mapper(item) for item in self.content],
            page=self.page,
            size=self.size,
            has_next=self.has_next,
        )
