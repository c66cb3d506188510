from collections import Counter
from typing import Any, Dict, Generic, Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar, Union

from pydantic import BaseModel

from cms.domains.content.errors import DuplicateItemError, InvalidPermutationError, ItemNotFoundError

T = TypeVar("T", bound=BaseModel)

DIRECTIONS = ("up", "down")

# Поля, которые нельзя менять через update_by_id
_PROTECTED_FIELDS = ("id", "order")


def renumber(items: Sequence[T], base: int = 0, mirror: Sequence[str] = ()) -> List[T]:
    """Пересчет order по позиции: order = base + index.

    Единственное место, где вычисляется order. Поля из mirror получают
    то же значение (шаги how-it-works хранят номер шага в поле step).
    """
    result = []
    for index, item in enumerate(items):
        position = base + index
        update = {
            name: position
            for name in ("order", *mirror)
            if getattr(item, name) != position
        }
        result.append(item.model_copy(update=update) if update else item)
    return result


class OrderedCollection(Generic[T]):
    """Неизменяемая упорядоченная коллекция элементов с уникальными id.

    Каждая операция возвращает новую коллекцию с пересчитанным order.
    """

    def __init__(self, items: Iterable[T] = (), base: int = 0, mirror: Sequence[str] = ()):
        self._items: Tuple[T, ...] = tuple(items)
        self.base = base
        self.mirror = tuple(mirror)

        seen = set()
        for item in self._items:
            if item.id in seen:
                raise DuplicateItemError(item.id)
            seen.add(item.id)

    @classmethod
    def from_stored(cls, items: Iterable[T], base: int = 0, mirror: Sequence[str] = ()) -> "OrderedCollection[T]":
        """Коллекция из загруженных документов: сортировка по order и пересчет"""
        ordered = sorted(items, key=lambda item: item.order)
        return cls(renumber(ordered, base, mirror), base, mirror)

    def _derive(self, items: Sequence[T]) -> "OrderedCollection[T]":
        return OrderedCollection(renumber(items, self.base, self.mirror), self.base, self.mirror)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __contains__(self, item_id: object) -> bool:
        return self.index_of(item_id) is not None

    def __eq__(self, other) -> bool:
        if not isinstance(other, OrderedCollection):
            return NotImplemented
        return self._items == other._items and self.base == other.base

    def __repr__(self) -> str:
        return f"OrderedCollection(ids={self.ids()}, base={self.base})"

    def ids(self) -> List[str]:
        return [item.id for item in self._items]

    def to_list(self) -> List[T]:
        return list(self._items)

    def index_of(self, item_id: object) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        return None

    def get(self, item_id: str) -> Optional[T]:
        index = self.index_of(item_id)
        return self._items[index] if index is not None else None

    def append(self, item: T) -> "OrderedCollection[T]":
        """Добавление в конец, order = длина коллекции до вставки"""
        if item.id in self:
            raise DuplicateItemError(item.id)
        return self._derive([*self._items, item])

    def update_by_id(self, item_id: str, patch: Dict[str, Any]) -> "OrderedCollection[T]":
        """Замена элемента копией с наложенным patch (id и order не меняются)"""
        index = self.index_of(item_id)
        if index is None:
            raise ItemNotFoundError(item_id)

        ignored = (*_PROTECTED_FIELDS, *self.mirror)
        clean = {key: value for key, value in patch.items() if key not in ignored}
        current = self._items[index]
        # Повторная валидация, чтобы patch не обходил схему
        updated = type(current).model_validate({**current.model_dump(), **clean})

        items = list(self._items)
        items[index] = updated
        return self._derive(items)

    def remove_by_id(self, item_id: str) -> "OrderedCollection[T]":
        """Удаление с пересчетом; отсутствующий id игнорируется"""
        if item_id not in self:
            return self
        return self._derive([item for item in self._items if item.id != item_id])

    def reorder(self, sequence: Sequence[Union[str, T]]) -> "OrderedCollection[T]":
        """Новый порядок по полной перестановке id (или элементов)"""
        new_ids = [entry if isinstance(entry, str) else entry.id for entry in sequence]

        current = set(self.ids())
        counts = Counter(new_ids)
        duplicates = [item_id for item_id, count in counts.items() if count > 1]
        missing = current - counts.keys()
        unexpected = counts.keys() - current
        if duplicates or missing or unexpected:
            raise InvalidPermutationError(missing=missing, unexpected=unexpected, duplicates=duplicates)

        by_id = {item.id: item for item in self._items}
        return self._derive([by_id[item_id] for item_id in new_ids])

    def move_adjacent(self, item_id: str, direction: str) -> "OrderedCollection[T]":
        """Обмен с соседом сверху или снизу; на границе ничего не меняется"""
        if direction not in DIRECTIONS:
            raise ValueError(f"Invalid direction: {direction}")

        index = self.index_of(item_id)
        if index is None:
            return self
        target = index - 1 if direction == "up" else index + 1
        if target < 0 or target >= len(self._items):
            return self

        items = list(self._items)
        items[index], items[target] = items[target], items[index]
        return self._derive(items)

    def move_to(self, item_id: str, index: int) -> "OrderedCollection[T]":
        """Перенос элемента на позицию index (с ограничением по границам)"""
        current = self.index_of(item_id)
        if current is None:
            return self

        items = list(self._items)
        item = items.pop(current)
        index = max(0, min(index, len(items)))
        items.insert(index, item)
        return self._derive(items)
