import logging
from typing import Callable, Generic, Optional, Sequence

from cms.domains.content.collection import OrderedCollection, T

logger = logging.getLogger(__name__)


class ReorderController(Generic[T]):
    """Перевод действий пользователя (стрелки, drag-and-drop) в операции коллекции.

    Хранит только id перетаскиваемого элемента. Ничего не сохраняет:
    on_change вызывается, когда порядок действительно изменился.
    """

    def __init__(
        self,
        collection: OrderedCollection[T],
        on_change: Optional[Callable[[OrderedCollection[T]], None]] = None
    ):
        self.collection = collection
        self.on_change = on_change
        self.dragging_id: Optional[str] = None

    def _apply(self, updated: OrderedCollection[T]) -> bool:
        changed = updated.ids() != self.collection.ids()
        self.collection = updated
        if changed and self.on_change is not None:
            self.on_change(updated)
        return changed

    def move_up(self, item_id: str) -> bool:
        return self._apply(self.collection.move_adjacent(item_id, "up"))

    def move_down(self, item_id: str) -> bool:
        return self._apply(self.collection.move_adjacent(item_id, "down"))

    def start_drag(self, item_id: str) -> None:
        """Начало перетаскивания"""
        if item_id not in self.collection:
            logger.debug(f"Ignoring drag of unknown item {item_id}")
            self.dragging_id = None
            return
        self.dragging_id = item_id

    def cancel_drag(self) -> None:
        self.dragging_id = None

    def drop_on(self, target_id: str) -> bool:
        """Бросок на элемент: перетаскиваемый занимает его позицию"""
        dragging_id, self.dragging_id = self.dragging_id, None
        if dragging_id is None or dragging_id == target_id:
            return False

        target_index = self.collection.index_of(target_id)
        if target_index is None:
            return False
        return self._apply(self.collection.move_to(dragging_id, target_index))

    def drop_at(self, index: int) -> bool:
        """Бросок на позицию в списке"""
        dragging_id, self.dragging_id = self.dragging_id, None
        if dragging_id is None:
            return False
        return self._apply(self.collection.move_to(dragging_id, index))

    def apply_sequence(self, ids: Sequence[str]) -> bool:
        """Полный новый порядок из drag-and-drop библиотеки"""
        return self._apply(self.collection.reorder(ids))
