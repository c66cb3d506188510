from typing import Iterable, Optional


class ContentError(Exception):
    """Базовая ошибка домена контента"""


class ItemNotFoundError(ContentError, KeyError):
    """Элемент с указанным id отсутствует в коллекции"""

    def __init__(self, item_id: str):
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"Item not found: {self.item_id}"


class DuplicateItemError(ContentError, ValueError):
    """Элемент с таким id уже есть в коллекции"""

    def __init__(self, item_id: str):
        super().__init__(f"Duplicate item id: {item_id}")
        self.item_id = item_id


class InvalidPermutationError(ContentError, ValueError):
    """Новая последовательность не является перестановкой исходной"""

    def __init__(self, missing: Iterable[str] = (), unexpected: Iterable[str] = (), duplicates: Iterable[str] = ()):
        self.missing = sorted(missing)
        self.unexpected = sorted(unexpected)
        self.duplicates = sorted(duplicates)
        parts = []
        if self.missing:
            parts.append(f"missing ids: {', '.join(self.missing)}")
        if self.unexpected:
            parts.append(f"unknown ids: {', '.join(self.unexpected)}")
        if self.duplicates:
            parts.append(f"duplicate ids: {', '.join(self.duplicates)}")
        super().__init__("Invalid reorder sequence: " + "; ".join(parts or ["mismatch"]))


class StoreError(ContentError):
    """Хранилище документов недоступно или запись не удалась"""


class BulkSaveError(ContentError):
    """Массовое сохранение прервано; уже записанные документы не откатываются"""

    def __init__(self, written: int, failed_id: Optional[str], cause: Optional[BaseException] = None):
        super().__init__(f"Bulk save stopped after {written} documents (failed on {failed_id})")
        self.written = written
        self.failed_id = failed_id
        self.cause = cause


class CollectionNotEmptyError(ContentError):
    """Начальное заполнение разрешено только для пустой коллекции"""

    def __init__(self, path: str, count: int):
        super().__init__(f"Collection {path} already has {count} documents")
        self.path = path
        self.count = count


class SaveInProgressError(ContentError):
    """Сохранение уже выполняется"""


class InvalidPayloadError(ContentError, ValueError):
    """Тело запроса не прошло проверку; сообщение уходит клиенту как есть"""


class UnknownContentError(ContentError, LookupError):
    """Неизвестная коллекция или тип документа"""

    def __init__(self, name: str):
        super().__init__(f"Unknown content: {name}")
        self.name = name


class SlugConflictError(ContentError):
    """Slug уже занят другим постом"""

    def __init__(self, slug: str):
        super().__init__(f"Slug already in use: {slug}")
        self.slug = slug
