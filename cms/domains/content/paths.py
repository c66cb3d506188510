from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple, Type

from cms.domains.content import defaults
from cms.domains.content.errors import UnknownContentError
from cms.domains.content.schemas import (
    LEGAL_TYPES, FAQItem, Feature, HowItWorksStep, InstagramReel, Record,
    SingletonDocument, Statistic, Testimonial,
)


def data_path(app_id: str, *parts: str) -> str:
    """Путь в хранилище: artifacts/{app_id}/public/data/..."""
    return "/".join(["artifacts", app_id, "public", "data", *parts])


@dataclass(frozen=True)
class CollectionSpec:
    """Описание упорядоченной коллекции, доступной по /api/content/{slug}"""
    slug: str
    name: str
    label: str
    model: Type[Record]
    defaults: List[Record]
    base: int = 0
    visibility_field: str = "is_active"
    mirror: Tuple[str, ...] = ()

    def path(self, app_id: str) -> str:
        return data_path(app_id, self.name)


@dataclass(frozen=True)
class DocumentSpec:
    """Документ-одиночка: путь коллекции + id документа"""
    kind: str
    collection: str
    doc_id: str
    label: str
    default: Callable[[], SingletonDocument] = field(repr=False)
    # Частичное тело дополняется значениями по умолчанию перед записью
    merge_on_write: bool = False

    def path(self, app_id: str) -> str:
        return data_path(app_id, self.collection)


COLLECTIONS: Dict[str, CollectionSpec] = {
    spec.slug: spec
    for spec in (
        CollectionSpec("faq", "faq", "FAQ", FAQItem, defaults.DEFAULT_FAQ, visibility_field="visible"),
        CollectionSpec("features", "features", "features", Feature, defaults.DEFAULT_FEATURES),
        CollectionSpec(
            "how-it-works", "howItWorks", "how it works steps", HowItWorksStep, defaults.DEFAULT_STEPS,
            base=1, mirror=("step",),
        ),
        CollectionSpec(
            "instagram", "instagram", "Instagram reels", InstagramReel, defaults.DEFAULT_REELS,
            visibility_field="visible",
        ),
        CollectionSpec("stats", "stats", "stats", Statistic, defaults.DEFAULT_STATS),
        CollectionSpec("testimonials", "testimonials", "testimonials", Testimonial, defaults.DEFAULT_TESTIMONIALS),
    )
}

DOCUMENTS: Dict[str, DocumentSpec] = {
    spec.kind: spec
    for spec in (
        DocumentSpec("environment", "content", "environmentImpact", "CO2 config", lambda: defaults.DEFAULT_ENVIRONMENT),
        DocumentSpec("safety", "content", "safety", "safety content", lambda: defaults.DEFAULT_SAFETY),
        DocumentSpec("images", "images", "config", "images configuration", lambda: defaults.DEFAULT_IMAGES),
        DocumentSpec("settings", "settings", "config", "settings", lambda: defaults.DEFAULT_SETTINGS),
        DocumentSpec("seo", "seo", "config", "SEO settings", lambda: defaults.DEFAULT_SEO, merge_on_write=True),
    )
}

BLOGS_COLLECTION = "blogs"


def get_collection(slug: str) -> CollectionSpec:
    try:
        return COLLECTIONS[slug]
    except KeyError:
        raise UnknownContentError(slug) from None


def get_document(kind: str) -> DocumentSpec:
    """Описание документа-одиночки; legal:<type> для юридических страниц"""
    if kind in DOCUMENTS:
        return DOCUMENTS[kind]

    prefix, _, legal_type = kind.partition(":")
    if prefix == "legal" and legal_type in LEGAL_TYPES:
        return DocumentSpec(
            kind, "legal", legal_type, f"{legal_type} page",
            lambda: defaults.default_legal(legal_type),
        )
    raise UnknownContentError(kind)
