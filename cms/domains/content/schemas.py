import copy
import re
from typing import Any, Dict, List, Literal, Mapping, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from cms.domains.content.errors import InvalidPayloadError

SCHEMA_VERSION = 1
LEGAL_TYPES = ("terms", "privacy", "refund")

# Документы хранят ключи в camelCase, модели работают со snake_case
CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

_REEL_ID_RE = re.compile(r"reel/([A-Za-z0-9_-]+)")


class CamelModel(BaseModel):
    model_config = CAMEL_CONFIG

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class Record(CamelModel):
    """Элемент упорядоченной коллекции"""
    id: str = ""
    order: int = 0


# --- Коллекции ---

class FAQItem(Record):
    question: str = ""
    answer: str = ""
    category: str = "general"
    visible: bool = True


class Feature(Record):
    title: str = ""
    description: str = ""
    icon: str = ""
    is_active: bool = True


class HowItWorksStep(Record):
    """Шаг how-it-works; step всегда равен order"""
    step: int = 1
    title: str = ""
    description: str = ""
    icon: str = ""
    is_active: bool = True


class InstagramReel(Record):
    reel_id: str = ""
    title: str = ""
    description: str = ""
    visible: bool = True

    @field_validator("reel_id")
    @classmethod
    def normalize_reel_id(cls, v):
        return extract_reel_id(v.strip())


class Statistic(Record):
    label: str = ""
    value: Union[int, float] = 0
    prefix: str = ""
    suffix: str = ""
    icon: Optional[str] = None
    is_active: bool = True


class Testimonial(Record):
    quote: str = ""
    author: str = ""
    role: Optional[str] = None
    location: Optional[str] = None
    avatar_url: Optional[str] = None
    rating: int = Field(default=5, ge=1, le=5)
    is_active: bool = True


# --- Документы-одиночки ---

class SingletonDocument(CamelModel):
    """Документ, который сохраняется целиком"""
    schema_version: int = SCHEMA_VERSION
    updated_at: Optional[str] = None


class MetricsLabels(CamelModel):
    rides: str = ""
    co2_saved: str = ""
    trees_equiv: str = ""


class EnvironmentImpact(SingletonDocument):
    headline: str = ""
    subheadline: str = ""
    default_rides: Union[int, float] = 0
    co2_per_ride: Union[int, float] = 0
    trees_equivalent: Union[int, float] = 0
    metrics_labels: MetricsLabels = Field(default_factory=MetricsLabels)
    is_active: bool = True


class SiteInfo(CamelModel):
    name: str = ""
    legal_name: str = ""
    tagline: str = ""
    description: str = ""
    url: str = ""


class ContactInfo(CamelModel):
    email: str = ""
    phone: str = ""
    address: str = ""


class SocialLinks(CamelModel):
    facebook: str = ""
    instagram: str = ""
    linkedin: str = ""
    twitter: Optional[str] = None
    youtube: Optional[str] = None


class SiteSettings(SingletonDocument):
    site: SiteInfo = Field(default_factory=SiteInfo)
    contact: ContactInfo = Field(default_factory=ContactInfo)
    social: SocialLinks = Field(default_factory=SocialLinks)
    founders: List[str] = Field(default_factory=list)


class LogoImages(CamelModel):
    white: str = ""
    blue: str = ""
    favicon: str = ""


class QRCodeImages(CamelModel):
    android: str = ""
    ios: str = ""


class MockupImages(CamelModel):
    home_screen: str = ""
    trip_details: str = ""
    trip_chat: str = ""
    in_app_calling: str = ""
    profile_verified: str = ""
    create_trip: str = ""
    emergency_sos: str = ""
    splash_screen: str = ""


class StoreBadgeImages(CamelModel):
    apple: str = ""
    google: str = ""


class SEOImages(CamelModel):
    og_image: str = ""


class HeroImages(CamelModel):
    app_mockup: str = ""
    background: str = ""


class SiteImages(SingletonDocument):
    logos: LogoImages = Field(default_factory=LogoImages)
    qr_codes: QRCodeImages = Field(default_factory=QRCodeImages)
    mockups: MockupImages = Field(default_factory=MockupImages)
    app_store_badges: StoreBadgeImages = Field(default_factory=StoreBadgeImages)
    seo: SEOImages = Field(default_factory=SEOImages)
    hero: HeroImages = Field(default_factory=HeroImages)


class SafetyStat(CamelModel):
    value: str = ""
    label: str = ""


class SafetyHero(CamelModel):
    headline: str = ""
    subheadline: str = ""
    points: List[str] = Field(default_factory=list)
    stats: List[SafetyStat] = Field(default_factory=list)


class SafetyFeature(Record):
    title: str = ""
    description: str = ""
    points: List[str] = Field(default_factory=list)
    icon: str = ""
    is_active: bool = True


class SOSShare(CamelModel):
    icon: str = ""
    label: str = ""


class SOSSection(CamelModel):
    headline: str = ""
    subheadline: str = ""
    steps: List[str] = Field(default_factory=list)
    shares: List[SOSShare] = Field(default_factory=list)


class TrustCertification(CamelModel):
    title: str = ""
    description: str = ""


class TrustSection(CamelModel):
    headline: str = ""
    subheadline: str = ""
    certifications: List[TrustCertification] = Field(default_factory=list)


class SafetyCTA(CamelModel):
    quote: str = ""
    badge: str = ""
    button_text: str = ""
    button_link: str = ""


class SafetyContent(SingletonDocument):
    hero: SafetyHero = Field(default_factory=SafetyHero)
    features: List[SafetyFeature] = Field(default_factory=list)
    sos: SOSSection = Field(default_factory=SOSSection)
    trust: TrustSection = Field(default_factory=TrustSection)
    cta: SafetyCTA = Field(default_factory=SafetyCTA)


class LegalSection(Record):
    title: str = Field(default="", max_length=200)
    content: str = ""


class LegalContent(SingletonDocument):
    type: Literal["terms", "privacy", "refund"]
    title: str = Field(default="", max_length=150)
    last_updated: str = ""
    sections: List[LegalSection] = Field(default_factory=list)


class SEOSettings(SingletonDocument):
    """Глобальные SEO-настройки сайта"""
    site_name: str = Field(default="", max_length=100)
    site_tagline: str = Field(default="", max_length=200)
    default_description: str = Field(default="", max_length=500)
    default_keywords: List[str] = Field(default_factory=list)
    google_verification: Optional[str] = None
    bing_verification: Optional[str] = None
    twitter_handle: Optional[str] = None
    facebook_app_id: Optional[str] = None
    default_og_image: Optional[str] = None
    google_analytics_id: Optional[str] = None
    google_tag_manager_id: Optional[str] = None
    robots_txt: str = ""


# --- Хелперы ---

def merge_with_defaults(partial: Optional[Mapping[str, Any]], defaults: Mapping[str, Any]) -> Dict[str, Any]:
    """Рекурсивное слияние сохраненного документа со значениями по умолчанию.

    Сохраненные значения побеждают, отсутствующие (и null) ключи берутся из
    defaults. Списки заменяются целиком, поэлементно не сливаются.
    """
    merged = copy.deepcopy(dict(defaults))
    for key, value in (partial or {}).items():
        if value is None and key in merged:
            continue
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_with_defaults(value, merged[key])
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def field_patch(model: Type[BaseModel], data: Mapping[str, Any]) -> Dict[str, Any]:
    """Перевод ключей документа (camelCase или snake_case) в имена полей модели"""
    names = {}
    for name, info in model.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
    return {names[key]: value for key, value in data.items() if key in names}


def extract_reel_id(url: str) -> str:
    """id рилса из ссылки instagram.com/reel/<id>/, иначе строка без изменений"""
    match = _REEL_ID_RE.search(url or "")
    return match.group(1) if match else url


REQUIRED_ENVIRONMENT_FIELDS = ("headline", "subheadline", "metricsLabels")
NUMERIC_ENVIRONMENT_FIELDS = ("defaultRides", "co2PerRide", "treesEquivalent")


def check_environment_payload(data: Mapping[str, Any]) -> None:
    """Проверка тела PUT /content/environment"""
    # Пустой объект metricsLabels допустим, отсутствующее поле - нет
    if any(data.get(field) in (None, "") for field in REQUIRED_ENVIRONMENT_FIELDS):
        raise InvalidPayloadError("Missing required fields")

    for field in NUMERIC_ENVIRONMENT_FIELDS:
        value = data.get(field)
        # bool - подкласс int, но числом не считается
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidPayloadError("Invalid numeric fields")


# --- Тела запросов ---

class ReorderRequest(CamelModel):
    """Полный новый порядок id"""
    ids: List[str]


class MoveRequest(CamelModel):
    direction: Literal["up", "down"]
