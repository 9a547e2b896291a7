from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from testathon_ui.errors import UnknownFilterError

UNKNOWN_BRAND = "Unknown"


class Brand(str, Enum):
    IPHONE = "iPhone"
    GALAXY = "Galaxy"
    PIXEL = "Pixel"
    ONEPLUS = "OnePlus"

    @classmethod
    def parse(cls, name) -> "Brand":
        """Resolve a canonical brand name or vendor alias (case-insensitive)."""
        if isinstance(name, Brand):
            return name
        if isinstance(name, str):
            brand = _BRAND_ALIASES.get(name.strip().lower())
            if brand is not None:
                return brand
        raise UnknownFilterError("Brand", name)


_BRAND_ALIASES = {
    "iphone": Brand.IPHONE,
    "apple": Brand.IPHONE,
    "galaxy": Brand.GALAXY,
    "samsung": Brand.GALAXY,
    "pixel": Brand.PIXEL,
    "google": Brand.PIXEL,
    "oneplus": Brand.ONEPLUS,
    "one plus": Brand.ONEPLUS,
}

BRAND_NAMES = [b.value for b in Brand]


class SortType(str, Enum):
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"

    @classmethod
    def parse(cls, name) -> "SortType":
        try:
            return cls(name)
        except ValueError:
            raise UnknownFilterError("Sort", name) from None


class ViewType(str, Enum):
    GRID = "grid"
    LIST = "list"

    @classmethod
    def parse(cls, name) -> "ViewType":
        try:
            return cls(name)
        except ValueError:
            raise UnknownFilterError("View", name) from None


class Capability(str, Enum):
    """Outcome of a best-effort interaction with an optional UI feature."""

    PRESENT = "present"
    ABSENT = "absent"
    ERROR = "error"


# ---- Product listing ----

class ProductRecord(BaseModel):
    """One rendered product card. `index` is only valid for the current render."""

    index: int = Field(ge=0)
    title: str
    brand: str = UNKNOWN_BRAND
    price: float = Field(default=0.0, ge=0)
    price_text: str = ""
    is_available: bool = False

    @field_validator("brand")
    @classmethod
    def _known_brand(cls, value: str) -> str:
        if value != UNKNOWN_BRAND and value not in BRAND_NAMES:
            raise ValueError(f"brand must be one of {BRAND_NAMES} or {UNKNOWN_BRAND!r}")
        return value

    @property
    def has_valid_title(self) -> bool:
        return len(self.title.strip()) >= 3


class FilterCriteria(BaseModel):
    brands: Optional[List[str]] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None


class Mismatch(BaseModel):
    product: str
    issues: List[str] = Field(default_factory=list)


class VerificationResult(BaseModel):
    total: int = 0
    matching: int = 0
    mismatched: List[Mismatch] = Field(default_factory=list)
    passed: bool = True


# ---- Filter panel ----

class PriceRange(BaseModel):
    min_price: float = 0
    max_price: float = 999_999


class FilterState(BaseModel):
    selected_brands: List[Brand] = Field(default_factory=list)
    price_range: PriceRange = Field(default_factory=PriceRange)
    sort_type: str = "default"
    view_type: str = ViewType.GRID.value


class CheckOutcome(BaseModel):
    passed: bool = True
    errors: List[str] = Field(default_factory=list)

    def fail(self, message: str) -> None:
        self.passed = False
        self.errors.append(message)


class InvalidInputReport(BaseModel):
    price_inputs: Capability = Capability.ABSENT
    price_range: CheckOutcome = Field(default_factory=CheckOutcome)
    brand_selection: CheckOutcome = Field(default_factory=CheckOutcome)


class ProbeResult(BaseModel):
    feature: str
    capability: Capability
    detail: str = ""


class CapabilityReport(BaseModel):
    """What optional UI features the live page actually offers."""

    results: Dict[str, ProbeResult] = Field(default_factory=dict)

    def record(self, feature: str, capability: Capability, detail: str = "") -> ProbeResult:
        result = ProbeResult(feature=feature, capability=capability, detail=detail)
        self.results[feature] = result
        return result

    def capability(self, feature: str) -> Capability:
        return self.results[feature].capability

    def is_present(self, feature: str) -> bool:
        result = self.results.get(feature)
        return result is not None and result.capability is Capability.PRESENT

    def features(self, capability: Capability) -> List[str]:
        return [name for name, r in self.results.items() if r.capability is capability]

    def reason(self, feature: str) -> str:
        result = self.results.get(feature)
        if result is None:
            return f"{feature}: not probed"
        detail = f" ({result.detail})" if result.detail else ""
        return f"{feature}: {result.capability.value}{detail}"


# ---- Base layer ----

class NetworkProfile(BaseModel):
    offline: bool = False
    download_throughput: float = 0    # bytes/s
    upload_throughput: float = 0      # bytes/s
    latency: float = 0                # ms

    def to_cdp(self) -> Dict[str, Any]:
        return {
            "offline": self.offline,
            "downloadThroughput": self.download_throughput,
            "uploadThroughput": self.upload_throughput,
            "latency": self.latency,
        }


class PerformanceMetrics(BaseModel):
    dom_content_loaded: float = 0
    load_complete: float = 0
    first_paint: float = 0
    first_contentful_paint: float = 0


class PagePerformance(PerformanceMetrics):
    performance_score: int = 100


class TimedResult(BaseModel):
    response_time: float  # ms
    result: Any = None


# ---- Discovery ----

class SelectorHit(BaseModel):
    selector: str
    count: int
    samples: List[Dict[str, Optional[str]]] = Field(default_factory=list)


class DiscoveryReport(BaseModel):
    title: str = ""
    url: str = ""
    ready_state: str = ""
    page_source_length: int = 0
    screenshot: Optional[str] = None
    containers: List[SelectorHit] = Field(default_factory=list)
    filters: List[SelectorHit] = Field(default_factory=list)
    price_texts: List[str] = Field(default_factory=list)
    images: List[Dict[str, Optional[str]]] = Field(default_factory=list)
    brand_counts: Dict[str, int] = Field(default_factory=dict)
    structure: Dict[str, int] = Field(default_factory=dict)
    unique_classes: List[str] = Field(default_factory=list)

    def found(self, selector: str) -> bool:
        return any(hit.selector == selector for hit in self.containers + self.filters)
