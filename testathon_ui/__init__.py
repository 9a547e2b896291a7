"""Page objects, test data and a DOM discovery probe for the testathon.live demo store."""

from testathon_ui.errors import PageTimeoutError, UnknownFilterError
from testathon_ui.models import (
    Brand,
    Capability,
    CapabilityReport,
    FilterCriteria,
    ProductRecord,
    SortType,
    VerificationResult,
    ViewType,
)

__version__ = "1.0.0"

__all__ = [
    "Brand",
    "Capability",
    "CapabilityReport",
    "FilterCriteria",
    "PageTimeoutError",
    "ProductRecord",
    "SortType",
    "UnknownFilterError",
    "VerificationResult",
    "ViewType",
]
