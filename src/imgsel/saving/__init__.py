"""Save workflow, quota resolution, and filename rendering."""

from .models import ItemOutcome, ItemStatus, SaveRequest, SaveResult, SaveStatus
from .naming import (
    NamingContext,
    build_context,
    detect_extension,
    render_filename,
    sanitize_filename,
)
from .quota import QuotaDecision, QuotaResolver, QuotaRule, resolve_limit, resolve_limit_mb
from .service import SaveService

__all__ = [
    "ItemOutcome",
    "ItemStatus",
    "NamingContext",
    "QuotaDecision",
    "QuotaResolver",
    "QuotaRule",
    "SaveRequest",
    "SaveResult",
    "SaveService",
    "SaveStatus",
    "build_context",
    "detect_extension",
    "render_filename",
    "resolve_limit",
    "resolve_limit_mb",
    "sanitize_filename",
]
