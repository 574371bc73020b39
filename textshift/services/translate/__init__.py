"""Translation providers and orchestration."""

from .orchestrator import (
    FALLBACK_WARNING,
    ProviderSelection,
    TranslationOrchestrator,
    needs_translation,
)
from .probe import LivenessProbe
from .providers import (
    BaiduProvider,
    GoogleAdvancedProvider,
    GoogleBasicProvider,
    GoogleFreeProvider,
    TranslationProvider,
    build_providers,
)

__all__ = [
    "FALLBACK_WARNING",
    "BaiduProvider",
    "GoogleAdvancedProvider",
    "GoogleBasicProvider",
    "GoogleFreeProvider",
    "LivenessProbe",
    "ProviderSelection",
    "TranslationOrchestrator",
    "TranslationProvider",
    "build_providers",
    "needs_translation",
]
