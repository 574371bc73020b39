"""
textshift services.

- translate/: provider adapters, liveness probe and the batch orchestrator
- polish/: Coze-backed content polisher
- format/: typographic rules and the shared style table
- pipeline/: the per-run controller and its progress channel
"""

from .container import PipelineServices, build_services
from .glossary import Glossary, default_glossary
from .settings_store import InMemorySettingsStore, SettingsStore, StorageKey

__all__ = [
    "Glossary",
    "InMemorySettingsStore",
    "PipelineServices",
    "SettingsStore",
    "StorageKey",
    "build_services",
    "default_glossary",
]
