# # Public enrichment API for session text redaction

from .redaction_filter import (
    RedactionConfig,
    RedactionFilter,
)

__all__ = [
    "RedactionConfig",
    "RedactionFilter",
]
