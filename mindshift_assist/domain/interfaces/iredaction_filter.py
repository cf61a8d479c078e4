# Redacts sensitive payload information
from typing import Any, Protocol


class IRedactionFilter(Protocol):
    # Redacts plain text
    def redact_text(self, text: str) -> str:
        ...

    # Redacts a nested payload structure
    def redact_payload(self, payload: Any) -> Any:
        ...

    # Redacted, truncated text for log lines
    def preview(self, text: str) -> str:
        ...
