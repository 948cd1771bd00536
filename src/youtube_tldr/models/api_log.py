"""Analytics record model."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ApiLogRecord:
    """One request record handed to the analytics sink."""
    endpoint: str
    status_code: int
    response_time_ms: int
    identifier: Optional[str] = None
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
