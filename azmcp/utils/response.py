"""Standardized response envelope for CLI commands and MCP tools."""

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel
from pydantic_core import to_jsonable_python

STATUS_OK = 200
STATUS_BAD_REQUEST = 400
STATUS_INTERNAL_ERROR = 500


class CommandResponse(BaseModel):
    """Envelope returned by every dispatch.

    Attributes:
        status: HTTP-style status (200 success, 400 caller error, 500 execution error)
        message: Human-readable error or info text
        duration: Elapsed milliseconds, set once by the dispatcher
        results: Operation payload
    """

    status: int = STATUS_OK
    message: Optional[str] = None
    duration: Optional[int] = None
    results: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """Export with stable key order (status, message, duration, results).

        Null envelope fields are omitted; nulls inside results are preserved.
        """
        data: Dict[str, Any] = {"status": self.status}

        if self.message is not None:
            data["message"] = self.message

        if self.duration is not None:
            data["duration"] = self.duration

        if self.results is not None:
            data["results"] = to_jsonable_python(self.results)

        return data

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
