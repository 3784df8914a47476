"""
Execution boundary for discovered endpoints.

Executing an endpoint is outside discovery; this module only fixes the
shapes a request executor accepts and returns.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .base import HttpVerb


@dataclass
class HttpRequest:
    """A request resolved to an endpoint route."""
    url: str
    verb: HttpVerb
    payload: Optional[Any] = None
    query: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class HttpResponse:
    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)
    content: Optional[Any] = None


class HttpExecutor(ABC):
    """Service interface for executing a dynamically resolved endpoint."""

    @abstractmethod
    async def execute(self, request: HttpRequest) -> HttpResponse:
        """Load and evaluate the file behind request.url and request.verb."""
        pass
