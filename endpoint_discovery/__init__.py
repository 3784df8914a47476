"""
Endpoint discovery for folder-defined Hyperlambda HTTP endpoints.

Exports the data models, the pipeline components and the scanner.
"""

from .base import (
    HttpVerb,
    EndpointKind,
    Node,
    Field,
    EndpointDescriptor,
)
from .errors import (
    DiscoveryError,
    FileSystemError,
    ParseError,
    DuplicateEndpointError,
    DiscoveryCancelled,
)
from .config import DiscoveryConfig
from .paths import EndpointFile, PathScanner, classify_file, is_legal_http_name, new_stats
from .hyperlambda import BaseLoader, HyperlambdaLoader, HyperlambdaError
from .metadata import MetadataExtractor
from .crud import Classification, CrudClassifier
from .contracts import HttpExecutor, HttpRequest, HttpResponse
from .scanner import EndpointScanner, list_endpoints

__version__ = "1.0.0"

__all__ = [
    # Data models
    "HttpVerb",
    "EndpointKind",
    "Node",
    "Field",
    "EndpointDescriptor",
    # Errors
    "DiscoveryError",
    "FileSystemError",
    "ParseError",
    "DuplicateEndpointError",
    "DiscoveryCancelled",
    # Pipeline
    "DiscoveryConfig",
    "EndpointFile",
    "PathScanner",
    "classify_file",
    "is_legal_http_name",
    "new_stats",
    "BaseLoader",
    "HyperlambdaLoader",
    "HyperlambdaError",
    "MetadataExtractor",
    "Classification",
    "CrudClassifier",
    "EndpointScanner",
    "list_endpoints",
    # Execution boundary
    "HttpExecutor",
    "HttpRequest",
    "HttpResponse",
]
