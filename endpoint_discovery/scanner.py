"""
Endpoint discovery orchestrator.

Wires the folder walker, script loaders, metadata extractor and CRUD
classifier together and returns the manifest in walk order.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from .base import EndpointDescriptor, Node
from .config import DiscoveryConfig
from .crud import CrudClassifier
from .errors import DiscoveryCancelled, DuplicateEndpointError, FileSystemError, ParseError
from .hyperlambda import BaseLoader, HyperlambdaLoader
from .metadata import MetadataExtractor
from .paths import EndpointFile, PathScanner, is_legal_http_name, new_stats

logger = logging.getLogger("endpoint_discovery.scanner")


class EndpointScanner:
    """
    Lists every endpoint defined by the files below a root folder.

    Nothing is cached: each call walks and parses the tree again. Errors
    abort the pass before any manifest is handed back, so callers either
    get every endpoint or an exception.
    """

    def __init__(
        self,
        config: Optional[DiscoveryConfig] = None,
        loaders: Optional[Iterable[BaseLoader]] = None,
        is_legal: Callable[[str], bool] = is_legal_http_name,
    ):
        self.config = config or DiscoveryConfig.from_env()
        self.loaders: Dict[str, BaseLoader] = {}
        for loader in loaders or [HyperlambdaLoader()]:
            for ext in loader.extensions:
                self.loaders[ext.lower()] = loader
        self.paths = PathScanner(
            self.config.root_folder,
            self.config.start_folder,
            extensions=self.loaders.keys(),
            is_legal=is_legal,
        )
        self.metadata = MetadataExtractor()
        self.classifier = CrudClassifier(self.config.crud_slots, self.config.sql_connect_slots)

    def _checkpoint(self, cancel: Optional[threading.Event]) -> Callable[[], None]:
        deadline = None
        if self.config.timeout_seconds:
            deadline = time.monotonic() + self.config.timeout_seconds

        def check() -> None:
            if cancel is not None and cancel.is_set():
                raise DiscoveryCancelled("Discovery cancelled")
            if deadline is not None and time.monotonic() > deadline:
                raise DiscoveryCancelled(f"Discovery exceeded {self.config.timeout_seconds}s")

        return check

    def load(self, endpoint_file: EndpointFile) -> Node:
        """Read and parse one endpoint file."""
        fp = endpoint_file.file_path
        try:
            content = fp.read_text(encoding=self.config.encoding)
        except UnicodeDecodeError as e:
            raise ParseError(str(fp), f"not valid {self.config.encoding}: {e}") from e
        except OSError as e:
            raise FileSystemError(str(fp), e) from e

        loader = self.loaders[fp.suffix.lower()]
        try:
            return loader.parse(content)
        except ValueError as e:
            raise ParseError(str(fp), str(e)) from e

    def describe(self, endpoint_file: EndpointFile) -> EndpointDescriptor:
        """Build the descriptor of one endpoint file."""
        lambda_ = self.load(endpoint_file)
        verb = endpoint_file.verb
        route = endpoint_file.route
        path = f"{self.config.namespace}/{route}" if self.config.namespace else route

        args = self.metadata.get_input_arguments(lambda_)
        found = self.classifier.classify(lambda_, verb, args)
        return EndpointDescriptor(
            path=path,
            verb=verb,
            file_path=str(endpoint_file.file_path),
            auth=self.metadata.get_authorization(lambda_),
            input=self.metadata.to_fields(args),
            description=self.metadata.get_description(lambda_),
            returns=found.returns,
            array=found.array,
            kind=found.kind,
        )

    def iter_endpoints(
        self,
        cancel: Optional[threading.Event] = None,
        stats: Optional[Dict[str, int]] = None,
    ) -> Iterator[EndpointDescriptor]:
        """Lazily yield descriptors in walk order."""
        checkpoint = self._checkpoint(cancel)
        for endpoint_file in self.paths.walk(checkpoint, stats):
            logger.debug(f"Describing {endpoint_file.relative}")
            yield self.describe(endpoint_file)

    def list_endpoints(
        self,
        cancel: Optional[threading.Event] = None,
        stats: Optional[Dict[str, int]] = None,
    ) -> List[EndpointDescriptor]:
        """
        Walk the tree and return the complete manifest.

        Raises the first fatal DiscoveryError encountered; no partial list
        is ever returned. Counters for this call are written into stats
        when the caller passes a dict.
        """
        logger.info(f"Listing endpoints below {self.paths.root / self.paths.start_folder}")
        if stats is None:
            stats = {}
        stats.update(new_stats(), files_scanned=0)
        endpoints: List[EndpointDescriptor] = []
        seen = set()

        for ep in self.iter_endpoints(cancel, stats):
            if ep.key in seen:
                raise DuplicateEndpointError(ep.path, ep.verb.value)
            seen.add(ep.key)
            endpoints.append(ep)

        stats["files_scanned"] = len(endpoints)
        logger.info(f"Found {len(endpoints)} endpoints")
        return endpoints

    async def list_endpoints_async(
        self,
        cancel: Optional[threading.Event] = None,
        stats: Optional[Dict[str, int]] = None,
    ) -> List[EndpointDescriptor]:
        """Run list_endpoints() on the loop's default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.list_endpoints, cancel, stats)

    def manifest(self, endpoints: List[EndpointDescriptor]) -> Node:
        """The manifest as a single node whose children are the endpoints."""
        return Node("", children=[ep.to_node() for ep in endpoints])

    def summary(
        self,
        endpoints: List[EndpointDescriptor],
        stats: Optional[Dict[str, int]] = None,
    ) -> Dict[str, Any]:
        """Generate summary statistics from a manifest and the stats of its walk."""
        stats = stats or {}
        by_verb: Dict[str, int] = {}
        by_kind: Dict[str, int] = {}

        for ep in endpoints:
            by_verb[ep.verb.value] = by_verb.get(ep.verb.value, 0) + 1
            kind = ep.kind.value if ep.kind else "custom"
            by_kind[kind] = by_kind.get(kind, 0) + 1

        secured = len([e for e in endpoints if e.auth])
        return {
            "total": len(endpoints),
            "files_scanned": stats.get("files_scanned", len(endpoints)),
            "files_skipped": stats.get("files_skipped", 0),
            "folders_skipped": stats.get("folders_skipped", 0),
            "by_verb": by_verb,
            "by_kind": by_kind,
            "secured": secured,
            "public": len(endpoints) - secured,
        }


def list_endpoints(root_folder: str, **options: Any) -> List[EndpointDescriptor]:
    """Convenience wrapper: list endpoints below root_folder with default settings."""
    config = DiscoveryConfig(root_folder=root_folder, **options)
    return EndpointScanner(config).list_endpoints()
