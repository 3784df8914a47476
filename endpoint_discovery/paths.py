"""Folder walking and file name conventions for endpoint files."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, NamedTuple, Optional, Set, Tuple

from .base import HttpVerb
from .errors import FileSystemError

logger = logging.getLogger("endpoint_discovery.paths")

LEGAL_PUNCTUATION = frozenset("-_/")


class EndpointFile(NamedTuple):
    """An endpoint-eligible file found by the walker."""
    file_path: Path   # Absolute location on disk
    relative: str     # Path relative to the root folder, '/' separated
    route: str        # Route fragment without verb and extension
    verb: HttpVerb


def new_stats() -> Dict[str, int]:
    return {"folders_scanned": 0, "folders_skipped": 0, "files_skipped": 0}


def normalize(path: str) -> str:
    return path.replace("\\", "/")


def is_legal_http_name(name: str) -> bool:
    """
    Default legality predicate for folder paths.

    Lowercase ASCII letters, digits, '-', '_' and '/' are accepted. Anything
    else, including '.', makes the whole folder (and everything below it)
    invisible to discovery.
    """
    for ch in name:
        if ch in LEGAL_PUNCTUATION:
            continue
        if not ("a" <= ch <= "z" or "0" <= ch <= "9"):
            return False
    return True


def classify_file(relative: str) -> Optional[Tuple[str, HttpVerb]]:
    """
    Split a root-relative file name into (route, verb).

    Only names shaped like "route.verb.ext" with a supported verb qualify;
    everything else returns None.
    """
    entities = normalize(relative).split(".")
    if len(entities) != 3:
        return None
    verb = HttpVerb.parse(entities[1])
    if verb is None:
        return None
    return entities[0], verb


class PathScanner:
    """
    Deterministic pre-order walk over the endpoint folder tree.

    Every call to walk() re-reads the file system. At each level the
    subfolders are sorted by name; a legal folder emits its own files in
    sorted order before its subfolders are visited.
    """

    def __init__(
        self,
        root_folder: str,
        start_folder: str = "modules",
        extensions: Iterable[str] = (".hl",),
        is_legal: Callable[[str], bool] = is_legal_http_name,
    ):
        self.root = Path(root_folder)
        self.start_folder = normalize(start_folder).strip("/")
        self.extensions: Set[str] = {e.lower() for e in extensions}
        self.is_legal = is_legal

    def walk(
        self,
        checkpoint: Optional[Callable[[], None]] = None,
        stats: Optional[Dict[str, int]] = None,
    ) -> Iterator[EndpointFile]:
        """
        Yield eligible files in walk order.

        Skip counters go into stats, which belongs to the caller; each walk
        gets its own dict so overlapping walks never share counters.
        """
        if stats is None:
            stats = new_stats()
        start = self.root / self.start_folder if self.start_folder else self.root
        yield from self._handle_folder(start, self.start_folder, checkpoint, stats)

    def _list(self, folder: Path) -> Tuple[List[str], List[str]]:
        """Return sorted (folder names, file names) of one directory."""
        folders: List[str] = []
        files: List[str] = []
        try:
            with os.scandir(folder) as it:
                for entry in it:
                    if entry.is_dir():
                        folders.append(entry.name)
                    elif entry.is_file():
                        files.append(entry.name)
        except OSError as e:
            raise FileSystemError(str(folder), e) from e
        folders.sort()
        files.sort()
        return folders, files

    def _handle_folder(
        self,
        folder: Path,
        relative: str,
        checkpoint: Optional[Callable[[], None]],
        stats: Dict[str, int],
    ) -> Iterator[EndpointFile]:
        folder_names, _ = self._list(folder)
        for name in folder_names:
            if checkpoint:
                checkpoint()
            child_relative = f"{relative}/{name}" if relative else name
            if not self.is_legal(child_relative):
                logger.debug(f"Skipping illegal folder {child_relative}")
                stats["folders_skipped"] += 1
                continue

            stats["folders_scanned"] += 1
            child = folder / name
            yield from self._handle_files(child, child_relative, checkpoint, stats)
            yield from self._handle_folder(child, child_relative, checkpoint, stats)

    def _handle_files(
        self,
        folder: Path,
        relative: str,
        checkpoint: Optional[Callable[[], None]],
        stats: Dict[str, int],
    ) -> Iterator[EndpointFile]:
        _, file_names = self._list(folder)
        for name in file_names:
            if Path(name).suffix.lower() not in self.extensions:
                continue
            if checkpoint:
                checkpoint()
            file_relative = f"{relative}/{name}"
            match = classify_file(file_relative)
            if match is None:
                logger.debug(f"Skipping {file_relative}: not a route.verb.ext file")
                stats["files_skipped"] += 1
                continue
            route, verb = match
            yield EndpointFile(folder / name, file_relative, route, verb)
