# core/registry.py

"""
In-memory registry of loaded files.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Tuple

from .errors import ConcordError, UnsupportedFileType
from .models import LoadedFile
from .reader import Source, load_source, source_name

LOGGER = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Outcome of adding several files at once."""
    loaded:  List[LoadedFile]                = field(default_factory=list)
    skipped: List[str]                       = field(default_factory=list)
    failed:  List[Tuple[str, ConcordError]]  = field(default_factory=list)

    @property
    def loaded_count(self) -> int:
        return len(self.loaded)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def failed_count(self) -> int:
        return len(self.failed)


class FileRegistry:
    """Ordered collection of the files currently loaded in a session."""

    def __init__(self) -> None:
        self._files: List[LoadedFile] = []

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[LoadedFile]:
        return iter(list(self._files))

    def __getitem__(self, index: int) -> LoadedFile:
        return self._files[index]

    def list(self) -> List[LoadedFile]:
        return list(self._files)

    def loaded(self) -> List[LoadedFile]:
        return [f for f in self._files if f.is_loaded]

    def add(self, source: Source) -> LoadedFile:
        """Parse one source and append it; nothing is inserted on failure."""
        loaded_file = load_source(source)
        self._files.append(loaded_file)
        return loaded_file

    def add_many(self, sources: Iterable[Source]) -> BatchResult:
        """
        Add every source independently.

        Unsupported extensions are skipped, read/parse failures are collected;
        neither stops the rest of the batch.
        """
        result = BatchResult()
        for source in sources:
            name = source_name(source)
            try:
                result.loaded.append(self.add(source))
            except UnsupportedFileType:
                LOGGER.info("Skipping %s: unsupported file type", name)
                result.skipped.append(name)
            except ConcordError as exc:
                LOGGER.error("Error processing %s: %s", name, exc)
                result.failed.append((name, exc))
        return result

    def remove(self, indices: Iterable[int]) -> List[LoadedFile]:
        """
        Remove the files at the given positions, highest index first so the
        remaining positions stay valid. Unknown positions are ignored.
        """
        removed: List[LoadedFile] = []
        for index in sorted(set(indices), reverse=True):
            if 0 <= index < len(self._files):
                removed.append(self._files.pop(index))
        return removed

    def clear(self) -> None:
        self._files.clear()
