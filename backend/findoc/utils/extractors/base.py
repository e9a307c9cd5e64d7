"""
Extractor contract.

Every format extractor turns a file on disk into a RawExtraction (grids and/or
a text blob). Classification into records happens in the orchestrator.
"""
from abc import ABC, abstractmethod
from pathlib import Path

from findoc.models.document import DocumentFormat, ExtractionMethod, RawExtraction


class BaseExtractor(ABC):
    """Base class for format extractors."""

    #: Input class handled by this extractor
    format: DocumentFormat
    #: Whole-file method tag reported on the ProcessedFileResult provenance
    extraction_method: ExtractionMethod

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def extract(self, file_path: Path) -> RawExtraction:
        """
        Extract grids and/or text from a file.

        Raises:
            Any exception - the orchestrator wraps it in an ExtractionError
        """
        ...
