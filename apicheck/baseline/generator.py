"""Assembly of a baseline document from a metadata source."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

from ..logging import get_logger
from ..metadata.base import MetadataSource
from ..metadata.descriptors import TypeDescriptor
from ..models import BaselineDocument
from .types import TypeClassifier

TypeFilter = Callable[[TypeDescriptor], bool]


class BaselineGenerator:
    """Walks a module's types once and classifies every admitted type.

    A type is admitted when every filter accepts it; nested types are judged
    independently of their enclosing type. Classification faults propagate
    and no partial document is returned.
    """

    def __init__(self, source: MetadataSource, filters: Optional[Iterable[TypeFilter]] = None) -> None:
        self._source = source
        self._filters: List[TypeFilter] = list(filters or [])
        self._classifier = TypeClassifier(source)
        self.logger = get_logger("generator")

    @classmethod
    def generate_baseline_report(
        cls, source: MetadataSource, filters: Optional[Iterable[TypeFilter]] = None
    ) -> Dict[str, Any]:
        """Generate a baseline and return it in its serializable form."""
        return cls(source, filters).generate_baseline().to_dict()

    def generate_baseline(self) -> BaselineDocument:
        document = BaselineDocument(assembly_identity=self._source.identity())
        self.logger.info("Generating baseline for %s", document.assembly_identity)

        skipped = 0
        for type_ in self._source.defined_types():
            if not all(type_filter(type_) for type_filter in self._filters):
                skipped += 1
                self.logger.debug("Filtered out %s", type_.name)
                continue
            document.types.append(self._classifier.classify(type_))

        self.logger.info("Recorded %d types (%d filtered out)", len(document.types), skipped)
        return document


__all__ = ["BaselineGenerator", "TypeFilter"]
