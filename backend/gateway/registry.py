"""
Endpoint Registry

Ordered, append-only collection of EndpointDescriptors.
Populated while route modules load, then frozen for the life of the process.
"""

import logging
from typing import Iterable, Iterator, List, Tuple

from .errors import RegistryFrozenError
from .models import EndpointDescriptor

logger = logging.getLogger(__name__)


class EndpointRegistry:
    """
    Aggregated metadata of every loaded route module.

    Duplicates (same path and method) are kept as separate entries.
    """

    def __init__(self):
        self._endpoints: List[EndpointDescriptor] = []
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def endpoints(self) -> Tuple[EndpointDescriptor, ...]:
        return tuple(self._endpoints)

    def extend(self, descriptors: Iterable[EndpointDescriptor]) -> int:
        """Append descriptors in order. Returns how many were added."""
        if self._frozen:
            raise RegistryFrozenError("Endpoint registry is frozen after loading")

        added = list(descriptors)
        self._endpoints.extend(added)
        return len(added)

    def freeze(self) -> None:
        self._frozen = True
        logger.debug(f"[Registry] Frozen with {len(self._endpoints)} endpoints")

    def summaries(self) -> List[dict]:
        return [e.summary() for e in self._endpoints]

    def to_list(self) -> List[dict]:
        return [e.to_dict() for e in self._endpoints]

    def __len__(self) -> int:
        return len(self._endpoints)

    def __iter__(self) -> Iterator[EndpointDescriptor]:
        return iter(tuple(self._endpoints))
