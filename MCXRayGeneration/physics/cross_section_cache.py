"""Per-element cache of Bremsstrahlung cross-section providers."""

import threading
from typing import Callable, Dict, List

from ..core.data_models import Element
from ..utils.logging import get_logger
from .bremsstrahlung import CrossSectionProvider, KramersBremsstrahlung


logger = get_logger()

ProviderFactory = Callable[[Element], CrossSectionProvider]


class ElementCrossSectionCache:
    """Owns one cross-section provider per element encountered.

    Providers are built on first request and kept for the lifetime of the
    cache. A provider depends only on its element, so entries are never
    evicted or invalidated.

    Attributes:
        provider_factory: Builds a provider for an element
        construction_count: Number of providers built so far
    """

    def __init__(self, provider_factory: ProviderFactory = KramersBremsstrahlung):
        self.provider_factory = provider_factory
        self.construction_count = 0
        self._providers: Dict[Element, CrossSectionProvider] = {}
        self._lock = threading.Lock()

    def get(self, element: Element) -> CrossSectionProvider:
        """Provider for ``element``, built on first use."""
        provider = self._providers.get(element)
        if provider is not None:
            return provider

        with self._lock:
            # Another driver may have populated the entry while we waited
            provider = self._providers.get(element)
            if provider is None:
                provider = self.provider_factory(element)
                self._providers[element] = provider
                self.construction_count += 1
                logger.debug(f"Cached Bremsstrahlung provider for {element.symbol}")
        return provider

    def elements(self) -> List[Element]:
        return sorted(self._providers)

    def clear(self) -> None:
        """Drop every cached provider."""
        with self._lock:
            self._providers.clear()
        logger.debug("Bremsstrahlung provider cache cleared")

    def __contains__(self, element: object) -> bool:
        return element in self._providers

    def __len__(self) -> int:
        return len(self._providers)
