# services/couriers/__init__.py
from typing import Dict, List, Optional, Type

import httpx

from settings import Settings, settings as default_settings
from .base import BaseCourier
from .errors import UnsupportedProviderError
from .lcs import LCSCourier
from .tcs import TCSCourier

_COURIER_REGISTRY: Dict[str, Type[BaseCourier]] = {
    "tcs": TCSCourier,
    "lcs": LCSCourier,
}


def registered_couriers() -> List[str]:
    return sorted(_COURIER_REGISTRY)


def select_provider(
    courier_key: str,
    settings: Optional[Settings] = None,
    client: Optional[httpx.Client] = None,
) -> BaseCourier:
    """Builds the adapter registered under ``courier_key`` (case-insensitive)."""
    key = (courier_key or "").strip().lower()
    courier_cls = _COURIER_REGISTRY.get(key)
    if courier_cls is None:
        raise UnsupportedProviderError(courier_key, registered_couriers())
    config = (settings or default_settings).courier_config(key)
    return courier_cls(config, client)
