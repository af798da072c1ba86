"""
Shop settings lookup.

In production this reads the shop's settings document from the
document store. The in-memory adapter here backs the CLI and tests.
"""

import logging
from typing import Any, Optional, Protocol

from detailing_scheduler.schemas.settings_schema import ShopSettings

logger = logging.getLogger(__name__)


class SettingsProvider(Protocol):
    """Read contract the availability flow depends on."""

    def get_settings(self, shop_id: str) -> ShopSettings:
        ...


class InMemorySettingsProvider:
    """Settings documents keyed by shop ID.

    Unknown shops get the configured default hours, mirroring a shop
    whose admin never saved a settings page.
    """

    def __init__(self, documents: Optional[dict[str, dict[str, Any]]] = None) -> None:
        self._documents: dict[str, dict[str, Any]] = dict(documents or {})

    def save_settings(self, shop_id: str, document: dict[str, Any]) -> ShopSettings:
        """Validate and store a settings document, returning the parsed model."""
        parsed = ShopSettings.model_validate(document)
        self._documents[shop_id] = dict(document)
        logger.info("Settings saved for shop %s: %s", shop_id, parsed.hours_label)
        return parsed

    def get_settings(self, shop_id: str) -> ShopSettings:
        document = self._documents.get(shop_id)
        if document is None:
            logger.debug("No settings for shop %s; using defaults", shop_id)
            return ShopSettings()
        return ShopSettings.model_validate(document)
