"""JSON-file-backed implementation of TenantSettingsReader.

``<root>/<tenant id>/settings.json`` may be absent or sparse; every field
that is missing keeps the TenantSettings default.
"""

from __future__ import annotations

import json
from pathlib import Path

from delivery.domain.exceptions import StoreError, StorePermissionError
from delivery.domain.model.tenant import (
    WEEKDAYS,
    BusinessHours,
    DayHours,
    MessageTemplates,
    PaymentMethods,
    TenantSettings,
)
from delivery.domain.repository.tenant_settings_reader import TenantSettingsReader

_SCALAR_FIELDS = (
    "name",
    "phone",
    "sound_notification_enabled",
    "auto_print_enabled",
    "closed_message",
    "whatsapp_country_code",
)


def settings_from_raw(tenant_id: str, raw: dict) -> TenantSettings:
    kwargs: dict = {key: raw[key] for key in _SCALAR_FIELDS if key in raw}

    if "business_hours" in raw:
        hours = raw["business_hours"]
        defaults = BusinessHours()
        kwargs["business_hours"] = BusinessHours(
            **{
                day: DayHours(**hours[day]) if day in hours else getattr(defaults, day)
                for day in WEEKDAYS
            }
        )
    if "payment_methods" in raw:
        kwargs["payment_methods"] = PaymentMethods(**raw["payment_methods"])
    if "message_templates" in raw:
        kwargs["message_templates"] = MessageTemplates(**raw["message_templates"])

    return TenantSettings(tenant_id=tenant_id, **kwargs)


class JsonTenantSettingsReader(TenantSettingsReader):

    def __init__(self, root: Path) -> None:
        self._root = root

    def get(self, tenant_id: str) -> TenantSettings:
        path = self._root / tenant_id / "settings.json"
        try:
            if not path.exists():
                return TenantSettings(tenant_id=tenant_id)
            raw = json.loads(path.read_text(encoding="utf-8"))
        except PermissionError as exc:
            raise StorePermissionError(str(path), "get") from exc
        except (OSError, ValueError) as exc:
            raise StoreError(f"Cannot read {path}: {exc}") from exc
        try:
            return settings_from_raw(tenant_id, raw)
        except TypeError as exc:
            raise StoreError(f"Malformed settings in {path}: {exc}") from exc
