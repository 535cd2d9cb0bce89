"""Abstract reader for tenant settings."""

from __future__ import annotations

from abc import ABC, abstractmethod

from delivery.domain.model.tenant import TenantSettings


class TenantSettingsReader(ABC):

    @abstractmethod
    def get(self, tenant_id: str) -> TenantSettings:
        """Return the tenant's settings, defaulted where nothing is stored."""
