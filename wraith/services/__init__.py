"""Service container."""

from wraith.services.container import Service, ServiceContainer, ServiceKind, ServiceProvider

__all__ = ["Service", "ServiceContainer", "ServiceKind", "ServiceProvider"]
