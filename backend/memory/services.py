"""Service requests captured from confirmed conversations."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from urllib.parse import quote

from backend.chat.confirmation import ConfirmationRecord
from backend.core.errors import InvalidTransitionError, NotFoundError

logger = logging.getLogger("llantera.services")


class ServiceStatus(str, Enum):
    PENDING = "Pendiente"
    APPROVED = "Aprobado"
    IN_PROGRESS = "En Proceso"
    FINISHED = "Terminado"


_NEXT_STATUS = {
    ServiceStatus.PENDING: ServiceStatus.APPROVED,
    ServiceStatus.APPROVED: ServiceStatus.IN_PROGRESS,
    ServiceStatus.IN_PROGRESS: ServiceStatus.FINISHED,
}


@dataclass(frozen=True, slots=True)
class ServiceHistoryItem:
    id: str
    name: str
    phone: str
    details: str
    address: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    status: ServiceStatus = ServiceStatus.PENDING
    price: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "details": self.details,
            "address": self.address,
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
            "price": self.price,
        }


def directions_url(address: str) -> str:
    return "https://www.google.com/maps/dir/?api=1&destination=" + quote(address, safe="")


class ServiceHistory:
    """Newest-first list of service requests whose status only moves forward."""

    def __init__(self) -> None:
        self._items: list[ServiceHistoryItem] = []

    def add(self, record: ConfirmationRecord) -> ServiceHistoryItem:
        item = ServiceHistoryItem(
            id=uuid.uuid4().hex,
            name=record.name,
            phone=record.phone,
            details=record.details,
            address=record.address,
        )
        self._items.insert(0, item)
        logger.info("Service request added to history: %s (%s)", item.id, item.name)
        return item

    def list(self) -> list[ServiceHistoryItem]:
        return list(self._items)

    def get(self, service_id: str) -> ServiceHistoryItem:
        for item in self._items:
            if item.id == service_id:
                return item
        raise NotFoundError(service_id)

    def approve(self, service_id: str) -> tuple[ServiceHistoryItem, str]:
        """Move to ``Aprobado`` and return the notice sent to the client."""

        item = self._advance(service_id, ServiceStatus.APPROVED)
        notice = f"Notificación enviada al cliente: {item.name} ({item.phone}). Su servicio ha sido aprobado."
        logger.info(notice)
        return item, notice

    def start(self, service_id: str) -> tuple[ServiceHistoryItem, str]:
        """Move to ``En Proceso`` and return directions to the customer."""

        item = self._advance(service_id, ServiceStatus.IN_PROGRESS)
        return item, directions_url(item.address)

    def finish(self, service_id: str, price: str) -> ServiceHistoryItem:
        price = price.strip()
        if not price:
            raise ValueError("A final price is required to finish a service")
        return self._advance(service_id, ServiceStatus.FINISHED, price=price)

    def _advance(self, service_id: str, target: ServiceStatus, **changes: Any) -> ServiceHistoryItem:
        current = self.get(service_id)
        if _NEXT_STATUS.get(current.status) is not target:
            raise InvalidTransitionError(current.status.value, target.value)
        updated = replace(current, status=target, **changes)
        self._items = [updated if item.id == service_id else item for item in self._items]
        return updated
