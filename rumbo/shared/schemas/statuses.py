# rumbo/shared/schemas/statuses.py

"""
Estados de reparto y de entrega.

Los dos ciclos de vida son independientes: el estado del reparto lo fija el
planificador, el estado de cada entrega lo actualiza el repartidor.
"""

from enum import Enum
from typing import Dict, FrozenSet


class RouteStatus(str, Enum):
    """Estados de un reparto"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


class StopStatus(str, Enum):
    """Estados de una entrega dentro del reparto"""
    PENDING = "pending"
    EN_ROUTE = "en_route"
    DELIVERED = "delivered"
    NOT_DELIVERED = "not_delivered"
    CANCELLED = "cancelled"


TERMINAL_STOP_STATUSES: FrozenSet[StopStatus] = frozenset({
    StopStatus.DELIVERED,
    StopStatus.NOT_DELIVERED,
    StopStatus.CANCELLED,
})

STOP_TRANSITIONS: Dict[StopStatus, FrozenSet[StopStatus]] = {
    StopStatus.PENDING: frozenset({StopStatus.EN_ROUTE, StopStatus.CANCELLED}),
    StopStatus.EN_ROUTE: frozenset({StopStatus.DELIVERED, StopStatus.NOT_DELIVERED, StopStatus.CANCELLED}),
    StopStatus.DELIVERED: frozenset(),
    StopStatus.NOT_DELIVERED: frozenset(),
    StopStatus.CANCELLED: frozenset(),
}

STOP_STATUS_LABELS: Dict[StopStatus, str] = {
    StopStatus.PENDING: "Pendiente",
    StopStatus.EN_ROUTE: "En Camino",
    StopStatus.DELIVERED: "Entregado",
    StopStatus.NOT_DELIVERED: "No Entregado",
    StopStatus.CANCELLED: "Cancelado",
}


def allowed(current: StopStatus, new: StopStatus) -> bool:
    """Indica si una entrega puede pasar de `current` a `new`.

    Repetir el estado actual se acepta (sin efecto).
    """
    current = StopStatus(current)
    new = StopStatus(new)
    if current == new:
        return True
    return new in STOP_TRANSITIONS[current]
