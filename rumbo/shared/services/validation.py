# rumbo/shared/services/validation.py

"""
Capa de validación de entradas del planificador.

Funciones puras (sin acceso a base de datos): reciben el payload tal cual
llega y devuelven el modelo validado o la lista de violaciones indexada por
ruta de campo ("stops.1.amount"). Nunca lanzan excepciones por datos mal
formados.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ValidationError

from rumbo.shared.schemas.common import Violation
from rumbo.shared.schemas.submissions import (
    DropOffPointSubmission, RouteSubmission, TIME_PATTERN, blank_to_none
)

STOPS_REQUIRED_MESSAGE = "Si selecciona un Cliente Principal, debe agregar al menos un Ítem de Entrega."
WINDOW_ORDER_MESSAGE = "La hora 'desde' no puede ser posterior a la hora 'hasta'."
REQUIRED_MESSAGE = "El campo es requerido."

_TIME_RE = re.compile(TIME_PATTERN)

# Mensajes por ruta genérica (índices como "*") y tipo de error; "*" = cualquier otro
FIELD_MESSAGES: Dict[str, Dict[str, str]] = {
    "date": {"missing": "La fecha de reparto es requerida.", "*": "Fecha inválida, use AAAA-MM-DD."},
    "driver_id": {"*": "Debe seleccionar un repartidor válido."},
    "client_id": {"*": "Debe seleccionar un cliente principal válido."},
    "zone_id": {"*": "Debe seleccionar una zona válida."},
    "batch": {"greater_than_equal": "La tanda debe ser al menos 1.", "*": "La tanda debe ser un número entero."},
    "status": {"*": "Estado de reparto inválido."},
    "notes": {"*": "Las observaciones no pueden exceder los 500 caracteres."},
    "stops": {"*": "La lista de ítems de entrega es inválida."},
    "stops.*": {"*": "Ítem de entrega inválido."},
    "stops.*.dropoff_point_id": {"*": "Debe seleccionar un cliente de reparto."},
    "stops.*.amount": {"greater_than_equal": "El valor no puede ser negativo.", "*": "El valor debe ser un número."},
    "stops.*.notes": {"*": "El detalle no puede exceder los 500 caracteres."},
    "stops.*.status": {"*": "Estado de entrega inválido."},
}

DROPOFF_FIELD_MESSAGES: Dict[str, Dict[str, str]] = {
    "client_id": {"*": "Debe seleccionar un cliente válido."},
    "name": {"string_too_long": "El nombre de reparto debe tener 255 caracteres o menos.", "*": "El nombre de reparto es requerido."},
    "address": {"*": "La dirección de reparto debe tener 255 caracteres o menos."},
    "window_from": {"*": "Formato HH:MM inválido"},
    "window_to": {"*": "Formato HH:MM inválido"},
    "tariff": {"greater_than_equal": "La tarifa no puede ser negativa.", "*": "La tarifa debe ser un número."},
    "phone": {"*": "El teléfono de reparto debe tener 20 caracteres o menos."},
}


def _path(loc) -> str:
    return ".".join(str(part) for part in loc)


def _generic_path(loc) -> str:
    return ".".join("*" if isinstance(part, int) else str(part) for part in loc)


def _to_violations(exc: ValidationError, messages: Dict[str, Dict[str, str]]) -> List[Violation]:
    violations = []
    for error in exc.errors():
        loc = error.get("loc", ())
        by_type = messages.get(_generic_path(loc), {})
        message = by_type.get(error["type"]) or by_type.get("*")
        if message is None:
            message = REQUIRED_MESSAGE if error["type"] == "missing" else error.get("msg", "Valor inválido")
        violations.append(Violation(field=_path(loc), message=message))
    return violations


def _parse(model: type, payload: Any, messages) -> Tuple[Optional[BaseModel], List[Violation]]:
    try:
        return model.model_validate(payload), []
    except ValidationError as exc:
        return None, _to_violations(exc, messages)


def validate_route_submission(payload: Any) -> Tuple[Optional[RouteSubmission], List[Violation]]:
    """Validar un reparto con sus ítems.

    Returns:
        (RouteSubmission, []) si es válido, (None, violaciones) si no.
    """
    submission, violations = _parse(RouteSubmission, payload, FIELD_MESSAGES)

    if submission is not None:
        client_id, stops = submission.client_id, submission.stops
    elif isinstance(payload, Mapping):
        client_id = blank_to_none(payload.get("client_id"))
        stops = payload.get("stops") or []
    else:
        return None, violations

    # Con cliente principal debe haber al menos un ítem (error sobre "stops", no sobre un ítem)
    if client_id and isinstance(stops, list) and not stops:
        if not any(v.field == "stops" for v in violations):
            violations.append(Violation(field="stops", message=STOPS_REQUIRED_MESSAGE))

    if violations:
        return None, violations
    return submission, []


def validate_dropoff_submission(payload: Any) -> Tuple[Optional[DropOffPointSubmission], List[Violation]]:
    """Validar un cliente de reparto; el rango horario se reporta sobre window_to"""
    submission, violations = _parse(DropOffPointSubmission, payload, DROPOFF_FIELD_MESSAGES)

    if submission is not None:
        window_from, window_to = submission.window_from, submission.window_to
    elif isinstance(payload, Mapping):
        window_from = blank_to_none(payload.get("window_from"))
        window_to = blank_to_none(payload.get("window_to"))
    else:
        return None, violations

    if _valid_time(window_from) and _valid_time(window_to) and window_from > window_to:
        violations.append(Violation(field="window_to", message=WINDOW_ORDER_MESSAGE))

    if violations:
        return None, violations
    return submission, []


def _valid_time(value) -> bool:
    return isinstance(value, str) and _TIME_RE.match(value) is not None
