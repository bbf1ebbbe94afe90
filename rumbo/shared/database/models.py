# rumbo/shared/database/models.py
from sqlalchemy import (
    Column, Integer, String, DateTime, Date, Text,
    Numeric, ForeignKey, CheckConstraint, func
)
from sqlalchemy.orm import relationship, declarative_base
import uuid

Base = declarative_base()


def _uuid_str() -> str:
    return str(uuid.uuid4())


# =====================================================
# MIXIN PARA TIMESTAMPS
# =====================================================
class TimestampMixin:
    """Mixin que agrega campos created_at y updated_at"""
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime, nullable=False, server_default=func.current_timestamp(), onupdate=func.current_timestamp())


# =====================================================
# CATÁLOGO (administrado por las pantallas CRUD)
# =====================================================

class Client(Base, TimestampMixin):
    """Cliente principal"""
    __tablename__ = "clientes"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    name = Column("nombre", String(100), nullable=False)
    address = Column("direccion", String(200))
    phone = Column("telefono", String(20))
    email = Column(String(100))

    dropoff_points = relationship("DropOffPoint", back_populates="client")


class DeliveryPerson(Base, TimestampMixin):
    """Repartidor"""
    __tablename__ = "repartidores"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    name = Column("nombre", String(100), nullable=False)
    identification = Column("identificacion", String(50), unique=True)
    phone = Column("telefono", String(20))
    vehicle = Column("vehiculo", String(100))

    routes = relationship("Route", back_populates="driver")


class Zone(Base, TimestampMixin):
    """Zona geográfica"""
    __tablename__ = "zonas"

    id = Column(Integer, primary_key=True, index=True)
    name = Column("nombre", String(100), nullable=False)


class DropOffPoint(Base, TimestampMixin):
    """Punto de entrega recurrente de un cliente (cliente de reparto)"""
    __tablename__ = "clientes_reparto"
    __table_args__ = (
        CheckConstraint("tarifa IS NULL OR tarifa >= 0", name="ck_clientes_reparto_tarifa"),
    )

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column("cliente_id", String(36), ForeignKey("clientes.id"), nullable=False, index=True)
    name = Column("nombre_reparto", String(255), nullable=False)
    address = Column("direccion_reparto", Text)
    window_from = Column("horario_desde", String(5))
    window_to = Column("horario_hasta", String(5))
    tariff = Column("tarifa", Numeric(10, 2))
    phone = Column("telefono_reparto", String(20))

    client = relationship("Client", back_populates="dropoff_points")

    @property
    def time_window(self):
        """Rango horario preferido en formato legible"""
        if self.window_from and self.window_to:
            return f"{self.window_from} - {self.window_to}"
        if self.window_from:
            return f"desde {self.window_from}"
        if self.window_to:
            return f"hasta {self.window_to}"
        return None

    @property
    def effective_address(self):
        """Dirección de reparto o, si no hay, la del cliente dueño"""
        if self.address:
            return self.address
        return self.client.address if self.client else None

    @property
    def effective_phone(self):
        if self.phone:
            return self.phone
        return self.client.phone if self.client else None


# =====================================================
# REPARTOS
# =====================================================

class Route(Base, TimestampMixin):
    """Reparto: una salida planificada de un repartidor"""
    __tablename__ = "repartos"
    __table_args__ = (
        CheckConstraint("tanda >= 1", name="ck_repartos_tanda"),
    )

    id = Column(Integer, primary_key=True, index=True)
    date = Column("fecha_reparto", Date, nullable=False, index=True)
    driver_id = Column("repartidor_id", String(36), ForeignKey("repartidores.id"), nullable=False, index=True)
    client_id = Column("cliente_id", String(36), ForeignKey("clientes.id"), nullable=True)
    zone_id = Column("zona_id", Integer, ForeignKey("zonas.id"), nullable=False)
    batch = Column("tanda", Integer, nullable=False, default=1)
    notes = Column("observaciones", Text)
    status = Column("estado", String(20), nullable=False, default='pending')

    # Token de concurrencia optimista, se incrementa en cada escritura
    version = Column(Integer, nullable=False, default=1)
    # Clave de idempotencia para reintentos de creación
    submission_key = Column(String(64), unique=True, nullable=True)

    # Relationships
    driver = relationship("DeliveryPerson", back_populates="routes")
    client = relationship("Client")
    zone = relationship("Zone")
    stops = relationship(
        "Stop",
        back_populates="route",
        cascade="all, delete-orphan",
        order_by="Stop.visit_order",
    )


class Stop(Base, TimestampMixin):
    """Detalle de reparto: una entrega dentro de un reparto"""
    __tablename__ = "detalles_reparto"
    __table_args__ = (
        CheckConstraint("valor_entrega IS NULL OR valor_entrega >= 0", name="ck_detalles_reparto_valor"),
        CheckConstraint("orden_visita >= 0", name="ck_detalles_reparto_orden"),
        # Los IDs de ítems reemplazados no se reutilizan
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    route_id = Column("reparto_id", Integer, ForeignKey("repartos.id", ondelete="CASCADE"), nullable=False, index=True)
    dropoff_point_id = Column("cliente_reparto_id", Integer, ForeignKey("clientes_reparto.id"), nullable=False)
    visit_order = Column("orden_visita", Integer, nullable=False, default=0)
    amount = Column("valor_entrega", Numeric(10, 2))
    notes = Column("detalle_entrega", Text)
    status = Column("estado_entrega", String(20), nullable=False, default='pending')

    # Relationships
    route = relationship("Route", back_populates="stops")
    dropoff_point = relationship("DropOffPoint")
