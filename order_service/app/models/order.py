from enum import Enum

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import OrderServiceBaseModel


STATUS_MAX_LENGTH = 50


class Status(Enum):
    CREATED = "CREATED"
    NOTIFIED = "NOTIFIED"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"


class Order(OrderServiceBaseModel):
    __tablename__ = "orders"

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(STATUS_MAX_LENGTH), default=Status.CREATED.value, nullable=False
    )
    total: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), default=0, nullable=False
    )
