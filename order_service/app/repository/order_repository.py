from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.order import Order, Status


class OrderRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_order(
        self,
        customer_name: str,
        total: float,
        status: Optional[str] = None,
    ) -> Order:
        """Persist a new order; id and created_at are assigned by the store"""
        order = Order(
            customer_name=customer_name,
            total=total,
            status=status or Status.CREATED.value,
        )

        self.session.add(order)
        await self.session.commit()
        await self.session.refresh(order)
        return order

    async def get_order_by_id(self, order_id: int) -> Optional[Order]:
        """Get order by ID"""
        query = select(Order).where(Order.id == order_id)
        result = await self.session.execute(query)
        return result.scalars().first()

    async def list_orders(self) -> List[Order]:
        """Get all orders, oldest first"""
        query = select(Order).order_by(Order.id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update_order_status(self, order: Order, new_status: str) -> Order:
        """Overwrite the status of a loaded order and persist it"""
        order.status = new_status
        await self.session.commit()
        await self.session.refresh(order)
        return order
