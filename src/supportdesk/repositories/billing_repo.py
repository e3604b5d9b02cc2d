"""SQL implementation of BillingRepository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from supportdesk.models.billing import Invoice, Payment, Refund


class SqlBillingRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_payments_for_orders(
        self, order_ids: list[str], limit: int | None = None
    ) -> list[Payment]:
        if not order_ids:
            return []
        stmt = (
            select(Payment)
            .where(Payment.order_id.in_(order_ids))
            .order_by(Payment.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_payment(self, payment_id: str) -> Payment | None:
        result = await self._session.execute(
            select(Payment).where(Payment.id == payment_id)
        )
        return result.scalar_one_or_none()

    async def create_payment(self, payment: Payment) -> Payment:
        self._session.add(payment)
        await self._session.flush()
        return payment

    async def get_invoice(self, invoice_id: str) -> Invoice | None:
        result = await self._session.execute(
            select(Invoice).where(Invoice.id == invoice_id)
        )
        return result.scalar_one_or_none()

    async def create_invoice(self, invoice: Invoice) -> Invoice:
        self._session.add(invoice)
        await self._session.flush()
        return invoice

    async def get_refund(self, refund_id: str) -> Refund | None:
        result = await self._session.execute(
            select(Refund).where(Refund.id == refund_id)
        )
        return result.scalar_one_or_none()

    async def list_refunds_for_order(
        self, order_id: str
    ) -> list[Refund]:
        result = await self._session.execute(
            select(Refund)
            .where(Refund.order_id == order_id)
            .order_by(Refund.created_at)
        )
        return list(result.scalars().all())

    async def create_refund(self, refund: Refund) -> Refund:
        self._session.add(refund)
        await self._session.flush()
        return refund
