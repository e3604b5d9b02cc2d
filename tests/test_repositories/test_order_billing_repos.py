"""CRUD tests for the user, order and billing SQL repositories."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from supportdesk.constants import OrderStatus, PaymentStatus, RefundStatus
from supportdesk.models.billing import Invoice, Payment, Refund
from supportdesk.models.order import Order
from supportdesk.models.user import User
from supportdesk.repositories.billing_repo import SqlBillingRepository
from supportdesk.repositories.order_repo import SqlOrderRepository
from supportdesk.repositories.user_repo import SqlUserRepository


@pytest.fixture
def users(session: AsyncSession) -> SqlUserRepository:
    return SqlUserRepository(session)


@pytest.fixture
def orders(session: AsyncSession) -> SqlOrderRepository:
    return SqlOrderRepository(session)


@pytest.fixture
def billing(session: AsyncSession) -> SqlBillingRepository:
    return SqlBillingRepository(session)


@pytest.fixture
async def user(users: SqlUserRepository) -> User:
    return await users.create(
        User(id="repo-user", email="repo@example.com", name="Repo User")
    )


async def _order(
    orders: SqlOrderRepository, user: User, number: str, total: float
) -> Order:
    return await orders.create(
        Order(order_number=number, user_id=user.id, total=total)
    )


async def test_user_lookup(users: SqlUserRepository, user: User) -> None:
    assert (await users.get_by_id("repo-user")) is user
    found = await users.get_by_email("repo@example.com")
    assert found is not None
    assert found.name == "Repo User"
    assert await users.get_by_email("missing@example.com") is None


async def test_order_defaults(
    orders: SqlOrderRepository, user: User
) -> None:
    order = await _order(orders, user, "ORD-501", 10.0)
    assert order.id
    assert order.status == OrderStatus.PENDING
    assert order.currency == "USD"
    assert order.items == []
    assert order.created_at is not None


async def test_order_lookup_by_number_and_id(
    orders: SqlOrderRepository, user: User
) -> None:
    order = await _order(orders, user, "ORD-502", 20.0)
    by_number = await orders.get_by_number("ORD-502")
    assert by_number is not None
    assert by_number.id == order.id
    assert (await orders.get_by_id(order.id)) is order
    assert await orders.get_by_number("ORD-000") is None


async def test_list_by_user_limit(
    orders: SqlOrderRepository, user: User
) -> None:
    for i in range(3):
        await _order(orders, user, f"ORD-51{i}", 5.0)
    assert len(await orders.list_by_user(user.id)) == 3
    assert len(await orders.list_by_user(user.id, limit=2)) == 2
    assert await orders.list_by_user("someone-else") == []


async def test_save_persists_status(
    orders: SqlOrderRepository, session: AsyncSession, user: User
) -> None:
    order = await _order(orders, user, "ORD-520", 30.0)
    order.status = OrderStatus.CANCELLED
    await orders.save(order)
    await session.commit()
    session.expire_all()
    reloaded = await orders.get_by_number("ORD-520")
    assert reloaded is not None
    assert reloaded.status == OrderStatus.CANCELLED


async def test_payments_for_orders(
    orders: SqlOrderRepository,
    billing: SqlBillingRepository,
    user: User,
) -> None:
    a = await _order(orders, user, "ORD-530", 40.0)
    b = await _order(orders, user, "ORD-531", 50.0)
    for order in (a, b):
        await billing.create_payment(
            Payment(
                order_id=order.id,
                amount=order.total,
                status=PaymentStatus.COMPLETED,
                payment_method="credit_card",
            )
        )
    payments = await billing.list_payments_for_orders([a.id, b.id])
    assert {p.order_id for p in payments} == {a.id, b.id}
    assert payments[0].currency == "USD"
    assert len(await billing.list_payments_for_orders([a.id], limit=1)) == 1
    assert await billing.list_payments_for_orders([]) == []


async def test_invoice_and_refund_round_trip(
    orders: SqlOrderRepository,
    billing: SqlBillingRepository,
    user: User,
) -> None:
    order = await _order(orders, user, "ORD-540", 60.0)
    payment = await billing.create_payment(
        Payment(order_id=order.id, amount=60.0, payment_method="paypal")
    )
    assert payment.status == PaymentStatus.PENDING
    assert (await billing.get_payment(payment.id)) is payment

    await billing.create_invoice(
        Invoice(
            id="INV-540", payment_id=payment.id, amount=60.0, status="PAID"
        )
    )
    invoice = await billing.get_invoice("INV-540")
    assert invoice is not None
    assert invoice.payment_id == payment.id

    refund = await billing.create_refund(
        Refund(order_id=order.id, amount=15.0, reason="scratch")
    )
    assert refund.status == RefundStatus.PENDING
    assert (await billing.get_refund(refund.id)) is refund
    assert [r.id for r in await billing.list_refunds_for_order(order.id)] == [
        refund.id
    ]
    assert await billing.get_refund("REF-missing") is None
