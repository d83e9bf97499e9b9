# storefront/repos/order_repo.py
from sqlalchemy import select, update, or_
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        """Commit rzuca IntegrityError gdy sesja Stripe ma juz zamowienie."""
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_by_session_id(self, session_id: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(OrderModel.stripe_session_id == session_id)
        ).scalar_one_or_none()

    def list_orders(self, status: str | None = None, search: str | None = None) -> list[OrderModel]:
        stmt = select(OrderModel).order_by(OrderModel.created_at.desc())
        if status:
            stmt = stmt.where(OrderModel.status == status)
        if search:
            like = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    OrderModel.customer_email.ilike(like),
                    OrderModel.customer_name.ilike(like),
                    OrderModel.id.like(f"{search.lower()}%"),
                )
            )
        return list(self.db.execute(stmt).scalars().all())

    def list_for_user(self, user_id: str) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc())
            ).scalars().all()
        )

    def update_status(self, order: OrderModel, status: str, tracking_number: str | None) -> OrderModel:
        order.status = status
        if tracking_number is not None:
            order.tracking_number = tracking_number
        self.db.commit()
        self.db.refresh(order)
        return order

    def clear_owner(self, user_id: str) -> int:
        """Usuniecie konta: zamowienia zostaja, tracimy tylko powiazanie."""
        res = self.db.execute(
            update(OrderModel).where(OrderModel.user_id == user_id).values(user_id=None)
        )
        return res.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
