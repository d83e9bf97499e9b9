# storefront/repos/product_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_products(self, category: str | None = None, featured: bool | None = None) -> list[ProductModel]:
        stmt = select(ProductModel).order_by(ProductModel.created_at.desc())
        if category and category != "all":
            stmt = stmt.where(ProductModel.category == category)
        if featured is not None:
            stmt = stmt.where(ProductModel.featured == featured)
        return list(self.db.execute(stmt).scalars().all())

    def get_product(self, product_id: str) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def save(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()
