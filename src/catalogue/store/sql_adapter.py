"""SQLAlchemy catalog store adapter (PostgreSQL in production, SQLite locally).

Settlement is one transaction: the settlement reference is claimed first,
then each purchased product is decremented with a single conditional UPDATE
that returns the stock it wrote. The row lock taken by the UPDATE serialises
concurrent settlements of the same product, and exhaustion is classified from
the returned value, never from a separate read.
"""

from datetime import UTC, datetime
from decimal import Decimal

import structlog
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    case,
    create_engine,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from catalogue.store.port import (
    CatalogStore,
    CatalogStoreError,
    DuplicateSettlementError,
    ExhaustedProduct,
    ProductRecord,
    PurchaseItem,
)

logger = structlog.get_logger(__name__)

metadata = MetaData()

products = Table(
    "products",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("slug", String(200)),
    Column("description", Text),
    Column("category", String(32), nullable=False, index=True),
    Column("price_ghs", Numeric(12, 2), nullable=False),
    Column("stock", Integer, nullable=False, default=0),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("image_path", String(500)),
    Column("created_at", DateTime(timezone=True), nullable=False),
    CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
)

settlements = Table(
    "settlements",
    metadata,
    Column("reference", String(128), primary_key=True),
    Column("settled_at", DateTime(timezone=True), nullable=False),
)

_UPDATABLE_COLUMNS = {"name", "slug", "description", "category", "price_ghs", "stock", "is_active", "image_path"}


def _to_record(row) -> ProductRecord:
    created_at = row.created_at
    if created_at is not None and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return ProductRecord(
        id=row.id,
        name=row.name,
        slug=row.slug,
        description=row.description,
        category=row.category,
        price_ghs=Decimal(str(row.price_ghs)),
        stock=row.stock,
        is_active=bool(row.is_active),
        image_path=row.image_path,
        created_at=created_at,
    )


class SqlCatalogStore(CatalogStore):
    """Catalog store backed by a relational database."""

    def __init__(self, database_uri: str | None = None, engine: Engine | None = None) -> None:
        if engine is None:
            if not database_uri:
                raise ValueError("SqlCatalogStore needs a database URI or an engine")
            engine = create_engine(database_uri)
        self.engine = engine

    def create_schema(self) -> None:
        metadata.create_all(self.engine)

    def drop_schema(self) -> None:
        metadata.drop_all(self.engine)

    def add_product(self, product: ProductRecord) -> ProductRecord:
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    insert(products).values(
                        id=product.id,
                        name=product.name,
                        slug=product.slug,
                        description=product.description,
                        category=product.category,
                        price_ghs=product.price_ghs,
                        stock=product.stock,
                        is_active=product.is_active,
                        image_path=product.image_path,
                        created_at=product.created_at,
                    )
                )
        except SQLAlchemyError as exc:
            raise CatalogStoreError(str(exc)) from exc
        return product

    def get_product(self, product_id: str) -> ProductRecord | None:
        try:
            with self.engine.connect() as conn:
                row = conn.execute(select(products).where(products.c.id == product_id)).first()
        except SQLAlchemyError as exc:
            raise CatalogStoreError(str(exc)) from exc
        return _to_record(row) if row is not None else None

    def list_products(self, category=None, active_only=True, in_stock_only=True, limit=None):
        query = select(products)
        if category is not None:
            query = query.where(products.c.category == category)
        if active_only:
            query = query.where(products.c.is_active.is_(True))
        if in_stock_only:
            query = query.where(products.c.stock > 0)
        query = query.order_by(products.c.created_at.desc())
        if limit is not None:
            query = query.limit(limit)

        try:
            with self.engine.connect() as conn:
                rows = conn.execute(query).all()
        except SQLAlchemyError as exc:
            raise CatalogStoreError(str(exc)) from exc
        return [_to_record(row) for row in rows]

    def update_product(self, product_id: str, **changes) -> ProductRecord | None:
        unknown = set(changes) - _UPDATABLE_COLUMNS
        if unknown:
            raise CatalogStoreError(f"Cannot update columns: {', '.join(sorted(unknown))}")

        try:
            with self.engine.begin() as conn:
                if changes:
                    conn.execute(update(products).where(products.c.id == product_id).values(**changes))
                row = conn.execute(select(products).where(products.c.id == product_id)).first()
        except SQLAlchemyError as exc:
            raise CatalogStoreError(str(exc)) from exc
        return _to_record(row) if row is not None else None

    def delete_products(self, product_ids: list[str]) -> int:
        if not product_ids:
            return 0
        try:
            with self.engine.begin() as conn:
                result = conn.execute(delete(products).where(products.c.id.in_(list(set(product_ids)))))
        except SQLAlchemyError as exc:
            raise CatalogStoreError(str(exc)) from exc
        return result.rowcount

    def delete_exhausted(self, product_ids: list[str]) -> list[str]:
        if not product_ids:
            return []
        try:
            with self.engine.begin() as conn:
                rows = conn.execute(
                    delete(products)
                    .where(products.c.id.in_(list(set(product_ids))), products.c.stock <= 0)
                    .returning(products.c.id)
                ).all()
        except SQLAlchemyError as exc:
            raise CatalogStoreError(str(exc)) from exc
        return [row.id for row in rows]

    def settle_stock(self, items: list[PurchaseItem], reference: str | None = None) -> list[ExhaustedProduct]:
        exhausted: dict[str, ExhaustedProduct] = {}
        try:
            with self.engine.begin() as conn:
                if reference is not None:
                    try:
                        conn.execute(insert(settlements).values(reference=reference, settled_at=datetime.now(UTC)))
                    except IntegrityError as exc:
                        raise DuplicateSettlementError(reference) from exc

                for item in items:
                    row = conn.execute(
                        update(products)
                        .where(products.c.id == item.product_id)
                        .values(
                            stock=case(
                                (products.c.stock > item.qty, products.c.stock - item.qty),
                                else_=0,
                            )
                        )
                        .returning(products.c.id, products.c.stock, products.c.image_path)
                    ).first()
                    if row is None:
                        logger.warning("catalog.settle_unknown_product", product_id=item.product_id)
                        continue
                    if row.stock <= 0:
                        exhausted[row.id] = ExhaustedProduct(product_id=row.id, image_path=row.image_path)
        except SQLAlchemyError as exc:
            raise CatalogStoreError(str(exc)) from exc
        return list(exhausted.values())
