"""
SQLite Repository

Handles all database operations using SQLite.

Every public function opens its own connection. Operations that must write
several rows together (restock, order status side effects, procurement
regeneration) do so inside a single connection and commit once, so either
all rows land or none do.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from pydantic import TypeAdapter

from pasarantar.models.catalog import CostComponent, Product, ProductVariant
from pasarantar.models.ledger import Transaction
from pasarantar.models.orders import Order, OrderItem
from pasarantar.models.procurement import ProcurementExpense, ProcurementItem, ProcurementSession

logger = logging.getLogger(__name__)

# Default database path
DEFAULT_DB_PATH = "./data/db/pasarantar.db"

_variants_adapter = TypeAdapter(List[ProductVariant])
_order_items_adapter = TypeAdapter(List[OrderItem])
_stock_taken_adapter = TypeAdapter(Dict[str, float])


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Get a database connection."""
    db_path = db_path or os.environ.get("DATABASE_PATH", DEFAULT_DB_PATH)

    # Ensure directory exists
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def connection(db_path: Optional[str] = None) -> Iterator[sqlite3.Connection]:
    """Connection that commits on success and rolls back on any error."""
    conn = get_connection(db_path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_database(db_path: Optional[str] = None):
    """Initialize database tables."""
    with connection(db_path) as conn:
        cursor = conn.cursor()

        # Cost component library
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS cost_components (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT UNIQUE NOT NULL,
                name TEXT NOT NULL,
                cost REAL NOT NULL,
                unit TEXT NOT NULL DEFAULT 'pcs',
                created_at TEXT NOT NULL
            )
        """)

        # Products
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS products (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                unit TEXT NOT NULL,
                price REAL NOT NULL DEFAULT 0,
                cost_price REAL NOT NULL DEFAULT 0,
                stock REAL NOT NULL DEFAULT 0,
                description TEXT,
                category TEXT,
                is_active INTEGER DEFAULT 1,
                is_promo INTEGER DEFAULT 0,
                promo_price REAL,
                promo_discount REAL,
                variants TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        # Ledger
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS transactions (
                id TEXT PRIMARY KEY,
                date TEXT NOT NULL,
                type TEXT NOT NULL,
                amount REAL NOT NULL,
                category TEXT NOT NULL,
                description TEXT,
                order_id TEXT
            )
        """)

        # Orders (line items kept as JSON)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS orders (
                id TEXT PRIMARY KEY,
                order_number TEXT UNIQUE NOT NULL,
                date TEXT NOT NULL,
                source TEXT NOT NULL,
                customer_id TEXT,
                customer_name TEXT NOT NULL,
                customer_phone TEXT,
                customer_address TEXT,
                items TEXT NOT NULL,
                subtotal REAL NOT NULL,
                shipping_fee REAL DEFAULT 0,
                service_fee REAL DEFAULT 0,
                discount REAL DEFAULT 0,
                grand_total REAL NOT NULL,
                status TEXT NOT NULL,
                notes TEXT,
                updated_at TEXT NOT NULL,
                stock_taken TEXT
            )
        """)

        # Procurement sessions (one per day)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS procurement_sessions (
                id TEXT PRIMARY KEY,
                date TEXT UNIQUE NOT NULL,
                status TEXT NOT NULL DEFAULT 'OPEN',
                notes TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS procurement_items (
                id TEXT PRIMARY KEY,
                session_id TEXT NOT NULL,
                product_id TEXT,
                product_name TEXT NOT NULL,
                unit TEXT NOT NULL,
                total_qty REAL NOT NULL DEFAULT 0,
                cost_price REAL,
                is_purchased INTEGER DEFAULT 0,
                notes TEXT,
                FOREIGN KEY (session_id) REFERENCES procurement_sessions(id) ON DELETE CASCADE
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS procurement_expenses (
                id TEXT PRIMARY KEY,
                session_id TEXT NOT NULL,
                category TEXT NOT NULL,
                amount REAL NOT NULL,
                description TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY (session_id) REFERENCES procurement_sessions(id) ON DELETE CASCADE
            )
        """)

        # Create indexes
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_tx_date ON transactions(date)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_orders_date ON orders(date)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_proc_items_session ON procurement_items(session_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_proc_exp_session ON procurement_expenses(session_id)")

    logger.info("Database initialized successfully")


# =============================================================================
# Row helpers
# =============================================================================

def _write_product(cursor: sqlite3.Cursor, product: Product):
    cursor.execute("""
        INSERT OR REPLACE INTO products
        (id, name, unit, price, cost_price, stock, description, category, is_active,
         is_promo, promo_price, promo_discount, variants, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    """, (
        product.id,
        product.name,
        product.unit,
        product.price,
        product.cost_price,
        product.stock,
        product.description,
        product.category,
        int(product.is_active),
        int(product.is_promo),
        product.promo_price,
        product.promo_discount,
        _variants_adapter.dump_json(product.variants).decode(),
        product.created_at.isoformat(),
        product.updated_at.isoformat(),
    ))


def _row_to_product(row: sqlite3.Row) -> Product:
    return Product(
        id=row['id'],
        name=row['name'],
        unit=row['unit'],
        price=row['price'],
        cost_price=row['cost_price'],
        stock=row['stock'],
        description=row['description'],
        category=row['category'],
        is_active=bool(row['is_active']),
        is_promo=bool(row['is_promo']),
        promo_price=row['promo_price'],
        promo_discount=row['promo_discount'],
        variants=_variants_adapter.validate_json(row['variants']) if row['variants'] else [],
        created_at=datetime.fromisoformat(row['created_at']),
        updated_at=datetime.fromisoformat(row['updated_at']),
    )


def _write_transaction(cursor: sqlite3.Cursor, tx: Transaction):
    cursor.execute("""
        INSERT INTO transactions (id, date, type, amount, category, description, order_id)
        VALUES (?, ?, ?, ?, ?, ?, ?)
    """, (
        tx.id,
        tx.date.isoformat(),
        tx.type.value,
        tx.amount,
        tx.category,
        tx.description,
        tx.order_id,
    ))


def _row_to_transaction(row: sqlite3.Row) -> Transaction:
    return Transaction(
        id=row['id'],
        date=datetime.fromisoformat(row['date']),
        type=row['type'],
        amount=row['amount'],
        category=row['category'],
        description=row['description'] or "",
        order_id=row['order_id'],
    )


def _write_order(cursor: sqlite3.Cursor, order: Order):
    cursor.execute("""
        INSERT OR REPLACE INTO orders
        (id, order_number, date, source, customer_id, customer_name, customer_phone,
         customer_address, items, subtotal, shipping_fee, service_fee, discount,
         grand_total, status, notes, updated_at, stock_taken)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    """, (
        order.id,
        order.order_number,
        order.date.isoformat(),
        order.source.value,
        order.customer_id,
        order.customer_name,
        order.customer_phone,
        order.customer_address,
        _order_items_adapter.dump_json(order.items).decode(),
        order.subtotal,
        order.shipping_fee,
        order.service_fee,
        order.discount,
        order.grand_total,
        order.status.value,
        order.notes,
        order.updated_at.isoformat(),
        _stock_taken_adapter.dump_json(order.stock_taken).decode(),
    ))


def _row_to_order(row: sqlite3.Row) -> Order:
    return Order(
        id=row['id'],
        order_number=row['order_number'],
        date=datetime.fromisoformat(row['date']),
        source=row['source'],
        customer_id=row['customer_id'],
        customer_name=row['customer_name'],
        customer_phone=row['customer_phone'],
        customer_address=row['customer_address'],
        items=_order_items_adapter.validate_json(row['items']),
        subtotal=row['subtotal'],
        shipping_fee=row['shipping_fee'],
        service_fee=row['service_fee'],
        discount=row['discount'],
        grand_total=row['grand_total'],
        status=row['status'],
        notes=row['notes'],
        updated_at=datetime.fromisoformat(row['updated_at']),
        stock_taken=_stock_taken_adapter.validate_json(row['stock_taken']) if row['stock_taken'] else {},
    )


def _return_stock(cursor: sqlite3.Cursor, quantities: Dict[str, float]):
    now = datetime.utcnow().isoformat()
    for product_id, qty in quantities.items():
        cursor.execute(
            "UPDATE products SET stock = stock + ?, updated_at = ? WHERE id = ?",
            (qty, now, product_id),
        )
        if cursor.rowcount == 0:
            logger.warning(f"Stock return skipped, product not found: {product_id}")


def _take_stock(cursor: sqlite3.Cursor, quantities: Dict[str, float]) -> Dict[str, float]:
    """
    Deduct stock, never below zero.

    Returns the amount actually deducted per product, which is what a later
    cancel or delete gives back.
    """
    now = datetime.utcnow().isoformat()
    taken = {}
    for product_id, qty in quantities.items():
        row = cursor.execute(
            "SELECT stock FROM products WHERE id = ?", (product_id,)
        ).fetchone()
        if row is None:
            logger.warning(f"Stock deduction skipped, product not found: {product_id}")
            continue
        amount = min(row['stock'], qty)
        if amount < qty:
            logger.warning(
                f"Oversold {product_id}: ordered {qty}, only {row['stock']} in stock"
            )
        cursor.execute(
            "UPDATE products SET stock = stock - ?, updated_at = ? WHERE id = ?",
            (amount, now, product_id),
        )
        if amount > 0:
            taken[product_id] = amount
    return taken


# =============================================================================
# Cost components
# =============================================================================

def save_cost_component(component: CostComponent, db_path: Optional[str] = None):
    """Append a component to the library."""
    with connection(db_path) as conn:
        conn.execute("""
            INSERT INTO cost_components (id, name, cost, unit, created_at)
            VALUES (?, ?, ?, ?, ?)
        """, (
            component.id,
            component.name,
            component.cost,
            component.unit,
            component.created_at.isoformat(),
        ))


def list_cost_components(db_path: Optional[str] = None) -> List[CostComponent]:
    """All components in insertion order."""
    with connection(db_path) as conn:
        rows = conn.execute("SELECT * FROM cost_components ORDER BY seq").fetchall()

    return [
        CostComponent(
            id=row['id'],
            name=row['name'],
            cost=row['cost'],
            unit=row['unit'],
            created_at=datetime.fromisoformat(row['created_at']),
        )
        for row in rows
    ]


def delete_cost_component(component_id: str, db_path: Optional[str] = None) -> bool:
    with connection(db_path) as conn:
        cursor = conn.execute("DELETE FROM cost_components WHERE id = ?", (component_id,))
        return cursor.rowcount > 0


# =============================================================================
# Products
# =============================================================================

def save_product(product: Product, db_path: Optional[str] = None):
    """Insert or replace a product."""
    with connection(db_path) as conn:
        _write_product(conn.cursor(), product)


def save_products(products: List[Product], db_path: Optional[str] = None):
    """Insert or replace several products at once."""
    with connection(db_path) as conn:
        cursor = conn.cursor()
        for product in products:
            _write_product(cursor, product)


def get_product(product_id: str, db_path: Optional[str] = None) -> Optional[Product]:
    with connection(db_path) as conn:
        row = conn.execute("SELECT * FROM products WHERE id = ?", (product_id,)).fetchone()
    return _row_to_product(row) if row else None


def list_products(db_path: Optional[str] = None) -> List[Product]:
    with connection(db_path) as conn:
        rows = conn.execute("SELECT * FROM products ORDER BY name COLLATE NOCASE").fetchall()
    return [_row_to_product(row) for row in rows]


def delete_product(product_id: str, db_path: Optional[str] = None) -> bool:
    with connection(db_path) as conn:
        cursor = conn.execute("DELETE FROM products WHERE id = ?", (product_id,))
        return cursor.rowcount > 0


def apply_restock(
    product: Product,
    transaction: Optional[Transaction],
    db_path: Optional[str] = None,
):
    """Persist the restocked product and its expense in one commit."""
    with connection(db_path) as conn:
        cursor = conn.cursor()
        _write_product(cursor, product)
        if transaction is not None:
            _write_transaction(cursor, transaction)

    logger.info(f"Restocked product {product.id} to {product.stock}")


# =============================================================================
# Transactions
# =============================================================================

def save_transaction(tx: Transaction, db_path: Optional[str] = None):
    with connection(db_path) as conn:
        _write_transaction(conn.cursor(), tx)


def get_transaction(transaction_id: str, db_path: Optional[str] = None) -> Optional[Transaction]:
    with connection(db_path) as conn:
        row = conn.execute("SELECT * FROM transactions WHERE id = ?", (transaction_id,)).fetchone()
    return _row_to_transaction(row) if row else None


def list_transactions(db_path: Optional[str] = None) -> List[Transaction]:
    """All transactions, newest first."""
    with connection(db_path) as conn:
        rows = conn.execute("SELECT * FROM transactions ORDER BY date DESC").fetchall()
    return [_row_to_transaction(row) for row in rows]


def delete_transaction(transaction_id: str, db_path: Optional[str] = None) -> bool:
    with connection(db_path) as conn:
        cursor = conn.execute("DELETE FROM transactions WHERE id = ?", (transaction_id,))
        return cursor.rowcount > 0


# =============================================================================
# Orders
# =============================================================================

def get_order(order_id: str, db_path: Optional[str] = None) -> Optional[Order]:
    with connection(db_path) as conn:
        row = conn.execute("SELECT * FROM orders WHERE id = ?", (order_id,)).fetchone()
    return _row_to_order(row) if row else None


def list_orders(db_path: Optional[str] = None) -> List[Order]:
    """All orders, newest first."""
    with connection(db_path) as conn:
        rows = conn.execute("SELECT * FROM orders ORDER BY date DESC").fetchall()
    return [_row_to_order(row) for row in rows]


def list_orders_between(
    start: datetime,
    end: datetime,
    statuses: List[str],
    db_path: Optional[str] = None,
) -> List[Order]:
    """Orders with start <= date < end in one of the given statuses."""
    placeholders = ", ".join("?" for _ in statuses)
    with connection(db_path) as conn:
        rows = conn.execute(f"""
            SELECT * FROM orders
            WHERE date >= ? AND date < ? AND status IN ({placeholders})
            ORDER BY date
        """, (start.isoformat(), end.isoformat(), *statuses)).fetchall()
    return [_row_to_order(row) for row in rows]


def save_order(
    order: Order,
    stock_taken: Optional[Dict[str, float]] = None,
    stock_returned: Optional[Dict[str, float]] = None,
    transactions: Optional[List[Transaction]] = None,
    db_path: Optional[str] = None,
) -> Order:
    """
    Write an order together with its stock movements and ledger entries.

    All writes share one commit. Returned stock goes back first. When
    `stock_taken` is given, the saved order records what was actually
    deducted, which can be less than requested if stock ran out.
    """
    with connection(db_path) as conn:
        cursor = conn.cursor()
        if stock_returned:
            _return_stock(cursor, stock_returned)
        if stock_taken is not None:
            order = order.model_copy(update={"stock_taken": _take_stock(cursor, stock_taken)})
        _write_order(cursor, order)
        for tx in transactions or []:
            _write_transaction(cursor, tx)

    logger.info(f"Saved order {order.order_number} ({order.status.value})")
    return order


def delete_order(
    order_id: str,
    stock_returned: Optional[Dict[str, float]] = None,
    db_path: Optional[str] = None,
) -> bool:
    with connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM orders WHERE id = ?", (order_id,))
        if cursor.rowcount == 0:
            return False
        if stock_returned:
            _return_stock(cursor, stock_returned)
        return True


# =============================================================================
# Procurement
# =============================================================================

def _row_to_item(row: sqlite3.Row) -> ProcurementItem:
    return ProcurementItem(
        id=row['id'],
        session_id=row['session_id'],
        product_id=row['product_id'],
        product_name=row['product_name'],
        unit=row['unit'],
        total_qty=row['total_qty'],
        cost_price=row['cost_price'],
        is_purchased=bool(row['is_purchased']),
        notes=row['notes'],
    )


def _row_to_expense(row: sqlite3.Row) -> ProcurementExpense:
    return ProcurementExpense(
        id=row['id'],
        session_id=row['session_id'],
        category=row['category'],
        amount=row['amount'],
        description=row['description'],
        created_at=datetime.fromisoformat(row['created_at']),
    )


def _load_session(conn: sqlite3.Connection, row: sqlite3.Row) -> ProcurementSession:
    items = conn.execute(
        "SELECT * FROM procurement_items WHERE session_id = ? ORDER BY product_name COLLATE NOCASE",
        (row['id'],)
    ).fetchall()
    expenses = conn.execute(
        "SELECT * FROM procurement_expenses WHERE session_id = ? ORDER BY created_at DESC",
        (row['id'],)
    ).fetchall()

    return ProcurementSession(
        id=row['id'],
        date=date.fromisoformat(row['date']),
        status=row['status'],
        notes=row['notes'],
        items=[_row_to_item(r) for r in items],
        expenses=[_row_to_expense(r) for r in expenses],
        created_at=datetime.fromisoformat(row['created_at']),
        updated_at=datetime.fromisoformat(row['updated_at']),
    )


def get_session_by_date(session_date: date, db_path: Optional[str] = None) -> Optional[ProcurementSession]:
    with connection(db_path) as conn:
        row = conn.execute(
            "SELECT * FROM procurement_sessions WHERE date = ?", (session_date.isoformat(),)
        ).fetchone()
        return _load_session(conn, row) if row else None


def get_session(session_id: str, db_path: Optional[str] = None) -> Optional[ProcurementSession]:
    with connection(db_path) as conn:
        row = conn.execute(
            "SELECT * FROM procurement_sessions WHERE id = ?", (session_id,)
        ).fetchone()
        return _load_session(conn, row) if row else None


def upsert_session(
    session: ProcurementSession,
    replace_items: bool = False,
    db_path: Optional[str] = None,
):
    """
    Write the session row. With replace_items, its items are deleted and
    recreated from session.items; expenses are never touched here.
    """
    with connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO procurement_sessions (id, date, status, notes, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                status = excluded.status,
                notes = excluded.notes,
                updated_at = excluded.updated_at
        """, (
            session.id,
            session.date.isoformat(),
            session.status.value,
            session.notes,
            session.created_at.isoformat(),
            session.updated_at.isoformat(),
        ))

        if replace_items:
            cursor.execute("DELETE FROM procurement_items WHERE session_id = ?", (session.id,))
            for item in session.items:
                cursor.execute("""
                    INSERT INTO procurement_items
                    (id, session_id, product_id, product_name, unit, total_qty, cost_price, is_purchased, notes)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    item.id,
                    session.id,
                    item.product_id,
                    item.product_name,
                    item.unit,
                    item.total_qty,
                    item.cost_price,
                    int(item.is_purchased),
                    item.notes,
                ))


def get_procurement_item(item_id: str, db_path: Optional[str] = None) -> Optional[ProcurementItem]:
    with connection(db_path) as conn:
        row = conn.execute("SELECT * FROM procurement_items WHERE id = ?", (item_id,)).fetchone()
    return _row_to_item(row) if row else None


def save_procurement_item(item: ProcurementItem, db_path: Optional[str] = None):
    with connection(db_path) as conn:
        conn.execute("""
            UPDATE procurement_items
            SET cost_price = ?, is_purchased = ?, notes = ?
            WHERE id = ?
        """, (item.cost_price, int(item.is_purchased), item.notes, item.id))


def save_expense(expense: ProcurementExpense, db_path: Optional[str] = None):
    with connection(db_path) as conn:
        conn.execute("""
            INSERT INTO procurement_expenses (id, session_id, category, amount, description, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """, (
            expense.id,
            expense.session_id,
            expense.category,
            expense.amount,
            expense.description,
            expense.created_at.isoformat(),
        ))


def delete_expense(expense_id: str, db_path: Optional[str] = None) -> bool:
    with connection(db_path) as conn:
        cursor = conn.execute("DELETE FROM procurement_expenses WHERE id = ?", (expense_id,))
        return cursor.rowcount > 0


def check_connection(db_path: Optional[str] = None) -> bool:
    """Cheap query used by the readiness probe."""
    with connection(db_path) as conn:
        conn.execute("SELECT 1").fetchone()
    return True
