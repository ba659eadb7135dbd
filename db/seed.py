from __future__ import annotations

import argparse
import hashlib
import json
import os
import random
import uuid
from dataclasses import dataclass
from datetime import date, timedelta

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

from db.settings import SETTINGS


def _det_uuid(*parts: str) -> uuid.UUID:
    h = hashlib.sha256("||".join(parts).encode("utf-8")).hexdigest()
    return uuid.UUID(h[:32])


@dataclass(frozen=True)
class CustomerSpec:
    key: str
    name: str
    email: str
    # Fixed invoice count; None means the customer joins the random pool.
    invoices: int | None = None


CUSTOMER_SPECS: list[CustomerSpec] = [
    CustomerSpec("evil-rabbit", "Evil Rabbit", "evil@rabbit.com"),
    CustomerSpec("delba", "Delba de Oliveira", "delba@oliveira.com"),
    CustomerSpec("lee", "Lee Robinson", "lee@robinson.com"),
    CustomerSpec("michael", "Michael Novotny", "michael@novotny.com"),
    CustomerSpec("amy", "Amy Burns", "amy@burns.com"),
    CustomerSpec("balazs", "Balazs Orban", "balazs@orban.com"),
    CustomerSpec("hector", "Hector Simpson", "hector@simpson.com"),
    CustomerSpec("steph", "Steph Dietz", "steph@dietz.com"),
    # Names with LIKE metacharacters; searches must treat them literally.
    CustomerSpec("juice", "100% Juice Co", "orders_desk@juice.example", invoices=2),
    CustomerSpec("pagewright", "Sixten Pagewright", "sixten@pagewright.example", invoices=6),
    # No invoices at all: exercises the LEFT JOIN in customer metrics.
    CustomerSpec("quiet", "Quinn Quietly", "quinn@quietly.example", invoices=0),
]

REVENUE: list[tuple[str, int]] = [
    ("Jan", 2000),
    ("Feb", 1800),
    ("Mar", 2200),
    ("Apr", 2500),
    ("May", 2300),
    ("Jun", 3200),
    ("Jul", 3500),
    ("Aug", 3700),
    ("Sep", 2500),
    ("Oct", 2800),
    ("Nov", 3000),
    ("Dec", 4800),
]

STATUSES = ["pending", "paid"]


def seed(database_url: str, seed_value: int, invoices_n: int, *, start: date | None = None) -> dict[str, int]:
    rng = random.Random(seed_value)
    # Fixed anchor keeps dates (and so ordering) identical across runs.
    start = start or date(2025, 1, 1)

    engine = sa.create_engine(database_url, future=True)
    meta = sa.MetaData()

    customers = sa.Table(
        "customers",
        meta,
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("image_url", sa.String(255), nullable=False),
    )
    invoices = sa.Table(
        "invoices",
        meta,
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("customer_id", UUID(as_uuid=True), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(255), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
    )
    revenue = sa.Table(
        "revenue",
        meta,
        sa.Column("month", sa.String(4), primary_key=True),
        sa.Column("revenue", sa.Integer(), nullable=False),
    )

    customer_rows: list[dict] = []
    for spec in CUSTOMER_SPECS:
        customer_rows.append(
            dict(
                id=_det_uuid("customer", spec.key),
                name=spec.name,
                email=spec.email,
                image_url=f"/customers/{spec.key}.png",
            )
        )

    invoice_rows: list[dict] = []

    def add_invoice(customer_id: uuid.UUID, key: str) -> None:
        invoice_rows.append(
            dict(
                id=_det_uuid("invoice", key),
                customer_id=customer_id,
                # Whole cents only, 1.00 .. 5000.00
                amount=rng.randint(100, 500_000),
                status=rng.choice(STATUSES),
                date=start + timedelta(days=rng.randrange(0, 365)),
            )
        )

    pool: list[uuid.UUID] = []
    for spec, row in zip(CUSTOMER_SPECS, customer_rows):
        if spec.invoices is None:
            pool.append(row["id"])
            continue
        for j in range(spec.invoices):
            add_invoice(row["id"], f"{spec.key}_{j}")

    for i in range(invoices_n):
        add_invoice(rng.choice(pool), f"pool_{i}")

    # Load into DB (truncate existing rows for deterministic idempotence in dev).
    with engine.begin() as conn:
        conn.execute(sa.text("TRUNCATE TABLE invoices, customers, revenue CASCADE"))
        conn.execute(customers.insert(), customer_rows)
        conn.execute(invoices.insert(), invoice_rows)
        conn.execute(revenue.insert(), [{"month": m, "revenue": r} for m, r in REVENUE])

        counts = {}
        for table in ["customers", "invoices", "revenue"]:
            counts[table] = conn.execute(sa.text(f"SELECT COUNT(1) FROM {table}")).scalar_one()

    engine.dispose()
    print(json.dumps({"seed": seed_value, "counts": counts}, indent=2, default=str))
    return counts


def main() -> None:
    parser = argparse.ArgumentParser(description="Load deterministic customers, invoices and revenue.")
    parser.add_argument("--database-url", default=os.getenv("DATABASE_URL") or SETTINGS.database_url)
    parser.add_argument("--seed", type=int, default=SETTINGS.seed_value)
    parser.add_argument("--invoices", type=int, default=SETTINGS.seed_invoices, help="Invoices spread over the random customer pool.")
    args = parser.parse_args()
    seed(args.database_url, args.seed, args.invoices)


if __name__ == "__main__":
    main()
