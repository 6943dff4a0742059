"""Create the PetMarket schema and optionally seed the product catalogue.

Usage:
    python scripts/init_db.py                        # create tables
    python scripts/init_db.py --drop                 # drop and recreate
    python scripts/init_db.py --seed products.json   # create, then insert products

The seed file is a JSON list of ``{"name", "price", "stock", "image"?}`` objects.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from decimal import Decimal
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv(ROOT / ".env")

from petmarket.core.database import (
    build_engine,
    build_session_factory,
    create_schema,
    drop_schema,
)
from petmarket.dao.product_dao import ProductDAO


async def _seed_products(factory, path: Path) -> int:
    rows = json.loads(path.read_text())
    dao = ProductDAO()
    created = 0
    async with factory() as session:
        async with session.begin():
            for row in rows:
                if await dao.get_by_field(session, name=row["name"]) is not None:
                    print(f"  SKIP {row['name']}: already present")
                    continue
                await dao.create(
                    session,
                    name=row["name"],
                    price=Decimal(str(row["price"])),
                    stock=int(row.get("stock", 0)),
                    image=row.get("image"),
                )
                created += 1
    return created


async def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--drop", action="store_true", help="drop every table first")
    parser.add_argument("--seed", type=Path, help="JSON file of products to insert")
    args = parser.parse_args(argv)

    engine = build_engine()
    try:
        if args.drop:
            await drop_schema(engine)
            print("Dropped schema.")
        await create_schema(engine)
        print("Schema ready.")

        if args.seed:
            created = await _seed_products(build_session_factory(engine), args.seed)
            print(f"Seeded {created} products.")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
