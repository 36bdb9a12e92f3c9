#!/usr/bin/env python
"""Apply versioned Cypher migrations, one transaction per file."""
import argparse
import asyncio
from pathlib import Path

from cypher_transact.app_setup import configure_logging
from cypher_transact.config import load_runtime_settings
from cypher_transact.infrastructure.neo4j_http_client import Neo4jHTTPClient


def split_statements(text: str) -> list[str]:
    """Split a migration file on semicolons, dropping blank statements."""
    return [part.strip() for part in text.split(";") if part.strip()]


async def apply_migration(db: Neo4jHTTPClient, path: Path) -> None:
    statements = split_statements(path.read_text(encoding="utf-8"))
    if not statements:
        raise ValueError(f"Cypher file {path} is empty or contains only whitespace")

    response = await db.begin()
    transaction_id = response.transaction_id
    if transaction_id is None:
        raise RuntimeError(f"Server did not return a transaction ID for {path.name}")
    try:
        for statement in statements:
            await db.query(transaction_id, statement)
    except Exception:
        await db.rollback(transaction_id)
        raise
    await db.commit(transaction_id)


async def run_migrations(directory: str, db: Neo4jHTTPClient) -> None:
    path = Path(directory)
    if not path.exists():
        raise FileNotFoundError(f"Migration directory '{directory}' does not exist")

    files = sorted(p for p in path.glob("*.cypher") if p.is_file())
    if not files:
        print(f"No migration files found in '{directory}'.")
        return

    for cypher_file in files:
        print(f"Applying {cypher_file.name}...")
        try:
            await apply_migration(db, cypher_file)
            print(f"✓ Applied {cypher_file.name}")
        except Exception as e:
            print(f"✗ Failed to apply {cypher_file.name}: {e}")
            raise


async def main(directory: str) -> None:
    settings = load_runtime_settings()
    configure_logging(settings.app.log_level)
    async with Neo4jHTTPClient(settings.neo4j_http) as db:
        await run_migrations(directory, db)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run Cypher migrations")
    parser.add_argument(
        "--dir",
        default="database_migrations",
        help="Directory containing .cypher migration files",
    )
    args = parser.parse_args()
    asyncio.run(main(args.dir))
