import asyncio
import os
from pathlib import Path

import typer
from dotenv import load_dotenv, set_key

from cypher_transact.config import Neo4jHTTPSettings
from cypher_transact.domain.services.exceptions import CypherTransactError
from cypher_transact.infrastructure.neo4j_http_client import Neo4jHTTPClient

app = typer.Typer(add_completion=False)


async def _ping(settings: Neo4jHTTPSettings) -> None:
    async with Neo4jHTTPClient(settings) as db:
        await db.query("RETURN 1")


def _test_connection(url: str, user: str, password: str, transaction_path: str) -> bool:
    settings = Neo4jHTTPSettings(
        url=url,
        user=user or None,
        password=password or None,
        transaction_path=transaction_path,
    )
    try:
        asyncio.run(_ping(settings))
        return True
    except CypherTransactError as e:
        typer.echo(f"Connection test failed: {e}", err=True)
        return False


@app.command()
def run() -> None:
    """Interactive setup wizard for the Neo4j HTTP endpoint."""
    if Path(".env").exists():
        if typer.confirm("Import existing .env values?", default=True):
            load_dotenv(".env")
            typer.echo("Loaded values from .env")
    url = typer.prompt(
        "Neo4j HTTP URL", default=os.getenv("NEO4J_HTTP__URL", "http://localhost:7474")
    )
    user = typer.prompt("Neo4j User", default=os.getenv("NEO4J_HTTP__USER", "neo4j"))
    password = typer.prompt(
        "Neo4j Password",
        default=os.getenv("NEO4J_HTTP__PASSWORD", ""),
        hide_input=True,
    )
    transaction_path = typer.prompt(
        "Transaction endpoint path",
        default=os.getenv("NEO4J_HTTP__TRANSACTION_PATH", "db/data/transaction"),
    )

    typer.echo("Testing Neo4j connection...")
    if not _test_connection(url, user, password, transaction_path):
        typer.secho("Failed to connect to Neo4j with provided details", fg="red")
        raise typer.Exit(1)
    typer.secho("Connected successfully!", fg="green")

    env_path = Path(".env")
    env_path.touch(mode=0o600, exist_ok=True)
    set_key(str(env_path), "NEO4J_HTTP__URL", url)
    set_key(str(env_path), "NEO4J_HTTP__USER", user)
    set_key(str(env_path), "NEO4J_HTTP__PASSWORD", password)
    set_key(str(env_path), "NEO4J_HTTP__TRANSACTION_PATH", transaction_path)
    env_path.chmod(0o600)
    typer.secho(f"Credentials saved to {env_path}", fg="green")
