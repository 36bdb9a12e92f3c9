import asyncio
import json
from typing import Any, List, Optional

import typer

from .app_setup import configure_logging
from .config import load_runtime_settings
from .domain.services.exceptions import CypherTransactError
from .infrastructure.neo4j_http_client import Neo4jHTTPClient

app = typer.Typer(add_completion=False)


def _parse_pairs(pairs: Optional[List[str]], option: str) -> dict[str, Any]:
    parsed: dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got {pair!r}", param_hint=option)
        try:
            parsed[key] = json.loads(value)
        except ValueError:
            parsed[key] = value
    return parsed


async def _run_query(statement: str, substitutions: dict[str, Any], parameters: dict[str, Any]):
    settings = load_runtime_settings()
    async with Neo4jHTTPClient(settings.neo4j_http) as db:
        return await db.query(statement, substitutions, parameters)


@app.command()
def query(
    statement: str = typer.Argument(..., help="Cypher statement to run"),
    param: Optional[List[str]] = typer.Option(None, "--param", "-p", help="Server-side parameter KEY=VALUE"),
    sub: Optional[List[str]] = typer.Option(None, "--sub", "-s", help="Client-side substitution KEY=VALUE"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
) -> None:
    """Run one statement in an auto-committed transaction and print the rows as JSON."""
    configure_logging(log_level)
    parameters = _parse_pairs(param, "--param")
    substitutions = {k: str(v) for k, v in _parse_pairs(sub, "--sub").items()}
    try:
        response = asyncio.run(_run_query(statement, substitutions, parameters))
    except CypherTransactError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(1)
    typer.echo(json.dumps(response.results, indent=2, default=str))


if __name__ == "__main__":
    app()
