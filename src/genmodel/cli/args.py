from __future__ import annotations

import asyncio

import click

from genmodel import __version__


@click.group()
@click.version_option(version=__version__, prog_name="genmodel")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool = False) -> None:
    """genmodel: Gemini generative model client."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("prompt")
@click.option("--model", "-m", help="Model to use.")
@click.option("--system", "-s", help="System instruction.")
@click.option("--timeout", type=int, help="Request timeout in milliseconds.")
@click.pass_context
def generate(
    ctx: click.Context,
    prompt: str,
    model: str | None = None,
    system: str | None = None,
    timeout: int | None = None,
) -> None:
    """Generate a complete response for PROMPT."""
    from genmodel.cli.main import run_generate

    asyncio.run(run_generate(
        prompt,
        model=model,
        system=system,
        timeout=timeout,
        verbose=ctx.obj["verbose"],
    ))


@cli.command()
@click.argument("prompt")
@click.option("--model", "-m", help="Model to use.")
@click.option("--system", "-s", help="System instruction.")
@click.option("--timeout", type=int, help="Request timeout in milliseconds.")
@click.pass_context
def stream(
    ctx: click.Context,
    prompt: str,
    model: str | None = None,
    system: str | None = None,
    timeout: int | None = None,
) -> None:
    """Stream the response for PROMPT as it arrives."""
    from genmodel.cli.main import run_stream

    asyncio.run(run_stream(
        prompt,
        model=model,
        system=system,
        timeout=timeout,
        verbose=ctx.obj["verbose"],
    ))


@cli.command("count-tokens")
@click.argument("text")
@click.option("--model", "-m", help="Model to use.")
@click.pass_context
def count_tokens(ctx: click.Context, text: str, model: str | None = None) -> None:
    """Count the tokens in TEXT."""
    from genmodel.cli.main import run_count_tokens

    asyncio.run(run_count_tokens(text, model=model, verbose=ctx.obj["verbose"]))


@cli.command()
@click.argument("texts", nargs=-1, required=True)
@click.option("--model", "-m", default="text-embedding-004", show_default=True, help="Embedding model.")
@click.option(
    "--task-type",
    type=click.Choice([
        "RETRIEVAL_QUERY",
        "RETRIEVAL_DOCUMENT",
        "SEMANTIC_SIMILARITY",
        "CLASSIFICATION",
        "CLUSTERING",
    ]),
    default=None,
    help="Embedding task type.",
)
@click.pass_context
def embed(
    ctx: click.Context,
    texts: tuple[str, ...],
    model: str,
    task_type: str | None = None,
) -> None:
    """Embed one or more TEXTS."""
    from genmodel.cli.main import run_embed

    asyncio.run(run_embed(list(texts), model=model, task_type=task_type, verbose=ctx.obj["verbose"]))
