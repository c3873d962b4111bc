from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from genmodel.client import GoogleGenerativeAI
from genmodel.config.loader import load_settings
from genmodel.errors import GoogleGenerativeAIError
from genmodel.requests.options import merge_request_options
from genmodel.requests.request_helpers import format_new_content
from genmodel.types import (
    BatchEmbedContentsRequest,
    EmbedContentRequest,
    ModelParams,
    RequestOptions,
    StreamCallbacks,
)

if TYPE_CHECKING:
    from genmodel.config.settings import Settings
    from genmodel.generative_model import GenerativeModel

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


def _create_client(settings: Settings) -> GoogleGenerativeAI:
    return GoogleGenerativeAI.from_settings(settings)


async def _create_model(
    model: str | None,
    system: str | None = None,
    timeout: int | None = None,
    verbose: bool = False,
) -> GenerativeModel:
    """Load settings and build the model the command runs against."""
    settings = await load_settings(project_dir=Path.cwd(), user_dir=Path.home())
    _configure_logging(verbose or settings.verbose)
    client = _create_client(settings)
    return client.get_generative_model(
        ModelParams(model=model or settings.default_model, system_instruction=system),
        merge_request_options(settings.request_options(), RequestOptions(timeout=timeout)),
    )


def _fail(exc: GoogleGenerativeAIError) -> None:
    err_console.print(f"[red]{exc}[/red]", markup=True, highlight=False)
    sys.exit(1)


async def run_generate(
    prompt: str,
    model: str | None = None,
    system: str | None = None,
    timeout: int | None = None,
    verbose: bool = False,
) -> None:
    """Run the generate command."""
    try:
        gm = await _create_model(model, system, timeout, verbose)
        result = await gm.generate_content(prompt)
        console.print(result.response.text(), markup=False, highlight=False)
    except GoogleGenerativeAIError as exc:
        _fail(exc)


async def run_stream(
    prompt: str,
    model: str | None = None,
    system: str | None = None,
    timeout: int | None = None,
    verbose: bool = False,
) -> None:
    """Run the stream command.

    Increments are printed from ``on_data``; ``on_done`` prints a summary.
    """

    def on_data(text: str) -> None:
        console.print(text, end="", markup=False, highlight=False, soft_wrap=True)

    def on_done(full_text: str) -> None:
        console.print()
        err_console.print(f"[dim]{len(full_text):,} characters[/dim]")

    try:
        gm = await _create_model(model, system, timeout, verbose)
        result = await gm.generate_content_stream(
            prompt,
            stream_callbacks=StreamCallbacks(on_data=on_data, on_done=on_done),
        )
        async for _chunk in result.stream:
            pass
        response = await result.response
    except GoogleGenerativeAIError as exc:
        _fail(exc)
        return

    usage = response.usage_metadata
    if usage is not None and verbose:
        err_console.print(
            f"[dim]tokens: prompt={usage.prompt_token_count} "
            f"output={usage.candidates_token_count} total={usage.total_token_count}[/dim]",
        )


async def run_count_tokens(
    text: str,
    model: str | None = None,
    verbose: bool = False,
) -> None:
    """Run the count-tokens command."""
    try:
        gm = await _create_model(model, verbose=verbose)
        result = await gm.count_tokens(text)
    except GoogleGenerativeAIError as exc:
        _fail(exc)
        return
    console.print(f"{result.total_tokens}")


async def run_embed(
    texts: list[str],
    model: str,
    task_type: str | None = None,
    verbose: bool = False,
) -> None:
    """Run the embed command."""
    try:
        gm = await _create_model(model, verbose=verbose)
        if len(texts) == 1:
            result = await gm.embed_content(
                EmbedContentRequest(
                    content=format_new_content(texts[0]),
                    task_type=task_type,  # type: ignore[arg-type]
                ),
            )
        else:
            result = await gm.batch_embed_contents(
                BatchEmbedContentsRequest(requests=[
                    EmbedContentRequest(content=format_new_content(t), task_type=task_type)  # type: ignore[arg-type]
                    for t in texts
                ]),
            )
    except GoogleGenerativeAIError as exc:
        _fail(exc)
        return

    table = Table(title="Embeddings")
    table.add_column("Text", style="cyan")
    table.add_column("Dimensions", justify="right")
    table.add_column("Head")

    for text, embedding in zip(texts, result.embeddings or []):
        values = embedding.values or []
        head = ", ".join(f"{v:.4f}" for v in values[:4])
        table.add_row(text, str(len(values)), head)

    console.print(table)


def main() -> None:
    """CLI entry point."""
    from genmodel.cli.args import cli
    cli()


if __name__ == "__main__":
    main()
