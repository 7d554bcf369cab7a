"""CLI entry point for docs2context."""

from pathlib import Path

import click
import structlog

from .config import settings
from .errors import FileTooLargeError, IngestionError, UnsupportedFileError
from .store import IndexStore
from .utils.logging_setup import setup_logging


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.option(
    "--index-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding chunks.json and vocab.json",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, index_dir: Path | None):
    """Docs2Context - index documents and retrieve prompt context."""
    if verbose:
        settings.log_level = "DEBUG"
    if index_dir is not None:
        settings.index_dir = index_dir
    setup_logging()
    ctx.obj = IndexStore()


@main.command("index-dir")
@click.argument("root", required=False, type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--max-depth", type=int, help="Recursion limit (default: settings.max_depth)")
@click.pass_obj
def index_dir(store: IndexStore, root: Path | None, max_depth: int | None):
    """Index every eligible file under a directory."""
    result = store.index_directory(root, max_depth=max_depth)

    click.echo(f"\nIndexing complete!")
    click.echo(f"  Indexed: {result.indexed}")
    click.echo(f"  Skipped: {result.skipped}")
    click.echo(f"  Errors: {len(result.errors)}")
    for error in result.errors:
        click.echo(f"    - {error}")
    click.echo(f"  Total chunks: {store.stats().total_chunks}")


@main.command("index-file")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def index_file(store: IndexStore, file_path: Path):
    """Index (or re-index) a single file."""
    logger = structlog.get_logger(__name__)

    try:
        added = store.index_file(file_path)
    except (UnsupportedFileError, FileTooLargeError) as e:
        click.echo(f"Skipped: {e}", err=True)
        raise SystemExit(1)
    except IngestionError as e:
        logger.error("Indexing failed", file=file_path.name, error=e.message)
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"Indexed {file_path.name}: {added} chunks")


@main.command("index-text")
@click.argument("text")
@click.option("--source", "-s", default="user_input", show_default=True, help="Source tag")
@click.pass_obj
def index_text(store: IndexStore, text: str, source: str):
    """Index a piece of raw text under a source tag."""
    added = store.index_text(text, source=source)
    if not added:
        click.echo("Nothing indexed (text too short)")
        return
    click.echo(f"Indexed '{source}': {added} chunks")


@main.command()
@click.argument("path")
@click.pass_obj
def remove(store: IndexStore, path: str):
    """Remove all chunks from a file or source tag."""
    if store.remove_file(path):
        click.echo(f"Removed {path}")
    else:
        click.echo(f"Not indexed: {path}")


@main.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def clear(store: IndexStore, yes: bool):
    """Delete the whole index."""
    if not yes:
        click.confirm("Clear the whole index?", abort=True)
    store.clear()
    click.echo("Index cleared")


@main.command("search")
@click.argument("query")
@click.option("--top-k", "-k", type=int, help="Maximum results")
@click.option("--min-score", type=float, help="Minimum similarity score")
@click.option("--source-filter", help="Only sources containing this string")
@click.pass_obj
def search_cmd(
    store: IndexStore,
    query: str,
    top_k: int | None,
    min_score: float | None,
    source_filter: str | None,
):
    """Show the chunks most similar to a query."""
    results = store.search(query, top_k=top_k, min_score=min_score, source_filter=source_filter)

    if not results:
        click.echo("No results")
        return

    for i, r in enumerate(results, 1):
        preview = r.text[:200].replace("\n", " ")
        click.echo(f"{i}. [{r.score:.3f}] {Path(r.source).name} #{r.metadata.get('chunkIndex', 0)}")
        click.echo(f"   {preview}")


@main.command()
@click.argument("query")
@click.option("--top-k", "-k", type=int, help="Maximum chunks")
@click.option("--min-score", type=float, help="Minimum similarity score")
@click.pass_obj
def context(store: IndexStore, query: str, top_k: int | None, min_score: float | None):
    """Print the prompt context block for a query."""
    block = store.get_context(query, top_k=top_k, min_score=min_score)
    click.echo(block or "No relevant context")


@main.command()
@click.pass_obj
def stats(store: IndexStore):
    """Show index statistics."""
    s = store.stats()
    click.echo(f"Chunks: {s.total_chunks}")
    click.echo(f"Sources: {s.total_sources}")
    click.echo(f"Documents: {s.total_documents}")
    click.echo(f"Vocabulary: {s.vocabulary_size:,} terms")
    for name in s.sources:
        click.echo(f"  - {name}")


if __name__ == "__main__":
    main()
