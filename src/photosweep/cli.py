import re
from pathlib import Path
from typing import List, Tuple

import typer

from .config import Settings
from .deletion.events import CollectingEventSink, DeletionOutcome, LoggingEventSink
from .deletion.model import MediaItem
from .deletion.pipeline import DeletionPipeline
from .errors import DecodeError, FetchError
from .imaging.loader import ImageLoader
from .logging import get_logger
from .similarity.compare import are_similar, hamming_distance, similarity_threshold
from .similarity.fingerprint import fingerprint

app = typer.Typer(help="photosweep – delete local photos once their upload is verified", no_args_is_help=True)


_PAIR_SEPARATOR = re.compile(r"=(?=https?://)")


def _parse_pair(pair: str) -> Tuple[Path, str]:
    # Split where the URL scheme starts; local paths may contain "=".
    match = _PAIR_SEPARATOR.search(pair)
    if match is None or match.start() == 0:
        raise typer.BadParameter(f"Expected LOCAL_PATH=URL with an http(s) URL, got {pair!r}")
    return Path(pair[:match.start()]), pair[match.end():]


@app.command()
def compare(
    local_path: Path = typer.Argument(..., help="Local image file"),
    url: str = typer.Argument(..., help="URL of the uploaded copy"),
    hash_size: int = typer.Option(8, min=2, help="Difference-hash grid size"),
    timeout: float = typer.Option(30.0, help="HTTP timeout in seconds"),
) -> None:
    """
    Compare a local image with its uploaded copy without deleting anything.

    Exits 0 when the images match, 1 when they differ and 2 when either
    image could not be fetched or decoded.
    """
    logger = get_logger(__name__)
    loader = ImageLoader(timeout=timeout)
    try:
        remote_fp = fingerprint(loader.load_from_url(url), hash_size)
        local_fp = fingerprint(loader.load_from_path(local_path), hash_size)
    except (FetchError, DecodeError) as exc:
        logger.error(str(exc))
        raise typer.Exit(code=2) from exc
    finally:
        loader.close()

    distance = hamming_distance(remote_fp, local_fp)
    similar = are_similar(remote_fp, local_fp)
    typer.echo(f"local:     {local_fp}")
    typer.echo(f"remote:    {remote_fp}")
    typer.echo(f"distance:  {distance} (same below {similarity_threshold(len(local_fp))})")
    typer.echo("result:    same image" if similar else "result:    different images")
    if not similar:
        raise typer.Exit(code=1)


@app.command()
def sweep(
    pairs: List[str] = typer.Argument(..., help="LOCAL_PATH=URL pairs to verify and delete"),
    hash_size: int = typer.Option(8, min=2, help="Difference-hash grid size"),
    timeout: float = typer.Option(30.0, help="HTTP timeout in seconds"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Verify only, never delete"),
) -> None:
    """Delete each local file whose uploaded copy matches it."""
    logger = get_logger(__name__)
    parsed = [_parse_pair(pair) for pair in pairs]

    settings = Settings(hash_size=hash_size, request_timeout=timeout, dry_run=dry_run)
    sink = CollectingEventSink(forward_to=LoggingEventSink())
    pipeline = DeletionPipeline(settings=settings, sink=sink)

    done = pipeline.start_worker()
    for local_path, url in parsed:
        pipeline.submit_deletion_request(MediaItem(base_url=url, filename=local_path.name), local_path)
    pipeline.close_deletion_queue()
    logger.info(f"Queued {len(parsed)} files, waiting for verification")
    done.wait()

    for event in sink.events:
        typer.echo(f"{event.outcome.value:<22} {event.request.local_path}")

    summary = sink.summary()
    deleted = summary.get(DeletionOutcome.DELETED, 0)
    failed = sum(count for outcome, count in summary.items() if outcome.is_failure)
    typer.echo(f"\n{deleted} deleted, {len(parsed) - deleted - failed} kept, {failed} skipped on error")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
