"""CLI startup entrypoint for the image orchestrator."""

from __future__ import annotations

import typer
from rich import print

from image_orchestrator.cache import InMemoryImageCache
from image_orchestrator.cli import CliImageLoader, LoadStatus
from image_orchestrator.config import settings
from image_orchestrator.events import EventBroadcaster, ImageEvent, ImageEventType, ImageLoadedEvent
from image_orchestrator.loaders import FILE_SCHEME, FileImageLoader
from image_orchestrator.pipeline import ImageLoadPipeline
from image_orchestrator.registry import LoaderRegistry
from image_orchestrator.telemetry import LoggingTelemetry, configure_logging, forward_events

app = typer.Typer(help="Image orchestrator entrypoint")


def _build_pipeline(file_root: str | None = None) -> ImageLoadPipeline:
    registry = LoaderRegistry()
    registry.register_loader(FILE_SCHEME, FileImageLoader(root=file_root or settings.file_root))
    broadcaster = EventBroadcaster()
    forward_events(broadcaster, LoggingTelemetry())
    return ImageLoadPipeline(
        registry=registry,
        cache=InMemoryImageCache(max_images=settings.cache_max_images),
        broadcaster=broadcaster,
        dedupe_in_flight=settings.dedupe_in_flight,
    )


def _describe_event(event_type: ImageEventType, event: ImageEvent) -> dict:
    if isinstance(event, ImageLoadedEvent):
        return {"event": event_type.value, "image_id": event.image.image_id}
    return {"event": event_type.value, "image_id": event.image_id, "error": str(event.error)}


@app.command()
def start() -> None:
    """Show runtime configuration."""
    print(
        {
            "app_name": settings.app_name,
            "log_level": settings.log_level,
            "cache_max_images": settings.cache_max_images,
            "dedupe_in_flight": settings.dedupe_in_flight,
            "file_root": settings.file_root,
        }
    )


@app.command("load")
def load(
    image_ids: list[str] = typer.Argument(..., help="Image ids such as file:scan/slice-001.dcm"),
    cache: bool = typer.Option(True, "--cache/--no-cache", help="Keep loaded images in the cache"),
    root: str = typer.Option(None, help="Base directory for relative file: paths"),
) -> None:
    """Load image ids through the pipeline and report each outcome."""
    configure_logging(settings.log_level)
    pipeline = _build_pipeline(file_root=root)

    events: list[dict] = []
    for event_type in ImageEventType:
        pipeline.broadcaster.subscribe(event_type, lambda kind, event: events.append(_describe_event(kind, event)))

    reports = CliImageLoader(pipeline).load_many(image_ids, cache=cache)
    for report in reports:
        print(
            {
                "image_id": report.image_id,
                "status": report.status.value,
                "detail": report.detail,
                "size_bytes": report.size_bytes,
            }
        )
    print({"events": events})

    if any(report.status != LoadStatus.SUCCEEDED for report in reports):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
