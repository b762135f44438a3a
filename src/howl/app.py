"""Howl application — Bengal content, Chirp routes, Pounce server.

Wires the content source, product registry and changelog aggregator into a
Chirp app.  The two public functions (dev, serve) are the primary entry
points.
"""

import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from howl._errors import ContentError
from howl.config import HowlConfig
from howl.config_loader import load_config

if TYPE_CHECKING:
    from chirp import App

    from howl.content.changelog import ChangelogAggregator
    from howl.content.products import ProductRegistry
    from howl.content.source import ContentSource
    from howl.content.watcher import ContentWatcher
    from howl.observability.collector import StackCollector
    from howl.views.timeline import TimelineRouter


@dataclass(frozen=True, slots=True)
class Runtime:
    """The content services one Howl app is built from."""

    source: ContentSource
    registry: ProductRegistry
    aggregator: ChangelogAggregator
    collector: StackCollector


def build_runtime(config: HowlConfig, *, source: ContentSource | None = None) -> Runtime:
    """Create the content source, registry and aggregator for *config*.

    Args:
        config: Resolved HowlConfig.
        source: Pre-built content source (tests pass one with a fake loader).

    """
    from howl.content.changelog import ChangelogAggregator
    from howl.content.products import ProductRegistry
    from howl.content.source import ContentSource
    from howl.observability import EventLog, StackCollector

    collector = StackCollector(EventLog())
    if source is None:
        source = ContentSource(config, collector=collector)
    return Runtime(
        source=source,
        registry=ProductRegistry(source, config, collector),
        aggregator=ChangelogAggregator(source, config, collector),
        collector=collector,
    )


def _create_chirp_app(config: HowlConfig, *, debug: bool = False) -> App:
    """Create a Chirp App configured for the Howl site.

    Uses the theme fallback chain: user templates take priority, the bundled
    theme fills the gaps.

    Chirp's ``AppConfig.template_dir`` only accepts a single path, so
    ``create_environment`` is patched to build a Kida ``FileSystemLoader``
    over every template directory.  The patch only applies to apps whose
    ``template_dir`` is this site's primary template directory; other apps
    get the original function.

    """
    from chirp import App, AppConfig

    from howl.theme import get_template_dirs

    template_dirs = get_template_dirs(config)

    app_config = AppConfig(
        template_dir=template_dirs[0],
        debug=debug,
        host=config.host,
        port=config.port,
    )

    # chirp.app binds create_environment via a ``from`` import.
    import chirp.app as _chirp_app

    _orig_create_env = _chirp_app.create_environment
    _primary_dir = str(template_dirs[0])

    def _create_env_guarded(
        cfg: object, filters: dict, globals_: dict,
    ) -> object:
        if str(getattr(cfg, "template_dir", None)) != _primary_dir:
            return _orig_create_env(cfg, filters, globals_)

        from kida import ChoiceLoader, Environment, FileSystemLoader, PackageLoader

        loaders: list[FileSystemLoader | PackageLoader] = [
            FileSystemLoader(template_dirs),
            PackageLoader("chirp.templating", "macros"),
        ]

        env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=cfg.autoescape,  # type: ignore[attr-defined]
            auto_reload=cfg.debug,  # type: ignore[attr-defined]
            trim_blocks=cfg.trim_blocks,  # type: ignore[attr-defined]
            lstrip_blocks=cfg.lstrip_blocks,  # type: ignore[attr-defined]
        )
        from chirp.templating.filters import BUILTIN_FILTERS

        env.update_filters(BUILTIN_FILTERS)
        if filters:
            env.update_filters(filters)
        for name, value in globals_.items():
            env.add_global(name, value)
        return env

    _chirp_app.create_environment = _create_env_guarded  # type: ignore[assignment]

    return App(config=app_config)


def _wire_template_globals(app: App, config: HowlConfig) -> None:
    """Expose site-wide settings to every template (including user overrides)."""
    app._template_globals["site_title"] = config.site_title
    app._template_globals["home_url"] = config.home_url
    app._template_globals["media_prefix"] = config.media_prefix


def _wire_routes(app: App, config: HowlConfig, runtime: Runtime) -> TimelineRouter:
    """Register the timeline, gallery and stats routes.

    Raises:
        ContentError: If route registration fails.

    """
    from howl.views.timeline import TimelineRouter

    try:
        router = TimelineRouter(
            runtime.registry, runtime.aggregator, app, config, runtime.collector,
        )
        router.register_all()
        return router
    except Exception as exc:
        msg = f"Failed to register changelog routes: {exc}"
        raise ContentError(msg) from exc


def _mount_static_files(app: App, config: HowlConfig) -> None:
    """Mount theme assets under ``/static`` and media under the media prefix.

    User static files take precedence over bundled theme assets.  Missing
    directories are skipped.

    """
    from chirp.middleware import StaticFiles

    from howl.theme import get_asset_dirs

    for asset_dir in get_asset_dirs(config):
        if asset_dir.is_dir():
            app.add_middleware(StaticFiles(directory=asset_dir, prefix="/static"))

    if config.media_path.is_dir():
        app.add_middleware(StaticFiles(directory=config.media_path, prefix=config.media_prefix))


def _start_watcher(config: HowlConfig, source: ContentSource, app: App) -> ContentWatcher:
    """Invalidate *source* on content changes, via Chirp lifecycle hooks.

    Flow:
        on_startup  → spawn ``_consume_events`` task (runs ``awatch`` internally)
        file change → content/config: ``source.invalidate()``
        on_shutdown → cancel consumer task (cleanly tears down ``awatch``)

    Templates reload through Kida's ``auto_reload``; media and assets are
    served straight from disk, so neither needs handling here.

    """
    import asyncio

    from howl.content.watcher import ContentWatcher

    watcher = ContentWatcher(config)
    _task: asyncio.Task[None] | None = None

    @app.on_startup
    async def _start_event_consumer() -> None:
        nonlocal _task

        async def _consume_events() -> None:
            async for event in watcher.changes():
                if event.category not in ("content", "config"):
                    continue
                source.invalidate()
                if event.category == "config":
                    print(
                        f"  {event.path.name} changed; restart to apply server settings",
                        file=sys.stderr,
                    )

        _task = asyncio.create_task(_consume_events())

    @app.on_shutdown
    async def _stop_event_consumer() -> None:
        if _task is not None and not _task.done():
            _task.cancel()

    return watcher


def create_app(
    config: HowlConfig,
    *,
    debug: bool = False,
    runtime: Runtime | None = None,
) -> tuple[App, Runtime]:
    """Build a fully wired Chirp app for *config*.

    Returns the app and the runtime it reads from.  The watcher is not
    started; ``dev()`` adds it.

    """
    if runtime is None:
        runtime = build_runtime(config)
    app = _create_chirp_app(config, debug=debug)
    _wire_template_globals(app, config)
    _wire_routes(app, config, runtime)
    _mount_static_files(app, config)
    return app, runtime


def _initial_load(runtime: Runtime) -> tuple[int, int]:
    """Load content once so problems surface in the banner, not on first request.

    Returns ``(entry_count, product_count)``.

    Raises:
        ConfigError: If Bengal cannot load the site.
        ContentError: If an entry date is invalid under the ``error`` policy.

    """
    entries = runtime.aggregator.load_all()
    products = runtime.registry.discover()
    return len(entries), len(products)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def dev(root: str | Path = ".", **kwargs: object) -> None:
    """Start a development server that re-reads content on change.

    Args:
        root: Path to the site root directory.
        **kwargs: Override HowlConfig fields.

    """
    from howl.banner import print_banner

    config = load_config(Path(root), **kwargs)
    t0 = time.perf_counter()

    app, runtime = create_app(config, debug=True)
    entry_count, product_count = _initial_load(runtime)
    _start_watcher(config, runtime.source, app)

    load_ms = (time.perf_counter() - t0) * 1000

    print_banner(
        config, entry_count, mode="dev",
        product_count=product_count,
        load_ms=load_ms,
        warnings=runtime.collector.warnings(),
    )

    # Pounce connection events flow into the same EventLog as content events.
    app.run(host=config.host, port=config.port, lifecycle_collector=runtime.collector)


def serve(root: str | Path = ".", **kwargs: object) -> None:
    """Run the changelog as a live Pounce server in production.

    Content is loaded once at startup and kept until the process exits.
    Multiple Pounce workers share the frozen Chirp app.

    Args:
        root: Path to the site root directory.
        **kwargs: Override HowlConfig fields.

    """
    from howl.banner import print_banner

    config = load_config(Path(root), **kwargs)
    t0 = time.perf_counter()

    app, runtime = create_app(config, debug=False)
    entry_count, product_count = _initial_load(runtime)

    load_ms = (time.perf_counter() - t0) * 1000

    print_banner(
        config, entry_count, mode="serve",
        product_count=product_count,
        load_ms=load_ms,
        warnings=runtime.collector.warnings(),
    )

    from pounce.config import ServerConfig
    from pounce.server import Server

    server_config = ServerConfig(
        host=config.host,
        port=config.port,
        workers=config.workers,  # 0 = auto-detect via Pounce
    )
    server = Server(server_config, app, lifecycle_collector=runtime.collector)
    server.run()
