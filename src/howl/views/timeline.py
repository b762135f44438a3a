"""Timeline view — the changelog page, its tabs, and the gallery endpoint.

Context building is pure (products + entries + filter state in, template
context out).  ``TimelineRouter`` registers the Chirp routes that feed it:

    /                 timeline, filtered by ``?product=<slug>``
    /__howl/gallery   one gallery transition, re-rendered as a fragment
    /__howl/stats     event-log summary as JSON
"""

from __future__ import annotations

import json
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from howl._errors import GalleryError
from howl.gallery.media import MediaItem, build_media_items
from howl.gallery.state import GalleryState, build_gallery
from howl.views.filters import FilterState

if TYPE_CHECKING:
    from chirp import App, Request

    from howl.config import HowlConfig
    from howl.content.changelog import ChangelogAggregator, ContentEntry
    from howl.content.products import Product, ProductRegistry
    from howl.observability.collector import StackCollector

TIMELINE_PATH = "/"
GALLERY_ENDPOINT = "/__howl/gallery"
STATS_ENDPOINT = "/__howl/stats"

EMPTY_MESSAGE = "No changelog entries found."


@dataclass(frozen=True, slots=True)
class Tab:
    """One product filter tab (``slug`` is None for "All")."""

    label: str
    href: str
    selected: bool
    slug: str | None = None


@dataclass(frozen=True, slots=True)
class Thumbnail:
    item: MediaItem
    index: int
    active: bool
    url: str
    label: str


@dataclass(frozen=True, slots=True)
class GalleryView:
    """Snapshot of a gallery state plus the URLs of its transitions.

    Attributes:
        entry_url: URL of the entry the gallery belongs to.
        active: The active media item.
        active_index: Index of the active item.
        lightbox_open: Whether the lightbox overlay is shown.
        has_multiple: Whether navigation controls are shown.
        counter: Position label (``"2 / 3"``).
        thumbnails: One thumbnail per item (only rendered with >1 item).
        prev_url: Endpoint URL for the previous item.
        next_url: Endpoint URL for the next item.
        open_url: Endpoint URL opening the lightbox.
        close_url: Endpoint URL closing the lightbox.
        key_url: Endpoint URL for key presses; the client appends ``&key=``.

    """

    entry_url: str
    active: MediaItem
    active_index: int
    lightbox_open: bool
    has_multiple: bool
    counter: str
    thumbnails: tuple[Thumbnail, ...]
    prev_url: str
    next_url: str
    open_url: str
    close_url: str
    key_url: str


@dataclass(frozen=True, slots=True)
class TimelineItem:
    """One entry as rendered on the timeline."""

    entry: ContentEntry
    product: Product | None
    date_label: str
    show_badge: bool
    gallery: GalleryView | None


def format_entry_date(when: datetime | None) -> str:
    """``March 1, 2024``; empty for undated entries."""
    if when is None:
        return ""
    return f"{when:%B} {when.day}, {when.year}"


def gallery_action_url(
    entry_url: str,
    state: GalleryState,
    action: str,
    *,
    to: int | None = None,
) -> str:
    """Endpoint URL applying *action* to the current *state*."""
    params: dict[str, str | int] = {
        "entry": entry_url,
        "index": state.active_index,
        "lightbox": "1" if state.lightbox_open else "0",
        "action": action,
    }
    if to is not None:
        params["to"] = to
    return f"{GALLERY_ENDPOINT}?{urlencode(params)}"


def gallery_view(entry_url: str, state: GalleryState) -> GalleryView:
    """Freeze *state* into a template-ready view."""
    count = len(state.items)
    thumbnails = tuple(
        Thumbnail(
            item=item,
            index=index,
            active=index == state.active_index,
            url=gallery_action_url(entry_url, state, "select", to=index),
            label=f"View media {index + 1} of {count}",
        )
        for index, item in enumerate(state.items)
    )
    return GalleryView(
        entry_url=entry_url,
        active=state.active_item,
        active_index=state.active_index,
        lightbox_open=state.lightbox_open,
        has_multiple=state.has_multiple,
        counter=state.counter,
        thumbnails=thumbnails,
        prev_url=gallery_action_url(entry_url, state, "prev"),
        next_url=gallery_action_url(entry_url, state, "next"),
        open_url=gallery_action_url(entry_url, state, "open"),
        close_url=gallery_action_url(entry_url, state, "close"),
        key_url=gallery_action_url(entry_url, state, "key"),
    )


def build_tabs(products: Sequence[Product], filter_state: FilterState) -> list[Tab]:
    """"All" plus one tab per product; no tabs at all for a single product."""
    if len(products) <= 1:
        return []
    selected = filter_state.product
    tabs = [Tab(label="All", href=filter_state.set_product(None).url, selected=selected is None)]
    tabs.extend(
        Tab(
            label=product.display_name,
            href=filter_state.set_product(product.slug).url,
            selected=selected == product.slug,
            slug=product.slug,
        )
        for product in products
    )
    return tabs


def build_timeline_context(
    products: Sequence[Product],
    entries: Sequence[ContentEntry],
    filter_state: FilterState,
    config: HowlConfig,
) -> dict[str, Any]:
    """Assemble the template context for the timeline page."""
    by_slug: Mapping[str, Product] = {p.slug: p for p in products}
    selected = filter_state.product
    selected_product = by_slug.get(selected) if selected else None
    show_badges = selected is None and len(products) > 1

    items: list[TimelineItem] = []
    for entry in entries:
        product = by_slug.get(entry.product)
        gallery = build_gallery(
            entry.title, entry.product, entry.images, prefix=config.media_prefix,
        )
        items.append(
            TimelineItem(
                entry=entry,
                product=product,
                date_label=format_entry_date(entry.date),
                show_badge=show_badges and product is not None,
                gallery=gallery_view(entry.url, gallery) if gallery is not None else None,
            )
        )

    return {
        "title": config.site_title,
        "home_url": config.home_url,
        "products": list(products),
        "tabs": build_tabs(products, filter_state),
        "selected": selected,
        "description": selected_product.description if selected_product else None,
        "entries": items,
        "empty_message": EMPTY_MESSAGE,
    }


def query_pairs(query: Any) -> list[tuple[str, str]]:
    """Flatten a request query into ordered pairs, keeping repeated keys.

    Uses the mapping's ``get_list`` when it has one; a plain mapping
    contributes one value per key.
    """
    get_list = getattr(query, "get_list", None)
    if get_list is None:
        return [(str(k), str(v)) for k, v in query.items()]
    return [(str(k), str(v)) for k in query.keys() for v in get_list(k)]


def _parse_int(value: object, default: int | None) -> int | None:
    try:
        return int(str(value))
    except (TypeError, ValueError):
        return default


class TimelineRouter:
    """Registers the changelog routes on a Chirp app.

    Args:
        registry: Product registry (tabs, badges, descriptions).
        aggregator: Changelog aggregator (entries).
        app: Chirp App to register routes on (must not yet be frozen).
        config: Howl configuration.
        collector: Optional event collector.

    """

    def __init__(
        self,
        registry: ProductRegistry,
        aggregator: ChangelogAggregator,
        app: App,
        config: HowlConfig,
        collector: StackCollector | None = None,
    ) -> None:
        self._registry = registry
        self._aggregator = aggregator
        self._app = app
        self._config = config
        self._collector = collector
        self._route_count = 0

    @property
    def route_count(self) -> int:
        """Number of routes registered so far."""
        return self._route_count

    def register_all(self) -> None:
        """Register the timeline, gallery and stats routes."""
        self.register_timeline()
        self.register_gallery_endpoint()
        if self._collector is not None:
            self.register_stats_endpoint(self._collector)

    def register_timeline(self) -> None:
        """Register ``/``, the filterable changelog timeline."""
        registry = self._registry
        aggregator = self._aggregator
        config = self._config
        collector = self._collector

        async def timeline_handler(request: Request) -> Any:
            from chirp import Template

            t0 = time.perf_counter()
            filter_state = FilterState.from_query(
                TIMELINE_PATH, query_pairs(request.query), param=config.filter_param,
            )
            products = registry.discover()
            entries = aggregator.query_by_product(filter_state.product)
            context = build_timeline_context(products, entries, filter_state, config)

            if collector is not None:
                collector.record_timeline(
                    TIMELINE_PATH,
                    product=filter_state.product,
                    entries=len(entries),
                    duration_ms=(time.perf_counter() - t0) * 1000,
                )
            return Template("timeline.html", **context)

        timeline_handler.__name__ = "howl_timeline"
        timeline_handler.__qualname__ = "TimelineRouter.howl_timeline"

        self._app.route(TIMELINE_PATH, name="howl:timeline")(timeline_handler)
        self._route_count += 1

    def register_gallery_endpoint(self) -> None:
        """Register ``/__howl/gallery``.

        The request carries the gallery state (``entry``, ``index``,
        ``lightbox``) and one transition (``action`` plus ``to`` or ``key``).
        The state is rebuilt, the transition applied, and the gallery
        fragment re-rendered.  Unknown entries answer 404, bad transitions 400.

        """
        aggregator = self._aggregator
        config = self._config
        collector = self._collector

        async def gallery_handler(request: Request) -> Any:
            from chirp import Template
            from chirp.http.response import Response

            query = request.query
            entry = aggregator.find(query.get("entry", "") or "")
            items = (
                build_media_items(entry.title, entry.product, entry.images, prefix=config.media_prefix)
                if entry is not None
                else []
            )
            if entry is None or not items:
                return Response(body="Unknown gallery", status=404, content_type="text/plain")

            index = _parse_int(query.get("index"), 0) or 0
            action = query.get("action", "") or ""
            with GalleryState.restore(items, index, query.get("lightbox") == "1") as state:
                if action:
                    try:
                        state.apply(
                            action,
                            index=_parse_int(query.get("to"), None),
                            key=query.get("key", "") or "",
                        )
                    except (GalleryError, IndexError) as exc:
                        return Response(body=str(exc), status=400, content_type="text/plain")
                view = gallery_view(entry.url, state)

            if collector is not None:
                collector.record_gallery(
                    entry.url,
                    action or "render",
                    active_index=view.active_index,
                    lightbox_open=view.lightbox_open,
                )
            return Template("partials/gallery.html", gallery=view)

        gallery_handler.__name__ = "howl_gallery"
        gallery_handler.__qualname__ = "TimelineRouter.howl_gallery"

        self._app.route(GALLERY_ENDPOINT, name="howl:gallery")(gallery_handler)
        self._route_count += 1

    def register_stats_endpoint(self, collector: StackCollector) -> None:
        """Register ``/__howl/stats``, the event-log summary as JSON."""

        async def stats_handler(request: Request) -> Any:
            from chirp.http.response import Response

            payload = json.dumps(
                {"event_log": collector.log.stats(), "warnings": collector.warnings()},
                indent=2,
            )
            return Response(body=payload, status=200, content_type="application/json")

        stats_handler.__name__ = "howl_stats"
        stats_handler.__qualname__ = "TimelineRouter.howl_stats"

        self._app.route(STATS_ENDPOINT, name="howl:stats")(stats_handler)
        self._route_count += 1
