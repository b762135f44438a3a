"""Content layer — changelog records, products, and aggregation.

Loads Markdown entries through Bengal, derives each entry's product from its
storage path, resolves product metadata, and answers filtered timeline
queries.
"""

from howl.content.changelog import (
    ChangelogAggregator,
    ContentEntry,
    load_all,
    parse_entry_date,
    product_from_path,
    query_by_product,
)
from howl.content.products import (
    Product,
    ProductMeta,
    ProductRegistry,
    discover_products,
    slug_to_display_name,
)
from howl.content.source import ContentRecord, ContentSource, make_record
from howl.content.watcher import ChangeEvent, ContentWatcher

__all__ = [
    "ChangeEvent",
    "ChangelogAggregator",
    "ContentEntry",
    "ContentRecord",
    "ContentSource",
    "ContentWatcher",
    "Product",
    "ProductMeta",
    "ProductRegistry",
    "discover_products",
    "load_all",
    "make_record",
    "parse_entry_date",
    "product_from_path",
    "query_by_product",
    "slug_to_display_name",
]
