"""Build RediSearch command token lists from configuration objects.

Every function here is pure: it reads a configuration object and returns
the tokens to hand to ``redis.Redis.execute_command``.  Optional blocks
are left out entirely when their value is empty or zero, since the
protocol only knows a block by its presence.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, List, Mapping, Sequence

from redisearch_client.exceptions import RediSearchValidationError
from redisearch_client.models import FieldFilter, IndexOptions, SearchOptions
from redisearch_client.records import record_layout

CMD_CREATE = "FT.CREATE"
CMD_SEARCH = "FT.SEARCH"
CMD_DROP_INDEX = "FT.DROPINDEX"
CMD_INFO = "FT.INFO"

DEFAULT_GEO_UNIT = "m"

_UPSERT_TYPES = (str, bytes, bool, int, float)


def _counted(keyword: str, items: Sequence[Any]) -> List[Any]:
    """``KEYWORD <n> item1 ... itemN``"""
    return [keyword, len(items), *items]


def encode_create_index(options: IndexOptions) -> List[Any]:
    """Return the ``FT.CREATE`` tokens for *options*.

    Schema fields are emitted in the iteration order of
    ``options.schema``; that order carries no meaning to the server.
    """
    args: List[Any] = [CMD_CREATE, options.index_name, "ON", "HASH"]
    if options.prefix:
        args.extend(_counted("PREFIX", options.prefix))
    if options.filter:
        args.extend(["FILTER", options.filter])
    if options.language:
        args.extend(["LANGUAGE", options.language])
    if options.language_field:
        args.extend(["LANGUAGE_FIELD", options.language_field])
    if options.score > 0:
        args.extend(["SCORE", options.score])
    if options.score_field:
        args.extend(["SCORE_FIELD", options.score_field])
    if options.payload_field:
        args.extend(["PAYLOAD_FIELD", options.payload_field])
    if options.temporary > 0:
        args.extend(["TEMPORARY", int(options.temporary)])
    if options.stop_words:
        args.extend(_counted("STOPWORDS", options.stop_words))
    args.extend(options.flags)
    if options.schema:
        args.append("SCHEMA")
        for name, schema in options.schema.items():
            args.extend([name, schema.type])
            for option in schema.options:
                args.extend(option)
    return args


def _filter_bounds(f: FieldFilter) -> List[Any]:
    if f.exclusive:
        return ["(%s" % f.min, "(%s" % f.max]
    return [f.min, f.max]


def encode_search(options: SearchOptions) -> List[Any]:
    """Return the ``FT.SEARCH`` tokens for *options*.

    Modifier blocks always come out in this order: flags, FILTER,
    GEOFILTER, INKEYS, INFIELDS, RETURN, SUMMARIZE, HIGHLIGHT, SLOP,
    LANGUAGE, EXPANDER, SCORER, PAYLOAD, SORTBY, LIMIT.
    """
    args: List[Any] = [CMD_SEARCH, options.index_name, options.query]
    args.extend(options.flags)

    for f in options.filters:
        args.extend(["FILTER", f.numeric_field_name, *_filter_bounds(f)])

    geo = options.geo_filter
    if geo is not None:
        args.extend([
            "GEOFILTER",
            geo.geo_field_name,
            geo.longitude,
            geo.latitude,
            geo.radius,
            geo.unit or DEFAULT_GEO_UNIT,
        ])

    if options.in_keys:
        args.extend(_counted("INKEYS", options.in_keys))
    if options.in_fields:
        args.extend(_counted("INFIELDS", options.in_fields))
    if options.return_fields:
        args.extend(_counted("RETURN", options.return_fields))

    summarize = options.summarize
    if summarize is not None:
        args.append("SUMMARIZE")
        if summarize.fields:
            args.extend(_counted("FIELDS", summarize.fields))
        if summarize.fragments:
            args.extend(["FRAGS", summarize.fragments])
        if summarize.length:
            args.extend(["LEN", summarize.length])
        if summarize.separator:
            args.extend(["SEPARATOR", summarize.separator])

    highlight = options.highlight
    if highlight is not None:
        args.append("HIGHLIGHT")
        if highlight.fields:
            args.extend(_counted("FIELDS", highlight.fields))
        if highlight.open_tag and highlight.close_tag:
            args.extend(["TAGS", highlight.open_tag, highlight.close_tag])

    if options.slop is not None:
        args.extend(["SLOP", options.slop])
    if options.language:
        args.extend(["LANGUAGE", options.language])
    if options.expander:
        args.extend(["EXPANDER", options.expander])
    if options.scorer:
        args.extend(["SCORER", options.scorer])
    if options.payload:
        args.extend(["PAYLOAD", options.payload])

    if options.sort_by is not None:
        order = "DESC" if options.sort_by.descending else "ASC"
        args.extend(["SORTBY", options.sort_by.field_name, order])

    if options.limit is not None:
        args.extend(["LIMIT", options.limit.offset, options.limit.max])
    return args


def encode_drop_index(name: str, purge_index_data: bool = False) -> List[Any]:
    """Return the ``FT.DROPINDEX`` tokens; ``DD`` also deletes the documents."""
    args: List[Any] = [CMD_DROP_INDEX, name]
    if purge_index_data:
        args.append("DD")
    return args


def encode_index_exists(name: str) -> List[Any]:
    return [CMD_INFO, name]


def _upsert_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "1" if value else "0"
    return value


def encode_upsert(value: Any) -> Dict[Any, Any]:
    """Flatten a mapping or dataclass instance into an ``HSET`` mapping.

    Only ``str``, ``bytes``, ``bool``, ``int`` and ``float`` values are
    kept; anything else is silently dropped.  Dataclass attributes are
    written under their wire name (see :func:`~redisearch_client.records.wire_field`).

    Raises
    ------
    RediSearchValidationError
        If *value* is neither a mapping nor a dataclass instance.
    """
    if isinstance(value, Mapping):
        pairs = list(value.items())
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        layout = record_layout(type(value))
        pairs = [(name, getattr(value, f.attr, None)) for name, f in layout.fields.items()]
    else:
        raise RediSearchValidationError(
            "value must be a mapping or a dataclass instance, got %s"
            % type(value).__name__
        )
    return {
        key: _upsert_value(val)
        for key, val in pairs
        if isinstance(val, _UPSERT_TYPES)
    }
