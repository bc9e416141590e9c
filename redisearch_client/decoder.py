"""Decode ``FT.SEARCH`` replies into caller-owned lists.

The reply layout is::

    [total, key1, [field1, value1, ...], key2, [field1, value1, ...], ...]

Each document becomes a flat ``Dict[str, str]``.  Those dicts are either
handed to the caller as they are, or converted into a record type: a
dataclass (see :mod:`redisearch_client.records`) or a typed ``Dict``.
"""

from __future__ import annotations

import collections.abc
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Tuple, get_args, get_origin

from redisearch_client.exceptions import RediSearchResponseError, RediSearchTargetError
from redisearch_client.records import RecordLayout, record_layout, zero_value

logger = logging.getLogger(__name__)

Record = Dict[str, str]

_MAPPING_ORIGINS = (
    dict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)
_DYNAMIC_VALUE_TYPES = (Any, object)
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


# ---------------------------------------------------------------------------
# Wire parsing
# ---------------------------------------------------------------------------


def _wire_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise RediSearchResponseError(
                "invalid redis response field encoding: %s" % exc
            ) from exc
    raise RediSearchResponseError(
        "invalid redis response field type: %s" % type(value).__name__
    )


def _parse_document(fields: Any) -> Record:
    if not isinstance(fields, (list, tuple)):
        raise RediSearchResponseError(
            "invalid redis response hash value type: %s" % type(fields).__name__
        )
    if len(fields) % 2:
        raise RediSearchResponseError(
            "invalid redis response hash value length: %d" % len(fields)
        )
    return {
        _wire_str(fields[i]): _wire_str(fields[i + 1])
        for i in range(0, len(fields), 2)
    }


def parse_reply(raw: Any) -> Tuple[int, List[Record]]:
    """Split a raw ``FT.SEARCH`` reply into ``(total, records)``.

    A reply with fewer than three elements holds no documents and yields
    ``(0, [])``.

    Raises
    ------
    RediSearchResponseError
        If the reply does not follow the expected layout.
    """
    if not isinstance(raw, (list, tuple)):
        raise RediSearchResponseError(
            "invalid redis response type: %s" % type(raw).__name__
        )
    if len(raw) < 3:
        return 0, []

    total = raw[0]
    if not isinstance(total, int) or isinstance(total, bool):
        raise RediSearchResponseError(
            "invalid redis response.total type: %s" % type(total).__name__
        )
    if len(raw) % 2 == 0:
        raise RediSearchResponseError(
            "invalid redis response length: %d" % len(raw)
        )
    return total, [_parse_document(raw[i + 1]) for i in range(1, len(raw), 2)]


# ---------------------------------------------------------------------------
# Record conversion
# ---------------------------------------------------------------------------


def convert_value(kind: type, value: str) -> Any:
    """Convert a wire string to *kind*.

    Unparseable numbers become ``0``/``0.0``.  Integers must be plain
    base-10 digits with an optional sign (no spaces or underscores).  A
    bool is true when the value starts with ``t`` or ``1``.
    """
    if kind is str:
        return value
    if kind is bool:
        return value[:1] in ("t", "1")
    if kind is int:
        if _INTEGER_RE.fullmatch(value) is None:
            return 0
        return int(value, 10)
    if kind is float:
        try:
            return float(value)
        except ValueError:
            return 0.0
    raise RediSearchTargetError("unsupported member type: %r" % (kind,))


def _build_record(layout: RecordLayout, record: Record) -> Any:
    kwargs: Dict[str, Any] = {}
    late: Dict[str, Any] = {}
    for name, value in record.items():
        f = layout.fields.get(name)
        if f is None:
            continue
        if f.kind is None:
            logger.warning(
                "%s:%r type is not supported and will be ignored", name, f.annotation
            )
            continue
        target = kwargs if f.init else late
        target[f.attr] = convert_value(f.kind, value)

    for attr, annotation in layout.required:
        if attr not in kwargs:
            kwargs[attr] = zero_value(annotation)
    obj = layout.record_type(**kwargs)
    for attr, value in late.items():
        setattr(obj, attr, value)
    for attr, annotation in layout.unset:
        if not hasattr(obj, attr):
            setattr(obj, attr, zero_value(annotation))
    return obj


def _record_converter(record_type: Any) -> Optional[Callable[[Record], Any]]:
    """Return the function turning one parsed document into *record_type*.

    ``None`` means the parsed dicts are used as they are.
    """
    if record_type is dict:
        return None

    origin = get_origin(record_type)
    if record_type in _MAPPING_ORIGINS or origin in _MAPPING_ORIGINS:
        args = get_args(record_type)
        if not args:
            return None
        key_type, value_type = args
        if key_type is not str:
            raise RediSearchTargetError("map key must be of type str")
        if value_type is str:
            return None
        if value_type in _DYNAMIC_VALUE_TYPES:
            return dict
        raise RediSearchTargetError("map value type must be of type str or Any")

    if isinstance(record_type, type):
        layout = record_layout(record_type)
        return lambda record: _build_record(layout, record)

    raise RediSearchTargetError(
        "record type must be a dataclass or a string-keyed dict, got %r"
        % (record_type,)
    )


def parse_search_results(raw: Any, out: Any, record_type: Any = dict) -> int:
    """Decode *raw* into the list *out* and return the total match count.

    Parameters
    ----------
    raw : list
        The ``FT.SEARCH`` reply.
    out : list
        Caller-owned list or other mutable sequence.  Its previous
        contents are replaced by one element per returned document, and
        only once the whole reply has been decoded.
    record_type : type
        ``dict`` / ``Dict[str, str]`` for dynamic records,
        ``Dict[str, Any]`` for fresh dict copies, or a dataclass.

    Raises
    ------
    RediSearchTargetError
        If *out* is not a mutable sequence or *record_type* is unsupported.
    RediSearchResponseError
        If *raw* does not follow the ``FT.SEARCH`` reply layout.
    """
    if out is None:
        raise RediSearchTargetError("invalid out type: None")
    if not isinstance(out, collections.abc.MutableSequence) or isinstance(out, bytearray):
        raise RediSearchTargetError(
            "out arg must reference a mutable sequence, got %s" % type(out).__name__
        )
    convert = _record_converter(record_type)

    total, records = parse_reply(raw)
    if convert is not None:
        records = [convert(record) for record in records]
    out.clear()
    out.extend(records)
    return total
