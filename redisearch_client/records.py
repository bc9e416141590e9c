"""Typed record support.

A typed search record is a dataclass.  Each field maps to the hash field
of the same name unless its metadata says otherwise::

    @dataclass
    class Movie:
        title: str = ""
        year: int = wire_field("release_year", default=0)
        notes: str = wire_field("-", default="")   # never read or written

The mapping from wire name to attribute is computed once per class and
cached, so decoding many records does not repeat the introspection.
"""

from __future__ import annotations

import builtins
import dataclasses
import functools
import types
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union, get_args, get_origin, get_type_hints

from redisearch_client.exceptions import RediSearchTargetError

#: Dataclass field metadata key holding the wire (hash field) name.
WIRE_NAME_KEY = "redisearch"

#: Member types a wire string can be converted to.
PRIMITIVE_TYPES = (str, bool, int, float)

_UNION_TYPES = (Union, getattr(types, "UnionType", Union))
_CONTAINER_TYPES = (list, dict, set, frozenset, tuple)


def wire_field(name: str, **kwargs: Any) -> Any:
    """Declare a dataclass field stored under the hash field *name*.

    ``"-"`` or ``""`` keeps the field out of both search results and
    :meth:`~redisearch_client.client.RediSearchClient.add`.  Remaining
    keyword arguments go to :func:`dataclasses.field`.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[WIRE_NAME_KEY] = name
    return dataclasses.field(metadata=metadata, **kwargs)


@dataclass(frozen=True)
class RecordField:
    """How one dataclass attribute is read from and written to the wire."""

    attr: str
    wire_name: str
    annotation: Any
    #: One of :data:`PRIMITIVE_TYPES`, or ``None`` when unsupported.
    kind: Optional[type]
    init: bool


@dataclass(frozen=True)
class RecordLayout:
    """Field table of a record dataclass, built once per class."""

    record_type: type
    #: wire name -> field
    fields: Dict[str, RecordField]
    #: ``(attr, annotation)`` of init fields that have no default
    required: Tuple[Tuple[str, Any], ...]
    #: ``(attr, annotation)`` of non-init fields that have no default
    unset: Tuple[Tuple[str, Any], ...] = ()


def primitive_kind(annotation: Any) -> Optional[type]:
    """Return the primitive type behind *annotation*, unwrapping ``Optional``."""
    if isinstance(annotation, str):
        annotation = getattr(builtins, annotation, None)
    if annotation in PRIMITIVE_TYPES:
        return annotation
    if get_origin(annotation) in _UNION_TYPES:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1 and args[0] in PRIMITIVE_TYPES:
            return args[0]
    return None


def zero_value(annotation: Any) -> Any:
    kind = primitive_kind(annotation)
    if kind is not None:
        return kind()
    origin = get_origin(annotation) or annotation
    if origin in _CONTAINER_TYPES:
        return origin()
    return None


def _wire_name(f: dataclasses.Field) -> Optional[str]:
    tag = f.metadata.get(WIRE_NAME_KEY)
    if tag is None:
        return f.name
    # first comma-separated value wins
    name = str(tag).split(",")[0]
    if tag == "" or name == "-":
        return None
    return name or f.name


def _has_default(f: dataclasses.Field) -> bool:
    return (
        f.default is not dataclasses.MISSING
        or f.default_factory is not dataclasses.MISSING
    )


@functools.lru_cache(maxsize=None)
def record_layout(record_type: type) -> RecordLayout:
    """Return the cached :class:`RecordLayout` of a record dataclass.

    Raises
    ------
    RediSearchTargetError
        If *record_type* is not a dataclass type.
    """
    if not isinstance(record_type, type) or not dataclasses.is_dataclass(record_type):
        raise RediSearchTargetError(
            "record type must be a dataclass, got %r" % (record_type,)
        )
    try:
        hints = get_type_hints(record_type)
    except (NameError, TypeError):
        # unresolvable forward references; fall back to the raw annotations
        hints = {}

    table: Dict[str, RecordField] = {}
    required = []
    unset = []
    for f in dataclasses.fields(record_type):
        annotation = hints.get(f.name, f.type)
        if not _has_default(f):
            (required if f.init else unset).append((f.name, annotation))
        name = _wire_name(f)
        if name is None:
            continue
        table[name] = RecordField(
            attr=f.name,
            wire_name=name,
            annotation=annotation,
            kind=primitive_kind(annotation),
            init=f.init,
        )
    return RecordLayout(
        record_type=record_type,
        fields=table,
        required=tuple(required),
        unset=tuple(unset),
    )
