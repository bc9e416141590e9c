"""Index and search configuration model.

Plain dataclasses describing an ``FT.CREATE`` index definition and an
``FT.SEARCH`` request.  They carry no behaviour beyond ``validate()``;
turning them into wire tokens is the job of :mod:`redisearch_client.encoder`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from redisearch_client.exceptions import RediSearchValidationError

# ---------------------------------------------------------------------------
# Field types
# ---------------------------------------------------------------------------

#: Full-text search queries against the value in this field.
FIELD_TYPE_TEXT = "TEXT"
#: Exact-match queries (categories, primary keys) against this field.
FIELD_TYPE_TAG = "TAG"
#: Numeric range queries against this field.
FIELD_TYPE_NUMERIC = "NUMERIC"
#: Radius queries; the value must be ``"<lon>,<lat>"``.
FIELD_TYPE_GEO = "GEO"

# ---------------------------------------------------------------------------
# Index flags
# ---------------------------------------------------------------------------

#: Do not store term offsets (no exact searches or highlighting). Implies NOHL.
INDEX_FLAG_NO_OFFSETS = "NOOFFSETS"
#: Disable highlighting support.
INDEX_FLAG_NO_HL = "NOHL"
#: Do not store field bits per term (no filtering by field).
INDEX_FLAG_NO_FIELDS = "NOFIELDS"
#: Do not store term frequencies.
INDEX_FLAG_NO_FREQS = "NOFREQS"
#: Do not scan and index existing keys on creation.
INDEX_FLAG_SKIP_INITIAL_SCAN = "SKIPINITIALSCAN"
#: Encode the index as if it had more than 32 text fields.
INDEX_FLAG_MAX_TEXT_FIELDS = "MAXTEXTFIELDS"

# ---------------------------------------------------------------------------
# Search flags
# ---------------------------------------------------------------------------

#: Search the query terms verbatim, without stemming expansion.
SEARCH_FLAG_VERBATIM = "VERBATIM"
#: Do not filter stopwords from the query.
SEARCH_FLAG_NO_STOP_WORDS = "NOSTOPWORDS"

# NOCONTENT, WITHSCORES, WITHPAYLOADS and WITHSORTKEYS change the reply
# layout and are not understood by the result decoder.

# ---------------------------------------------------------------------------
# Schema options
# ---------------------------------------------------------------------------

Token = Union[str, int, bytes]
SchemaOption = Tuple[Token, ...]


def schema_opt_no_stem() -> SchemaOption:
    """Disable stemming when indexing a TEXT field (useful for names)."""
    return ("NOSTEM",)


def schema_opt_weight(weight: float) -> SchemaOption:
    """Importance of a TEXT field when scoring results (defaults to 1)."""
    return ("WEIGHT", "%.1f" % weight)


def schema_opt_sortable() -> SchemaOption:
    """Allow sorting results by this field.

    Adds memory overhead, so avoid it on large text fields.
    """
    return ("SORTABLE",)


def schema_opt_tag_separator(character: Union[str, bytes]) -> SchemaOption:
    """How a TAG field is split into individual tags (default ``,``).

    Raises
    ------
    RediSearchValidationError
        If *character* is not exactly one byte.
    """
    if isinstance(character, str):
        character = character.encode("utf-8")
    if len(character) != 1:
        raise RediSearchValidationError(
            "tag separator must be a single character, got %r" % (character,)
        )
    return ("SEPARATOR", character)


def schema_opt_no_index() -> SchemaOption:
    """Store the field without indexing it; pair with SORTABLE."""
    return ("NOINDEX",)


def schema_opt_phonetic(matcher: str) -> SchemaOption:
    """Phonetic matching on a TEXT field.

    *matcher* selects the algorithm and language: ``dm:en``, ``dm:fr``,
    ``dm:pt`` or ``dm:es`` (Double Metaphone).
    """
    return ("PHONETIC", matcher)


# ---------------------------------------------------------------------------
# Index definition
# ---------------------------------------------------------------------------


@dataclass
class FieldSchema:
    """Type and indexing options of one indexed hash field.

    Option applicability depends on the type but is not checked here;
    the server rejects invalid combinations.
    """

    type: str
    options: List[SchemaOption] = field(default_factory=list)


@dataclass
class IndexOptions:
    """An ``FT.CREATE`` index definition.

    Parameters
    ----------
    index_name : str
        The index name.  Required.
    prefix : list of str
        Key prefixes to index.  The server indexes every key when empty.
    filter : str
        Aggregation-language filter expression (``@__key`` is available).
    language : str
        Default document language.
    language_field : str
        Hash field holding the document language.
    score : float
        Default document score; only sent when greater than zero.
    score_field : str
        Hash field holding the document score (0.0--1.0).
    payload_field : str
        Hash field holding a binary-safe document payload.
    flags : list of str
        ``INDEX_FLAG_*`` constants, sent verbatim.
    stop_words : list of str
        Custom stopword list.  The server default is used when empty.
    temporary : int
        Seconds of inactivity after which the index expires; only sent
        when greater than zero.
    schema : dict
        Field name to :class:`FieldSchema`.  Encoded in iteration order,
        which is not part of the contract.
    """

    index_name: str
    prefix: List[str] = field(default_factory=list)
    filter: str = ""
    language: str = ""
    language_field: str = ""
    score: float = 0.0
    score_field: str = ""
    payload_field: str = ""
    flags: List[str] = field(default_factory=list)
    stop_words: List[str] = field(default_factory=list)
    temporary: int = 0
    schema: Dict[str, FieldSchema] = field(default_factory=dict)

    def validate(self) -> None:
        if not self.index_name:
            raise RediSearchValidationError("missing required index_name")


# ---------------------------------------------------------------------------
# Search request
# ---------------------------------------------------------------------------


@dataclass
class FieldFilter:
    """Numeric range filter on a NUMERIC field.

    ``exclusive`` leaves out the bounds themselves.
    """

    numeric_field_name: str
    min: float
    max: float
    exclusive: bool = False


@dataclass
class GeoFilter:
    """Radius filter around a point; ``unit`` is one of m, km, mi, ft."""

    geo_field_name: str
    longitude: float
    latitude: float
    radius: float
    unit: str = ""


@dataclass
class Highlight:
    """Wrap occurrences of matched terms in ``open_tag``/``close_tag``.

    Every returned field is highlighted when ``fields`` is empty.  Tags
    are only sent when both are set.
    """

    fields: List[str] = field(default_factory=list)
    open_tag: str = ""
    close_tag: str = ""


@dataclass
class Summarize:
    """Return only the fragments of a field that contain matched text."""

    fields: List[str] = field(default_factory=list)
    #: Number of fragments; server default 3.
    fragments: int = 0
    #: Context words per fragment; server default 20.
    length: int = 0
    #: Fragment separator; server default ``...``.
    separator: str = ""


@dataclass
class SortBy:
    field_name: str
    descending: bool = False


@dataclass
class Limit:
    """Zero-based result window.  The server default is ``0 10``."""

    offset: int = 0
    max: int = 10


@dataclass
class SearchOptions:
    """An ``FT.SEARCH`` request.

    ``index_name`` and ``query`` are required; every other modifier is
    optional and only sent when set.  Modifiers are always encoded in the
    same order, whatever order they are given in.

    Parameters
    ----------
    index_name : str
        Index created with ``FT.CREATE``.
    query : str
        RediSearch query string.
    flags : list of str
        ``SEARCH_FLAG_*`` constants.
    filters : list of FieldFilter
        Numeric range filters.
    geo_filter : GeoFilter or None
        Radius filter.
    in_keys : list of str
        Restrict results to these keys.
    in_fields : list of str
        Restrict matches to these document fields.
    return_fields : list of str
        Only return these fields.
    summarize : Summarize or None
    highlight : Highlight or None
    slop : int or None
        Maximum number of unmatched offsets between phrase terms.
        ``0`` is a meaningful value, hence ``None`` for "not set".
    language : str
        Stemmer language for query expansion.
    expander : str
        Custom query expander.
    scorer : str
        Custom scoring function.
    payload : str
        Payload exposed to custom scoring functions.
    sort_by : SortBy or None
    limit : Limit or None
    """

    index_name: str
    query: str
    flags: List[str] = field(default_factory=list)
    filters: List[FieldFilter] = field(default_factory=list)
    geo_filter: Optional[GeoFilter] = None
    in_keys: List[str] = field(default_factory=list)
    in_fields: List[str] = field(default_factory=list)
    return_fields: List[str] = field(default_factory=list)
    summarize: Optional[Summarize] = None
    highlight: Optional[Highlight] = None
    slop: Optional[int] = None
    language: str = ""
    expander: str = ""
    scorer: str = ""
    payload: str = ""
    sort_by: Optional[SortBy] = None
    limit: Optional[Limit] = None

    def validate(self) -> None:
        if not self.index_name or not self.query:
            raise RediSearchValidationError("missing required (index_name or query)")
