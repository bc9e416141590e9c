"""
redisearch-client -- RediSearch commands on top of redis-py.

Builds ``FT.CREATE``, ``FT.SEARCH``, ``FT.DROPINDEX`` and ``FT.INFO``
commands from dataclass configuration objects and decodes search replies
into plain dicts or your own dataclasses.

Quick start
-----------
::

    from dataclasses import dataclass

    from redisearch_client import (
        FIELD_TYPE_NUMERIC, FIELD_TYPE_TEXT, FieldSchema, IndexOptions,
        RediSearchClient, SearchOptions, schema_opt_sortable,
    )

    @dataclass
    class Movie:
        title: str = ""
        year: int = 0

    client = RediSearchClient(host="localhost", port=6379)
    client.create_index(IndexOptions(
        index_name="movies",
        prefix=["movie:"],
        schema={
            "title": FieldSchema(FIELD_TYPE_TEXT),
            "year": FieldSchema(FIELD_TYPE_NUMERIC, [schema_opt_sortable()]),
        },
    ), drop_if_exists=True)
    client.add("movie:1", Movie(title="Heat", year=1995))

    movies = []
    total = client.search(SearchOptions(index_name="movies", query="heat"), movies, Movie)
    client.close()
"""

from redisearch_client.client import RediSearchClient
from redisearch_client.decoder import convert_value, parse_reply, parse_search_results
from redisearch_client.encoder import (
    encode_create_index,
    encode_drop_index,
    encode_index_exists,
    encode_search,
    encode_upsert,
)
from redisearch_client.exceptions import (
    RediSearchCommandError,
    RediSearchConnectionError,
    RediSearchError,
    RediSearchIndexExistsError,
    RediSearchResponseError,
    RediSearchTargetError,
    RediSearchTimeoutError,
    RediSearchValidationError,
)
from redisearch_client.models import (
    FIELD_TYPE_GEO,
    FIELD_TYPE_NUMERIC,
    FIELD_TYPE_TAG,
    FIELD_TYPE_TEXT,
    INDEX_FLAG_MAX_TEXT_FIELDS,
    INDEX_FLAG_NO_FIELDS,
    INDEX_FLAG_NO_FREQS,
    INDEX_FLAG_NO_HL,
    INDEX_FLAG_NO_OFFSETS,
    INDEX_FLAG_SKIP_INITIAL_SCAN,
    SEARCH_FLAG_NO_STOP_WORDS,
    SEARCH_FLAG_VERBATIM,
    FieldFilter,
    FieldSchema,
    GeoFilter,
    Highlight,
    IndexOptions,
    Limit,
    SearchOptions,
    SortBy,
    Summarize,
    schema_opt_no_index,
    schema_opt_no_stem,
    schema_opt_phonetic,
    schema_opt_sortable,
    schema_opt_tag_separator,
    schema_opt_weight,
)
from redisearch_client.records import wire_field

__all__ = [
    "RediSearchClient",
    # model
    "IndexOptions",
    "FieldSchema",
    "SearchOptions",
    "FieldFilter",
    "GeoFilter",
    "Highlight",
    "Summarize",
    "SortBy",
    "Limit",
    "FIELD_TYPE_TEXT",
    "FIELD_TYPE_TAG",
    "FIELD_TYPE_NUMERIC",
    "FIELD_TYPE_GEO",
    "INDEX_FLAG_NO_OFFSETS",
    "INDEX_FLAG_NO_HL",
    "INDEX_FLAG_NO_FIELDS",
    "INDEX_FLAG_NO_FREQS",
    "INDEX_FLAG_SKIP_INITIAL_SCAN",
    "INDEX_FLAG_MAX_TEXT_FIELDS",
    "SEARCH_FLAG_VERBATIM",
    "SEARCH_FLAG_NO_STOP_WORDS",
    "schema_opt_no_stem",
    "schema_opt_weight",
    "schema_opt_sortable",
    "schema_opt_tag_separator",
    "schema_opt_no_index",
    "schema_opt_phonetic",
    "wire_field",
    # encoding / decoding
    "encode_create_index",
    "encode_search",
    "encode_drop_index",
    "encode_index_exists",
    "encode_upsert",
    "parse_reply",
    "parse_search_results",
    "convert_value",
    # errors
    "RediSearchError",
    "RediSearchConnectionError",
    "RediSearchTimeoutError",
    "RediSearchCommandError",
    "RediSearchIndexExistsError",
    "RediSearchValidationError",
    "RediSearchTargetError",
    "RediSearchResponseError",
]

__version__ = "0.1.0"
