"""Synchronous RediSearch client.

:class:`RediSearchClient` wraps ``redis.Redis`` and exposes the index
lifecycle (``FT.CREATE``, ``FT.DROPINDEX``, ``FT.INFO``), ``FT.SEARCH``
with decoding into caller-owned lists, and a small ``HSET`` helper for
storing documents.  The client keeps no state between calls besides the
underlying connection, so one instance can be shared between threads.

Standard Redis commands stay available through the :attr:`redis`
property.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import redis

from redisearch_client.decoder import parse_search_results
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
    RediSearchIndexExistsError,
    RediSearchTimeoutError,
    RediSearchValidationError,
)
from redisearch_client.models import IndexOptions, SearchOptions

logger = logging.getLogger(__name__)

UNKNOWN_INDEX_MARKER = "unknown index"


class RediSearchClient:
    """Synchronous RediSearch client.

    Parameters
    ----------
    host : str
        Server hostname.  Defaults to ``"localhost"``.
    port : int
        Server port.  Defaults to ``6379``.
    password : str or None
        Authentication password.
    username : str or None
        ACL username.
    db : int
        Database index.  Defaults to ``0``.
    ssl : bool
        Whether to connect with TLS.  Defaults to ``False``.
    ssl_ca_certs : str or None
        Path to the CA certificate file for TLS verification.
    socket_timeout : float or None
        Timeout in seconds for socket reads/writes.
    socket_connect_timeout : float or None
        Timeout in seconds for the initial connection.
    decode_responses : bool
        Decode binary responses to strings.  Defaults to ``True``.
    client : redis.Redis or None
        An existing connection to use instead of opening a new one.  All
        connection arguments are ignored when given.

    Examples
    --------
    >>> client = RediSearchClient()
    >>> client.create_index(IndexOptions(
    ...     index_name="movies",
    ...     prefix=["movie:"],
    ...     schema={"title": FieldSchema(FIELD_TYPE_TEXT)},
    ... ))
    >>> client.add("movie:1", {"title": "Heat", "year": 1995})
    >>> hits = []
    >>> client.search(SearchOptions(index_name="movies", query="heat"), hits)
    1
    >>> hits
    [{'title': 'Heat', 'year': '1995'}]
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        password: Optional[str] = None,
        username: Optional[str] = None,
        db: int = 0,
        ssl: bool = False,
        ssl_ca_certs: Optional[str] = None,
        socket_timeout: Optional[float] = None,
        socket_connect_timeout: Optional[float] = None,
        decode_responses: bool = True,
        client: Optional[redis.Redis] = None,
        **kwargs: Any,
    ) -> None:
        if client is not None:
            self._redis = client
            return
        try:
            self._redis = redis.Redis(
                host=host,
                port=port,
                password=password,
                username=username,
                db=db,
                ssl=ssl,
                ssl_ca_certs=ssl_ca_certs,
                socket_timeout=socket_timeout,
                socket_connect_timeout=socket_connect_timeout,
                decode_responses=decode_responses,
                **kwargs,
            )
        except redis.exceptions.ConnectionError as exc:
            raise RediSearchConnectionError(str(exc)) from exc

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "RediSearchClient":
        """Create a client from a ``redis://`` or ``rediss://`` URL.

        ``decode_responses`` defaults to ``True`` as in the constructor.
        """
        kwargs.setdefault("decode_responses", True)
        return cls(client=redis.Redis.from_url(url, **kwargs))

    # -- context manager -----------------------------------------------------

    def __enter__(self) -> "RediSearchClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # -- lifecycle -----------------------------------------------------------

    @property
    def redis(self) -> redis.Redis:
        """Return the underlying ``redis.Redis`` instance."""
        return self._redis

    def close(self) -> None:
        """Close the connection."""
        self._redis.close()

    def ping(self) -> bool:
        """Check connectivity to the server.

        Raises
        ------
        RediSearchConnectionError
            If the server is unreachable.
        """
        try:
            return self._redis.ping()
        except redis.exceptions.ConnectionError as exc:
            raise RediSearchConnectionError(str(exc)) from exc

    # -- index lifecycle -----------------------------------------------------

    def create_index(self, options: IndexOptions, drop_if_exists: bool = False) -> None:
        """Create an index from *options*.

        Parameters
        ----------
        options : IndexOptions
            The index definition.
        drop_if_exists : bool
            Drop an existing index of the same name first.  Only the index
            is dropped; the indexed hashes are kept.

        Raises
        ------
        RediSearchValidationError
            If ``options.index_name`` is empty.
        RediSearchIndexExistsError
            If the index exists and *drop_if_exists* is false.
        """
        options.validate()
        if self.index_exists(options.index_name):
            if not drop_if_exists:
                raise RediSearchIndexExistsError("index already exists")
            self.drop_index(options.index_name, purge_index_data=False)

        args = encode_create_index(options)
        logger.debug("creating index %s: %s", options.index_name, args)
        self._execute(*args)

    def drop_index(self, name: str, purge_index_data: bool = False) -> None:
        """Drop the index *name*.

        .. warning::
           With *purge_index_data* the server also deletes every hash the
           index covers.  This cannot be undone.
        """
        args = encode_drop_index(name, purge_index_data)
        logger.debug("dropping index %s: %s", name, args)
        self._execute(*args)

    def index_exists(self, name: str) -> bool:
        """Return ``True`` if the index *name* exists.

        An "Unknown index name" error reply means ``False``; any other
        error is raised.
        """
        try:
            self._execute(*encode_index_exists(name))
        except RediSearchCommandError as exc:
            if UNKNOWN_INDEX_MARKER in str(exc).lower():
                return False
            raise
        return True

    # -- search --------------------------------------------------------------

    def search(
        self,
        options: SearchOptions,
        out: List[Any],
        record_type: Any = dict,
    ) -> int:
        """Run ``FT.SEARCH`` and decode the hits into *out*.

        Parameters
        ----------
        options : SearchOptions
            The search request; ``index_name`` and ``query`` are required.
        out : list
            Receives one element per returned document, replacing its
            previous contents.
        record_type : type
            Element type of *out*: ``dict`` (the default) or
            ``Dict[str, str]`` for plain string dicts, ``Dict[str, Any]``,
            or a dataclass whose fields name the hash fields to read (see
            :func:`~redisearch_client.records.wire_field`).

        Returns
        -------
        int
            Total number of matching documents, which may exceed
            ``len(out)`` when a LIMIT applies.

        Raises
        ------
        RediSearchValidationError
            If the index name or query is missing.
        RediSearchTargetError
            If *out* or *record_type* has an unsupported shape.
        RediSearchResponseError
            If the server reply has an unexpected layout.
        """
        options.validate()
        args = encode_search(options)
        logger.debug("searching %s: %s", options.index_name, args)
        raw = self._execute(*args)
        return parse_search_results(raw, out, record_type)

    # -- documents -----------------------------------------------------------

    def add(self, key: str, value: Any, override: bool = False) -> None:
        """Store *value* as a hash under *key*.

        Parameters
        ----------
        key : str
            The hash key.
        value : mapping or dataclass instance
            Only ``str``, ``bytes``, ``bool``, ``int`` and ``float`` values
            are written; other values are skipped.
        override : bool
            Delete *key* before writing, so no stale fields survive.  The
            delete and the write are separate commands: if the second one
            fails the key stays deleted.

        Raises
        ------
        RediSearchValidationError
            If *key* is empty or *value* is ``None``.
        """
        if not key or value is None:
            raise RediSearchValidationError("invalid key or None value")
        mapping = encode_upsert(value)

        if override:
            self._call(self._redis.delete, key)
        if mapping:
            self._call(self._redis.hset, key, mapping=mapping)

    # -- internal helpers ----------------------------------------------------

    def _execute(self, *args: Any) -> Any:
        """Execute a raw command against the Redis connection."""
        return self._call(self._redis.execute_command, *args)

    @staticmethod
    def _call(method: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            return method(*args, **kwargs)
        except redis.exceptions.TimeoutError as exc:
            raise RediSearchTimeoutError(str(exc)) from exc
        except redis.exceptions.ConnectionError as exc:
            raise RediSearchConnectionError(str(exc)) from exc
        except redis.exceptions.ResponseError as exc:
            raise RediSearchCommandError(str(exc)) from exc
