"""Persistence gateway: request/response style access to the SQL store.

Routes never touch the engine directly. They receive a :class:`Gateway` through
``Depends(get_gateway)`` and call one of three verbs:

* ``exec_rows``  - run a query and return every row as a dict
* ``exec_one``   - run a query and return the first row, or ``None``
* ``exec_write`` - run a statement and return the inserted id / affected count

Outside :meth:`Gateway.transaction` each call commits on its own connection.
Inside it, every call shares one connection and the block commits (or rolls
back) as a unit.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection, CursorResult, Engine
from sqlalchemy.exc import SQLAlchemyError

from leadhub.app.core.errors import StorageError

logger = logging.getLogger(__name__)

Params = Optional[Mapping[str, Any]]


@dataclass(frozen=True)
class WriteResult:
    inserted_id: Optional[int]
    affected_count: int


class Gateway:
    def __init__(self, engine: Engine):
        self.engine = engine
        self._connection: Optional[Connection] = None

    @property
    def in_transaction(self) -> bool:
        return self._connection is not None

    @contextmanager
    def transaction(self) -> Iterator["Gateway"]:
        """Run the enclosed gateway calls as one commit.

        Nested use joins the outer transaction.
        """
        if self._connection is not None:
            yield self
            return
        try:
            with self.engine.begin() as connection:
                self._connection = connection
                try:
                    yield self
                finally:
                    self._connection = None
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    def _run(self, sql: str, params: Params, collect: Callable[[CursorResult], Any]):
        statement = text(sql)
        try:
            if self._connection is not None:
                return collect(self._connection.execute(statement, dict(params or {})))
            with self.engine.begin() as connection:
                return collect(connection.execute(statement, dict(params or {})))
        except SQLAlchemyError as exc:
            logger.debug("Statement failed: %s", sql)
            raise StorageError(str(exc)) from exc

    def exec_rows(self, sql: str, params: Params = None) -> list[dict]:
        return self._run(sql, params, lambda result: [dict(row) for row in result.mappings()])

    def exec_one(self, sql: str, params: Params = None) -> Optional[dict]:
        def first(result):
            row = result.mappings().first()
            return dict(row) if row is not None else None

        return self._run(sql, params, first)

    def exec_write(self, sql: str, params: Params = None) -> WriteResult:
        return self._run(sql, params, lambda result: WriteResult(result.lastrowid, result.rowcount))
