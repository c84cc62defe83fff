"""In-memory stand-in for the supabase-py sync client.

Supports the PostgREST builder calls the stores make: select/insert/update/
delete, eq/gte/lte/in_/ilike, ``not_`` negation, ``or_`` filter strings,
order, limit, single and rpc. Embedded resources in select strings are
ignored: seed rows with nested dicts, or register a foreign key with
``embed`` so rows inserted during a test come back joined.
"""

import copy
import re
import uuid
from typing import Any, Callable, Optional


class FakeAPIError(Exception):
    """Mimics postgrest.exceptions.APIError."""


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


def _like_to_regex(pattern: str) -> re.Pattern:
    parts = [re.escape(p) for p in pattern.split("%")]
    return re.compile("^" + ".*".join(parts) + "$", re.IGNORECASE | re.DOTALL)


def _coerce(raw: str) -> Any:
    if raw == "true":
        return True
    if raw == "false":
        return False
    if raw == "null":
        return None
    return raw


def _compare_eq(value: Any, expected: Any) -> bool:
    if isinstance(expected, str) and not isinstance(value, str) and value is not None:
        return str(value) == expected
    return value == expected


def _split_conditions(expression: str) -> list[str]:
    """Split on top-level commas. Double-quoted values may hold commas and \\-escapes."""
    parts, current, quoted, escaped = [], [], False, False
    for char in expression:
        if escaped:
            current.append(char)
            escaped = False
        elif quoted and char == "\\":
            current.append(char)
            escaped = True
        elif char == '"':
            current.append(char)
            quoted = not quoted
        elif char == "," and not quoted:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    if quoted:
        raise FakeAPIError(f"unterminated quote in logic filter: {expression}")
    parts.append("".join(current))
    return parts


def _unquote(raw: str) -> str:
    if len(raw) >= 2 and raw[0] == raw[-1] == '"':
        return re.sub(r"\\(.)", r"\1", raw[1:-1])
    if any(c in raw for c in ',()"'):
        raise FakeAPIError(f"reserved character in unquoted filter value: {raw}")
    return raw


def _parse_or(expression: str) -> Callable[[dict], bool]:
    clauses = []
    for part in _split_conditions(expression):
        column, op, raw = part.split(".", 2)
        clauses.append((column, op, _unquote(raw)))

    def predicate(row: dict) -> bool:
        for column, op, raw in clauses:
            value = row.get(column)
            if op == "eq" and _compare_eq(value, _coerce(raw)):
                return True
            if op == "ilike" and value is not None and _like_to_regex(raw).match(str(value)):
                return True
        return False

    return predicate


class _Negated:
    def __init__(self, query: "FakeQuery"):
        self._query = query

    def in_(self, column: str, values):
        values = list(values)
        self._query.filters.append(("not.in", column, values))
        self._query._predicates.append(lambda row: row.get(column) not in values)
        return self._query

    def eq(self, column: str, value):
        self._query.filters.append(("not.eq", column, value))
        self._query._predicates.append(lambda row: not _compare_eq(row.get(column), value))
        return self._query


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.payload: Any = None
        self.filters: list[tuple] = []
        self._predicates: list[Callable[[dict], bool]] = []
        self._order: Optional[tuple[str, bool]] = None
        self._limit: Optional[int] = None
        self._single = False

    # operations
    def select(self, columns: str = "*", count=None):
        self.columns = columns
        return self

    def insert(self, data):
        self.op = "insert"
        self.payload = data
        return self

    def update(self, data: dict):
        self.op = "update"
        self.payload = data
        return self

    def delete(self):
        self.op = "delete"
        return self

    # filters
    def _add(self, name: str, column: str, value, predicate):
        self.filters.append((name, column, value))
        self._predicates.append(predicate)
        return self

    def eq(self, column: str, value):
        return self._add("eq", column, value, lambda row: _compare_eq(row.get(column), value))

    def neq(self, column: str, value):
        return self._add("neq", column, value, lambda row: not _compare_eq(row.get(column), value))

    def gte(self, column: str, value):
        return self._add("gte", column, value, lambda row: row.get(column) is not None and row[column] >= value)

    def lte(self, column: str, value):
        return self._add("lte", column, value, lambda row: row.get(column) is not None and row[column] <= value)

    def in_(self, column: str, values):
        values = list(values)
        return self._add("in", column, values, lambda row: row.get(column) in values)

    def ilike(self, column: str, pattern: str):
        regex = _like_to_regex(pattern)
        return self._add("ilike", column, pattern, lambda row: row.get(column) is not None and bool(regex.match(str(row[column]))))

    def or_(self, expression: str):
        return self._add("or", "", expression, _parse_or(expression))

    @property
    def not_(self) -> _Negated:
        return _Negated(self)

    # modifiers
    def order(self, column: str, desc: bool = False, **kwargs):
        self._order = (column, desc)
        return self

    def limit(self, count: int):
        self._limit = count
        return self

    def single(self):
        self._single = True
        return self

    def _matches(self, row: dict) -> bool:
        return all(predicate(row) for predicate in self._predicates)

    def execute(self) -> FakeResponse:
        self.db.calls.append(self)
        failure = self.db.failures.get((self.table, self.op))
        if failure is not None:
            raise failure

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for item in items:
                row = {"id": str(uuid.uuid4()), **copy.deepcopy(item)}
                rows.append(row)
                inserted.append(copy.deepcopy(row))
            return FakeResponse(inserted)

        matched = [row for row in rows if self._matches(row)]

        if self.op == "update":
            for row in matched:
                row.update(copy.deepcopy(self.payload))
            return FakeResponse(copy.deepcopy(matched))

        if self.op == "delete":
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return FakeResponse(copy.deepcopy(matched))

        if self._order is not None:
            column, desc = self._order
            matched = sorted(matched, key=lambda row: (row.get(column) is None, row.get(column) or ""), reverse=desc)
        if self._limit is not None:
            matched = matched[: self._limit]

        data = [self.db._embed(self.table, row) for row in matched]
        if self._single:
            if len(data) != 1:
                raise FakeAPIError("JSON object requested, multiple (or no) rows returned")
            return FakeResponse(data[0])
        return FakeResponse(data, count=len(data))


class FakeRPC:
    def __init__(self, db: "FakeSupabase", name: str, params: dict):
        self.db = db
        self.name = name
        self.params = params

    def execute(self) -> FakeResponse:
        self.db.rpc_calls.append((self.name, self.params))
        failure = self.db.failures.get(("rpc", self.name))
        if failure is not None:
            raise failure
        return FakeResponse(None)


class FakeSupabase:
    """Tables are lists of row dicts keyed by table name."""

    def __init__(self, tables: Optional[dict[str, list[dict]]] = None):
        self.tables: dict[str, list[dict]] = copy.deepcopy(tables or {})
        self.calls: list[FakeQuery] = []
        self.rpc_calls: list[tuple[str, dict]] = []
        self.failures: dict[tuple[str, str], Exception] = {}
        self.embeds: dict[str, list[tuple[str, str, str]]] = {}

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict) -> FakeRPC:
        return FakeRPC(self, name, params)

    def embed(self, table: str, alias: str, target_table: str, fk_column: str) -> None:
        """Attach ``target_table`` rows under ``alias`` when selecting ``table``."""
        self.embeds.setdefault(table, []).append((alias, target_table, fk_column))

    def _embed(self, table: str, row: dict) -> dict:
        row = copy.deepcopy(row)
        for alias, target_table, fk_column in self.embeds.get(table, []):
            if row.get(alias) is not None:
                continue
            target = next(
                (r for r in self.tables.get(target_table, []) if r.get("id") == row.get(fk_column)),
                None,
            )
            row[alias] = copy.deepcopy(target)
        return row

    def fail(self, table: str, op: str, error: Optional[Exception] = None) -> None:
        """Make ``execute`` raise for (table, op). Use ``("rpc", name)`` for RPCs."""
        self.failures[(table, op)] = error or FakeAPIError(f"{op} on {table} failed")

    def calls_to(self, table: str, op: Optional[str] = None) -> list[FakeQuery]:
        return [c for c in self.calls if c.table == table and (op is None or c.op == op)]


class InterleavingClient:
    """Drop-in for ``SupabaseClient`` that awaits ``on_exit`` once, after the
    first query block has executed and before its result is applied.

    Lets a test tear a store down or switch identity while a fetch is in flight.
    """

    def __init__(self, db: FakeSupabase, on_exit: Callable[[], Any]):
        self.db = db
        self._on_exit = on_exit
        self.fired = False

    def __call__(self) -> "InterleavingClient":
        return self

    async def __aenter__(self) -> FakeSupabase:
        return self.db

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if not self.fired:
            self.fired = True
            await self._on_exit()
        return False
