"""In-memory stand-in for the parts of the supabase client the services use."""

import re
import threading
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

OTP_CODE = "123456"

_AGGREGATE = re.compile(r"^(?:(?P<alias>\w+):)?(?P<column>\w+)\.(?P<fn>count|sum|avg|min|max)\(\)$")

TABLE_DEFAULTS = {
    "projects": {"description": None, "color": "bg-blue-500", "is_public": False},
    "svgs": {
        "description": None, "file_size": None, "tags": None,
        "views": 0, "downloads": 0, "favorited": False,
    },
    "profiles": {"display_name": None, "avatar_url": None},
    "notifications": {"data": None},
}


class FakeBackendError(Exception):
    pass


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


def _ilike(pattern):
    out, chars = [], iter(pattern)
    for ch in chars:
        if ch == "\\":
            out.append(re.escape(next(chars, "\\")))
        elif ch == "%":
            out.append(".*")
        elif ch == "_":
            out.append(".")
        else:
            out.append(re.escape(ch))
    return re.compile("^" + "".join(out) + "$", re.IGNORECASE | re.DOTALL)


def _sort_key(value):
    return (value is None, value if value is not None else 0)


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.payload = None
        self.filters = []
        self.orders = []
        self.limit_n = None
        self.range_bounds = None
        self.single = False
        self.count_mode = None
        self.head = False
        self.on_conflict = None

    # operations
    def select(self, columns="*", count=None, head=False):
        self.columns = columns
        self.count_mode = count
        self.head = head
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def upsert(self, payload, on_conflict=None):
        self.op, self.payload, self.on_conflict = "upsert", payload, on_conflict
        return self

    def delete(self):
        self.op = "delete"
        return self

    # filters
    def eq(self, column, value):
        self.filters.append(lambda r: r.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda r: r.get(column) != value)
        return self

    def gte(self, column, value):
        self.filters.append(lambda r: r.get(column) is not None and r.get(column) >= value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda r: r.get(column) is not None and r.get(column) <= value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda r: r.get(column) in values)
        return self

    def ilike(self, column, pattern):
        regex = _ilike(pattern)
        self.filters.append(lambda r: r.get(column) is not None and bool(regex.match(str(r.get(column)))))
        return self

    def contains(self, column, values):
        values = list(values)
        self.filters.append(lambda r: all(v in (r.get(column) or []) for v in values))
        return self

    # modifiers
    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def range(self, start, end):
        self.range_bounds = (start, end)
        return self

    def maybe_single(self):
        self.single = True
        return self

    def execute(self):
        with self.db.lock:
            self.db.check_failure(self.table, self.op)
            self.db.ops.append((self.table, self.op))
            return getattr(self, f"_execute_{self.op}")()

    # execution
    def _matching(self):
        return [r for r in self.db.tables.setdefault(self.table, []) if all(f(r) for f in self.filters)]

    def _execute_select(self):
        rows = self._matching()
        for column, desc in reversed(self.orders):
            rows = sorted(rows, key=lambda r: _sort_key(r.get(column)), reverse=desc)
        count = len(rows) if self.count_mode else None
        if self.range_bounds:
            start, end = self.range_bounds
            rows = rows[start:end + 1]
        if self.limit_n is not None:
            rows = rows[:self.limit_n]
        if self.head:
            return FakeResponse([], count)

        data = self._project(rows)
        if self.single:
            if not data:
                return None
            if len(data) > 1:
                raise FakeBackendError("JSON object requested, multiple rows returned")
            return FakeResponse(data[0], count)
        return FakeResponse(data, count)

    def _project(self, rows):
        items = [c.strip() for c in self.columns.split(",") if c.strip()]
        aggregates = [(item, _AGGREGATE.match(item)) for item in items]
        if any(match for _, match in aggregates):
            if not self.db.aggregates_enabled:
                raise FakeBackendError("Use of aggregate functions is not allowed")
            return self._aggregate(rows, aggregates)
        if items == ["*"]:
            return [dict(r) for r in rows]
        return [{c: r.get(c) for c in items} for r in rows]

    def _aggregate(self, rows, aggregates):
        group_by = [item for item, match in aggregates if not match]
        groups = {}
        for r in rows:
            groups.setdefault(tuple(r.get(c) for c in group_by), []).append(r)
        if not group_by and not groups:
            groups[()] = []
        out = []
        for key, members in groups.items():
            result = dict(zip(group_by, key))
            for item, match in aggregates:
                if not match:
                    continue
                alias = match.group("alias") or match.group("fn")
                values = [m.get(match.group("column")) for m in members if m.get(match.group("column")) is not None]
                fn = match.group("fn")
                if fn == "count":
                    result[alias] = len(values)
                elif fn == "sum":
                    result[alias] = sum(values) if values else None
                elif fn == "avg":
                    result[alias] = sum(values) / len(values) if values else None
                elif fn == "min":
                    result[alias] = min(values) if values else None
                else:
                    result[alias] = max(values) if values else None
            out.append(result)
        return out

    def _new_row(self, item):
        row = dict(TABLE_DEFAULTS.get(self.table, {}))
        row.update(item)
        row.setdefault("id", str(uuid.uuid4()))
        now = self.db.now()
        row.setdefault("created_at", now)
        if self.table in ("projects", "profiles"):
            row.setdefault("updated_at", now)
        return row

    def _execute_insert(self):
        items = self.payload if isinstance(self.payload, list) else [self.payload]
        rows = [self._new_row(item) for item in items]
        self.db.tables.setdefault(self.table, []).extend(rows)
        return FakeResponse([dict(r) for r in rows])

    def _execute_update(self):
        rows = self._matching()
        for r in rows:
            r.update(self.payload)
        return FakeResponse([dict(r) for r in rows])

    def _execute_upsert(self):
        key = self.on_conflict or "id"
        table = self.db.tables.setdefault(self.table, [])
        existing = [r for r in table if r.get(key) == self.payload.get(key)]
        if existing:
            existing[0].update(self.payload)
            return FakeResponse([dict(existing[0])])
        row = self._new_row(self.payload)
        table.append(row)
        return FakeResponse([dict(row)])

    def _execute_delete(self):
        rows = self._matching()
        ids = {id(r) for r in rows}
        self.db.tables[self.table] = [r for r in self.db.tables[self.table] if id(r) not in ids]
        return FakeResponse([dict(r) for r in rows])


class FakeBucket:
    def __init__(self, db, name):
        self.db = db
        self.name = name
        self.files = db.buckets.setdefault(name, {})

    def upload(self, path, content, file_options=None):
        with self.db.lock:
            self.db.check_failure(f"storage:{self.name}", "upload")
            self.db.ops.append((f"storage:{self.name}", "upload"))
            if path in self.files:
                raise FakeBackendError("The resource already exists")
            self.files[path] = content
        return SimpleNamespace(path=path)

    def download(self, path):
        with self.db.lock:
            self.db.check_failure(f"storage:{self.name}", "download")
            self.db.ops.append((f"storage:{self.name}", "download"))
            if path not in self.files:
                raise FakeBackendError("Object not found")
            return self.files[path]

    def remove(self, paths):
        with self.db.lock:
            self.db.ops.append((f"storage:{self.name}", "remove"))
            for path in paths:
                self.files.pop(path, None)
        return []

    def get_public_url(self, path):
        return f"https://fake.supabase.co/storage/v1/object/public/{self.name}/{path}"


class FakeStorage:
    def __init__(self, db):
        self.db = db

    def from_(self, bucket):
        return FakeBucket(self.db, bucket)


class FakeAdmin:
    def __init__(self, auth):
        self.auth = auth

    def sign_out(self, token):
        self.auth.db.ops.append(("auth", "sign_out"))
        self.auth.tokens.pop(token, None)

    def delete_user(self, user_id):
        self.auth.db.ops.append(("auth", "delete_user"))
        self.auth.users = {e: u for e, u in self.auth.users.items() if u.id != user_id}
        self.auth.tokens = {t: u for t, u in self.auth.tokens.items() if u.id != user_id}


class FakeAuth:
    def __init__(self, db):
        self.db = db
        self.users = {}
        self.pending = {}
        self.tokens = {}
        self.refresh_tokens = {}
        self.admin = FakeAdmin(self)

    def sign_in_with_otp(self, credentials):
        self.db.check_failure("auth", "sign_in_with_otp")
        self.db.ops.append(("auth", "sign_in_with_otp"))
        self.pending[credentials["email"]] = OTP_CODE
        return SimpleNamespace(user=None, session=None)

    def verify_otp(self, params):
        self.db.ops.append(("auth", "verify_otp"))
        email = params["email"]
        if self.pending.get(email) != params["token"]:
            raise FakeBackendError("Token has expired or is invalid")
        del self.pending[email]
        return self._issue(self._user(email))

    def refresh_session(self, refresh_token):
        user = self.refresh_tokens.pop(refresh_token, None)
        if user is None:
            raise FakeBackendError("Invalid Refresh Token")
        return self._issue(user)

    def get_user(self, jwt=None):
        self.db.ops.append(("auth", "get_user"))
        user = self.tokens.get(jwt)
        if user is None:
            raise FakeBackendError("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=user)

    def _user(self, email):
        if email not in self.users:
            now = self.db.now()
            self.users[email] = SimpleNamespace(
                id=str(uuid.uuid4()),
                email=email,
                email_confirmed_at=now,
                created_at=now,
                last_sign_in_at=now,
            )
        return self.users[email]

    def _issue(self, user):
        access, refresh = uuid.uuid4().hex, uuid.uuid4().hex
        self.tokens[access] = user
        self.refresh_tokens[refresh] = user
        session = SimpleNamespace(
            access_token=access, refresh_token=refresh, token_type="bearer", expires_in=3600
        )
        return SimpleNamespace(user=user, session=session)

    def sign_in(self, email):
        """Test shortcut: a valid access token for email without the OTP round trip."""
        user = self._user(email)
        return user, self._issue(user).session.access_token


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.buckets = {}
        self.ops = []
        self.failures = set()
        self.aggregates_enabled = True
        self.lock = threading.RLock()
        self._clock = None
        self.auth = FakeAuth(self)
        self.storage = FakeStorage(self)

    def table(self, name):
        return FakeQuery(self, name)

    def now(self):
        # strictly increasing timestamps keep created_at ordering deterministic
        now = datetime.now(timezone.utc)
        self._clock = now if self._clock is None or now > self._clock else self._clock + timedelta(microseconds=1)
        return self._clock.isoformat(timespec="microseconds")

    def fail(self, target, op):
        self.failures.add((target, op))

    def check_failure(self, target, op):
        if (target, op) in self.failures:
            raise FakeBackendError(f"{op} on {target} failed")

    def rows(self, table):
        return self.tables.get(table, [])

    def ops_for(self, target):
        return [op for t, op in self.ops if t == target]
