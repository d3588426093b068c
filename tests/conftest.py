import itertools
import uuid

import pytest

from spacematch.config import get_settings
from spacematch.database import (
    ChatRepository,
    ConnectionRepository,
    MatchRepository,
    PostRepository,
    UserRepository,
)
from spacematch.models import Post


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeTable:
    def __init__(self, name):
        self.name = name
        self.rows = []
        self.error = None  # excepción a lanzar en execute()
        self.writes = 0


class FakeQuery:
    """Subset del query builder de supabase-py sobre listas en memoria."""

    def __init__(self, table: FakeTable):
        self.table = table
        self.op = "select"
        self.payload = None
        self.on_conflict = "id"
        self.filters = []
        self._order = None
        self._limit = None

    def select(self, *_columns):
        self.op = "select"
        return self

    def insert(self, data):
        self.op, self.payload = "insert", data
        return self

    def update(self, data):
        self.op, self.payload = "update", data
        return self

    def upsert(self, data, on_conflict="id"):
        self.op, self.payload, self.on_conflict = "upsert", data, on_conflict
        return self

    def eq(self, field, value):
        self.filters.append(lambda row: row.get(field) == value)
        return self

    def contains(self, field, values):
        self.filters.append(lambda row: set(values) <= set(row.get(field) or []))
        return self

    def order(self, field, desc=False):
        self._order = (field, desc)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _matching(self):
        return [r for r in self.table.rows if all(f(r) for f in self.filters)]

    def execute(self):
        if self.table.error is not None:
            raise self.table.error

        if self.op == "select":
            rows = [dict(r) for r in self._matching()]
            if self._order:
                field, desc = self._order
                rows.sort(key=lambda r: r.get(field) or "", reverse=desc)
            if self._limit is not None:
                rows = rows[: self._limit]
            return FakeResponse(rows)

        self.table.writes += 1
        payload = self.payload if isinstance(self.payload, list) else [self.payload]

        if self.op == "insert":
            created = []
            for item in payload:
                row = dict(item)
                row.setdefault("id", str(uuid.uuid4()))
                self.table.rows.append(row)
                created.append(dict(row))
            return FakeResponse(created)

        if self.op == "update":
            updated = []
            for row in self._matching():
                row.update(self.payload)
                updated.append(dict(row))
            return FakeResponse(updated)

        # upsert
        result = []
        for item in payload:
            existing = next(
                (r for r in self.table.rows if r.get(self.on_conflict) == item.get(self.on_conflict)),
                None,
            )
            if existing is None:
                existing = dict(item)
                self.table.rows.append(existing)
            else:
                existing.update(item)
            result.append(dict(existing))
        return FakeResponse(result)


class FakeSupabase:
    """Reemplazo de SupabaseClient para los repositorios."""

    def __init__(self):
        self.tables = {}

    def table(self, name):
        return FakeQuery(self.tables.setdefault(name, FakeTable(name)))

    def rows(self, name):
        return self.tables.setdefault(name, FakeTable(name)).rows

    def seed(self, name, *rows):
        self.rows(name).extend(dict(r) for r in rows)

    def fail(self, name, error):
        self.tables.setdefault(name, FakeTable(name)).error = error


@pytest.fixture(autouse=True)
def settings_env(monkeypatch, tmp_path):
    monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "test-key")
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_test")
    monkeypatch.setenv("APP_URL", "https://spacematch.test")
    monkeypatch.setenv("SEEN_MATCHES_PATH", str(tmp_path / "seen_matches.json"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store():
    return FakeSupabase()


@pytest.fixture
def post_repo(store):
    return PostRepository(client=store)


@pytest.fixture
def match_repo(store):
    return MatchRepository(client=store)


@pytest.fixture
def user_repo(store):
    return UserRepository(client=store)


@pytest.fixture
def connection_repo(store):
    return ConnectionRepository(client=store)


@pytest.fixture
def chat_repo(store):
    return ChatRepository(client=store)


# Perfil completo con los cinco atributos escalares
BASE_ATTRIBUTES = {
    "sizeCategory": "medium",
    "environment": "indoor",
    "duration": "monthly",
    "privacyLevel": "private",
    "noiseLevel": "quiet",
}


@pytest.fixture
def base_attributes():
    return dict(BASE_ATTRIBUTES)


@pytest.fixture
def make_post():
    """Factory de posts; los campos extra van en camelCase como en el store."""
    counter = itertools.count(1)

    def _make(post_type="need", author_id=None, attributes=None, **extra):
        n = next(counter)
        data = {
            "id": f"post-{n}",
            "type": post_type,
            "authorId": author_id or f"user-{n}",
            "authorName": f"Author {n}",
            "title": f"{post_type.title()} post {n}",
            "status": "active",
            "attributes": attributes or {},
        }
        data.update(extra)
        return Post.model_validate(data)

    return _make


def as_row(post: Post) -> dict:
    return post.model_dump(by_alias=True, mode="json")


@pytest.fixture
def seed_posts(store):
    def _seed(*posts):
        store.seed("posts", *(as_row(p) for p in posts))
        return posts

    return _seed
