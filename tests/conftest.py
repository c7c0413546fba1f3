import json
from collections import defaultdict

import httplib2
import pytest
from googleapiclient.errors import HttpError

NOW = 1_700_000_000


def pytest_addoption(parser):
    """Add E2E test options to pytest."""
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="run end-to-end tests against a real Google Drive account",
    )


def pytest_collection_modifyitems(config, items):
    """Skip E2E tests unless --run-e2e option is provided."""
    if not config.getoption("--run-e2e"):
        skip_e2e = pytest.mark.skip(reason="need --run-e2e option to run")
        for item in items:
            if "e2e" in item.keywords:
                item.add_marker(skip_e2e)


def http_error(status=404, message="File not found"):
    resp = httplib2.Response({"status": status})
    content = json.dumps({"error": {"code": status, "message": message}}).encode()
    return HttpError(resp, content)


def make_token(created=NOW, expires_in=3600, access_token="access-1", refresh_token="refresh-1"):
    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "created": created,
        "expires_in": expires_in,
    }


class FakeTokenStorage:
    """In-memory token store recording every write."""

    def __init__(self, token=None):
        self.token = token
        self.saved = []

    def get_token(self):
        return self.token

    def set_token(self, token):
        self.token = token
        self.saved.append(token)

    def clear_token(self):
        self.token = None
        return True


class FakeDriveClient:
    """
    In-memory stand-in for DriveClient.

    Files live in ``self.files``; every call is appended to ``self.calls``.
    ``fail(method, error, on_call=n)`` makes the n-th call (1-based) of a
    method raise, or every call when ``on_call`` is None.
    """

    def __init__(self, refreshed_token=None):
        self.files = {}
        self.content = {}
        self.calls = []
        self.refreshed_token = refreshed_token
        self._failures = {}
        self._counts = defaultdict(int)
        self._next_id = 0

    def fail(self, method, error, on_call=None):
        self._failures[method] = (error, on_call)

    def _record(self, method, *args, **kwargs):
        self.calls.append((method, args, kwargs))
        self._counts[method] += 1
        if method in self._failures:
            error, on_call = self._failures[method]
            if on_call is None or on_call == self._counts[method]:
                raise error

    def calls_to(self, method):
        return [c for c in self.calls if c[0] == method]

    def _new_id(self):
        self._next_id += 1
        return f"id-{self._next_id}"

    def add_file(self, **resource):
        file_id = resource.setdefault("id", self._new_id())
        resource.setdefault("trashed", False)
        resource.setdefault("starred", False)
        self.files[file_id] = resource
        return file_id

    def _get_resource(self, file_id):
        if file_id not in self.files:
            raise http_error(404, f"File not found: {file_id}")
        return self.files[file_id]

    def exchange_refresh_token(self):
        self._record("exchange_refresh_token")
        return self.refreshed_token

    def create(self, body, content=None, mime_type=None, **params):
        self._record("create", body, content=content, mime_type=mime_type, **params)
        file_id = self.add_file(
            name=body.get("name"),
            mimeType=body.get("mimeType", mime_type),
            parents=body.get("parents", ["root"]),
        )
        if content is not None:
            self.content[file_id] = content
        return {"id": file_id}

    def get(self, file_id, **params):
        self._record("get", file_id, **params)
        return dict(self._get_resource(file_id))

    def get_media(self, file_id):
        self._record("get_media", file_id)
        self._get_resource(file_id)
        return self.content.get(file_id, b"")

    def export(self, file_id, mime_type):
        self._record("export", file_id, mime_type)
        self._get_resource(file_id)
        return f"exported as {mime_type}".encode()

    def update(self, file_id, body, **params):
        self._record("update", file_id, body, **params)
        resource = self._get_resource(file_id)
        resource.update(body)
        return {"id": file_id, "name": resource.get("name")}

    def delete(self, file_id, **params):
        self._record("delete", file_id, **params)
        self._get_resource(file_id)
        del self.files[file_id]

    def copy(self, file_id, body, **params):
        self._record("copy", file_id, body, **params)
        source = self._get_resource(file_id)
        copy_id = self.add_file(
            name=source.get("name"),
            mimeType=source.get("mimeType"),
            parents=body.get("parents", source.get("parents")),
        )
        return {"id": copy_id}

    def list(self, **params):
        self._record("list", **params)
        return {"files": list(self.files.values())}


@pytest.fixture(scope="session")
def now():
    """Fixed unix time used as "now" by token tests."""
    return NOW


@pytest.fixture(name="make_token", scope="session")
def make_token_fixture():
    return make_token


@pytest.fixture(name="http_error", scope="session")
def http_error_fixture():
    return http_error


@pytest.fixture(scope="session")
def make_storage():
    """Factory for in-memory token stores."""
    return FakeTokenStorage


@pytest.fixture(scope="session")
def make_drive_client():
    """Factory for in-memory Drive clients."""
    return FakeDriveClient


@pytest.fixture
def token_storage():
    return FakeTokenStorage(make_token())


@pytest.fixture
def drive_client():
    return FakeDriveClient(refreshed_token=make_token(access_token="access-2"))


@pytest.fixture
def temp_test_files(tmp_path):
    test_file = tmp_path / "test.txt"
    test_file.write_text("test content")
    return tmp_path
