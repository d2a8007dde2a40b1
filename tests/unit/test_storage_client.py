"""
Unit tests for the storage clients.

The S3-compatible client is exercised against a stub boto3 client, so
no network or credentials are needed.
"""

import asyncio
import io
from types import SimpleNamespace

import pytest

from src.infrastructure.storage.client import (
    MockStorageClient,
    ObjectNotFoundError,
    R2StorageClient,
    StorageConfig,
    StorageError,
    create_storage_client,
)


def run(coro):
    return asyncio.run(coro)


class NoSuchKey(Exception):
    pass


class StubPaginator:
    def __init__(self, pages):
        self._pages = pages
        self.calls = []

    def paginate(self, **kwargs):
        self.calls.append(kwargs)
        return iter(self._pages)


class StubS3:
    """Records calls the way boto3's S3 client would receive them."""

    exceptions = SimpleNamespace(NoSuchKey=NoSuchKey)

    def __init__(self, pages=None, objects=None, fail=False):
        self.paginator = StubPaginator(pages or [])
        self.objects = objects or {}
        self.puts = []
        self.fail = fail

    def get_paginator(self, operation):
        assert operation == "list_objects_v2"
        if self.fail:
            raise RuntimeError("network down")
        return self.paginator

    def put_object(self, **kwargs):
        if self.fail:
            raise RuntimeError("network down")
        self.puts.append(kwargs)

    def get_object(self, Bucket, Key):
        if self.fail:
            raise RuntimeError("network down")
        if Key not in self.objects:
            raise NoSuchKey(Key)
        return {"Body": io.BytesIO(self.objects[Key])}


@pytest.fixture
def config() -> StorageConfig:
    return StorageConfig(bucket_name="lib", region="auto", endpoint_url="http://localhost:9000")


def make_client(config, stub) -> R2StorageClient:
    client = R2StorageClient(config)
    client._s3_client = stub
    return client


class TestR2StorageClient:
    """Tests for the boto3-backed client."""

    def test_list_follows_every_page(self, config):
        stub = StubS3(pages=[
            {"Contents": [{"Key": "videos/c1/d1/v1/en/a.mp4"}, {"Key": "videos/c1/d1/v1/en/a.vtt"}]},
            {"Contents": [{"Key": "videos/c1/d1/v2/en/b.mp4"}]},
            {},
        ])

        names = run(make_client(config, stub).list_objects("videos/c1/d1/"))

        assert names == [
            "videos/c1/d1/v1/en/a.mp4",
            "videos/c1/d1/v1/en/a.vtt",
            "videos/c1/d1/v2/en/b.mp4",
        ]
        assert stub.paginator.calls == [
            {"Bucket": "lib", "Prefix": "videos/c1/d1/", "PaginationConfig": {}}
        ]

    def test_list_honours_max_results(self, config):
        stub = StubS3(pages=[{"Contents": [{"Key": "a"}, {"Key": "b"}]}])

        names = run(make_client(config, stub).list_objects("", max_results=1))

        assert names == ["a"]
        assert stub.paginator.calls[0]["PaginationConfig"] == {"MaxItems": 1, "PageSize": 1}

    def test_exists(self, config):
        assert run(make_client(config, StubS3(pages=[{"Contents": [{"Key": "x/y"}]}])).exists("x/"))
        assert not run(make_client(config, StubS3(pages=[{}])).exists("x/"))

    def test_write_passes_content_type_and_metadata(self, config):
        stub = StubS3()

        run(make_client(config, stub).write_object(
            "videos/c1/d1/v1/en/.placeholder", b"", "text/plain", {"language": "en"}
        ))

        assert stub.puts == [{
            "Bucket": "lib",
            "Key": "videos/c1/d1/v1/en/.placeholder",
            "Body": b"",
            "ContentType": "text/plain",
            "Metadata": {"language": "en"},
        }]

    def test_read_object(self, config):
        stub = StubS3(objects={"bundles/c1/d1/bundle.json": b"{}"})

        assert run(make_client(config, stub).read_object("bundles/c1/d1/bundle.json")) == b"{}"

    def test_read_missing_object(self, config):
        with pytest.raises(ObjectNotFoundError):
            run(make_client(config, StubS3()).read_object("nope"))

    @pytest.mark.parametrize(
        "call",
        [
            lambda c: c.list_objects("videos/"),
            lambda c: c.write_object("a", b"", "text/plain"),
            lambda c: c.read_object("a"),
        ],
    )
    def test_backend_errors_become_storage_errors(self, config, call):
        client = make_client(config, StubS3(fail=True))

        with pytest.raises(StorageError):
            run(call(client))


class TestMockStorageClient:
    """Tests for the in-memory client."""

    def test_lists_lexicographically_under_prefix(self):
        storage = MockStorageClient()
        for name in ["videos/b", "videos/a", "other/c"]:
            run(storage.write_object(name, b"", "text/plain"))

        assert run(storage.list_objects("videos/")) == ["videos/a", "videos/b"]
        assert run(storage.list_objects("videos/", max_results=1)) == ["videos/a"]

    def test_write_overwrites(self):
        storage = MockStorageClient()
        run(storage.write_object("a", b"one", "text/plain"))
        run(storage.write_object("a", b"two", "text/plain"))

        assert run(storage.read_object("a")) == b"two"

    def test_read_missing_object(self):
        with pytest.raises(ObjectNotFoundError):
            run(MockStorageClient().read_object("missing"))


class TestCreateStorageClient:
    """Tests for the factory."""

    def test_mock_mode(self):
        assert isinstance(create_storage_client(mock_mode=True), MockStorageClient)

    def test_requires_config_outside_mock_mode(self):
        with pytest.raises(ValueError, match="config is required"):
            create_storage_client()

    def test_real_client(self, config):
        assert isinstance(create_storage_client(config=config), R2StorageClient)
