"""Shared fixtures: project files on disk and a fake registry session."""

import json
from pathlib import Path
from typing import Dict, List, Optional

import pytest
import requests

from nuget_outdated.checker import Checker
from nuget_outdated.config import CheckerConfig
from nuget_outdated.registry import NuGetClient, RegistryCache


class FakeResponse:
    def __init__(self, status_code: int = 200, body: str = "") -> None:
        self.status_code = status_code
        self.body = body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=None)

    def json(self):
        return json.loads(self.body)


class FakeSession:
    """Stands in for ``requests.Session``; serves package indexes by id."""

    def __init__(self, indexes: Optional[Dict[str, object]] = None, default=None) -> None:
        self.indexes = {k.lower(): v for k, v in (indexes or {}).items()}
        self.default = default
        self.headers: Dict[str, str] = {}
        self.calls: List[str] = []

    def get(self, url: str, timeout=None):
        self.calls.append(url)
        package_id = url.rstrip("/").split("/")[-2]
        body = self.indexes.get(package_id, self.default)
        if body is None:
            return FakeResponse(404, "")
        if isinstance(body, Exception):
            raise body
        if isinstance(body, str):
            return FakeResponse(200, body)
        return FakeResponse(200, json.dumps({"versions": body}))


class RecordingSink:
    def __init__(self) -> None:
        self.messages: List[str] = []

    def warning(self, msg: str, *args) -> None:
        self.messages.append(msg % args if args else msg)


def write_project(directory: Path, name: str, references: str) -> Path:
    path = directory / f"{name}.csproj"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        '<Project Sdk="Microsoft.NET.Sdk">\n'
        "  <ItemGroup>\n"
        f"{references}\n"
        "  </ItemGroup>\n"
        "</Project>\n",
        encoding="utf-8",
    )
    return path


def write_props(directory: Path, items: str) -> Path:
    path = directory / "Directory.Packages.props"
    path.write_text(
        "<Project>\n"
        "  <ItemGroup>\n"
        f"{items}\n"
        "  </ItemGroup>\n"
        "</Project>\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_checker(sink):
    """Build a checker whose registry answers from ``indexes``."""

    def _make(indexes=None, default=None):
        session = FakeSession(indexes, default=default)
        config = CheckerConfig(retries=1, backoff=0)
        client = NuGetClient(config, RegistryCache(session=session))
        return Checker(client=client, config=config, sink=sink), session

    return _make
