from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import sys

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))


_SUMMARY_RECORD: dict[str, Any] = {
    "Description": "Yet another yogurt",
    "FirstSubmitted": 1475830564,
    "ID": 1370617,
    "LastModified": 1712345678,
    "Maintainer": "jguer",
    "Name": "yay",
    "NumVotes": 2200,
    "OutOfDate": None,
    "PackageBase": "yay",
    "PackageBaseID": 115973,
    "Popularity": 24.5,
    "URL": "https://github.com/Jguer/yay",
    "URLPath": "/cgit/aur.git/snapshot/yay.tar.gz",
    "Version": "12.3.5-1",
}

_DETAIL_EXTRAS: dict[str, Any] = {
    "Depends": ["pacman>5", "git"],
    "MakeDepends": ["go>=1.21"],
    "OptDepends": ["sudo", "doas"],
    "Conflicts": ["yay-bin"],
    "Provides": ["yay"],
    "Keywords": ["aur", "helper"],
    "License": ["GPL-3.0-or-later"],
}

EnvelopeFactory = Callable[..., bytes]


@pytest.fixture
def summary_record() -> dict[str, Any]:
    """A search result record as the service sends it."""
    return dict(_SUMMARY_RECORD)


@pytest.fixture
def detail_record() -> dict[str, Any]:
    """An info result record as the service sends it."""
    return {**_SUMMARY_RECORD, **_DETAIL_EXTRAS}


@pytest.fixture
def make_envelope() -> EnvelopeFactory:
    """Return a builder for JSON envelope bodies.

    `result_count` defaults to the number of results but can be forced to
    disagree with it.
    """

    def _build(results: list[dict[str, Any]], *, query_type: str, result_count: int | None = None) -> bytes:
        payload = {
            "resultcount": len(results) if result_count is None else result_count,
            "results": results,
            "type": query_type,
            "version": 5,
        }
        return json.dumps(payload).encode("utf-8")

    return _build


@pytest.fixture
def info_body(make_envelope: EnvelopeFactory, detail_record: dict[str, Any]) -> bytes:
    return make_envelope([detail_record], query_type="multiinfo")


@pytest.fixture
def search_body(make_envelope: EnvelopeFactory, summary_record: dict[str, Any]) -> bytes:
    return make_envelope([summary_record], query_type="search")
