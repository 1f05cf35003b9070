"""Pydantic models mirroring the AUR RPC JSON schema.

Package records use the service's PascalCase keys as aliases. All models are
frozen and validated in strict mode, so a wrong primitive type on the wire is
a decode failure rather than a silent coercion.
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "PackageDetail",
    "PackageSummary",
    "RelationKind",
    "SearchEnvelope",
]

T = TypeVar("T")


class RelationKind(str, Enum):
    """Field a search is matched against on the service side."""

    NAME = "name"
    NAME_DESC = "name-desc"
    MAINTAINER = "maintainer"
    DEPENDS = "depends"
    MAKE_DEPENDS = "makedepends"
    OPT_DEPENDS = "optdepends"
    CHECK_DEPENDS = "checkdepends"

    def __str__(self) -> str:
        return self.value


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True)


class SearchEnvelope(_WireModel, Generic[T]):
    """Top-level reply object wrapping a list of package records.

    `result_count` is copied from the wire as-is and may disagree with
    `len(results)`.
    """

    results: list[T]
    result_count: int = Field(alias="resultcount", ge=0)
    query_type: str = Field(alias="type")
    version: int = Field(ge=0)
    error: str | None = None


class PackageSummary(_WireModel):
    """A search hit without dependency metadata."""

    id: int = Field(alias="ID")
    name: str = Field(alias="Name")
    maintainer: str | None = Field(default=None, alias="Maintainer")
    version: str = Field(alias="Version")
    description: str | None = Field(default=None, alias="Description")
    popularity: float = Field(alias="Popularity")
    num_votes: int = Field(alias="NumVotes")
    first_submitted: int = Field(alias="FirstSubmitted")
    last_modified: int = Field(alias="LastModified")
    out_of_date: int | None = Field(default=None, alias="OutOfDate")
    package_base: str = Field(alias="PackageBase")
    package_base_id: int = Field(alias="PackageBaseID")
    url: str | None = Field(default=None, alias="URL")
    url_path: str = Field(alias="URLPath")


class PackageDetail(PackageSummary):
    """An info record; list fields the service omits decode as empty lists."""

    depends: list[str] = Field(default_factory=list, alias="Depends")
    make_depends: list[str] = Field(default_factory=list, alias="MakeDepends")
    opt_depends: list[str] = Field(default_factory=list, alias="OptDepends")
    check_depends: list[str] = Field(default_factory=list, alias="CheckDepends")
    conflicts: list[str] = Field(default_factory=list, alias="Conflicts")
    provides: list[str] = Field(default_factory=list, alias="Provides")
    keywords: list[str] = Field(default_factory=list, alias="Keywords")
    license: list[str] = Field(default_factory=list, alias="License")
