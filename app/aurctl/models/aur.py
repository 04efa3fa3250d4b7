"""AUR RPC data models.

Pydantic models mirroring the JSON returned by the AUR RPC v5 API. Field
aliases follow the API's PascalCase keys.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class PackageRecord(BaseModel):
    """Metadata for one AUR package as returned by the RPC API.

    Records are immutable once fetched.

    Attributes:
        id: Numeric AUR package id.
        name: Package name.
        package_base: Name of the package base (git repository) it belongs to.
        version: Full version string (pkgver-pkgrel, optionally with epoch).
        depends: Runtime dependencies, possibly with version qualifiers.
        make_depends: Build-only dependencies.
        opt_depends: Optional dependencies ("name: reason").
        out_of_date: Unix timestamp when flagged out of date, or None.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: Annotated[int, Field(alias="ID")]
    name: Annotated[str, Field(alias="Name", min_length=1)]
    package_base: Annotated[str, Field(alias="PackageBase")]
    version: Annotated[str, Field(alias="Version")]
    description: Annotated[str | None, Field(alias="Description")] = None
    url: Annotated[str | None, Field(alias="URL")] = None
    maintainer: Annotated[str | None, Field(alias="Maintainer")] = None
    first_submitted: Annotated[int, Field(alias="FirstSubmitted")] = 0
    last_modified: Annotated[int, Field(alias="LastModified")] = 0
    num_votes: Annotated[int, Field(alias="NumVotes")] = 0
    popularity: Annotated[float, Field(alias="Popularity")] = 0.0
    out_of_date: Annotated[int | None, Field(alias="OutOfDate")] = None

    depends: Annotated[tuple[str, ...], Field(alias="Depends")] = ()
    make_depends: Annotated[tuple[str, ...], Field(alias="MakeDepends")] = ()
    opt_depends: Annotated[tuple[str, ...], Field(alias="OptDepends")] = ()
    conflicts: Annotated[tuple[str, ...], Field(alias="Conflicts")] = ()
    provides: Annotated[tuple[str, ...], Field(alias="Provides")] = ()
    replaces: Annotated[tuple[str, ...], Field(alias="Replaces")] = ()
    keywords: Annotated[tuple[str, ...], Field(alias="Keywords")] = ()
    license: Annotated[tuple[str, ...], Field(alias="License")] = ()

    @property
    def all_depends(self) -> list[str]:
        """Runtime dependencies followed by build-only dependencies."""
        return [*self.depends, *self.make_depends]

    @property
    def is_out_of_date(self) -> bool:
        """Check if the package has been flagged out of date."""
        return self.out_of_date is not None


class RpcResponse(BaseModel):
    """Envelope wrapping every AUR RPC response."""

    model_config = ConfigDict(extra="ignore")

    version: int = 5
    type: str
    resultcount: int = 0
    results: list[PackageRecord] = Field(default_factory=list)
    error: str | None = None

    @property
    def is_error(self) -> bool:
        """Check if the response indicates an error."""
        return self.type == "error"
