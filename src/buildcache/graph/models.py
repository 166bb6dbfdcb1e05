# src/buildcache/graph/models.py - v1
"""Unit graph domain models: Unit, UnitError.

Field aliases match the upper-camel keys emitted by ``go list -json`` so a
single model parses both the Go provider output and JSON manifests.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class UnitError(BaseModel):
    """Error reported by the graph provider while loading a unit."""

    model_config = ConfigDict(populate_by_name=True)

    import_stack: list[str] = Field(default_factory=list, alias="ImportStack")
    pos: str = Field(default="", alias="Pos")
    err: str = Field(default="", alias="Err")


class Unit(BaseModel):
    """A single compilation target as reported by the graph provider."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    # Fixed feed order for fingerprinting: file groups, then flag groups.
    FILE_GROUPS: ClassVar[tuple[str, ...]] = (
        "go_files",
        "cgo_files",
        "c_files",
        "cxx_files",
        "m_files",
        "h_files",
        "s_files",
        "swig_files",
        "swig_cxx_files",
        "syso_files",
    )
    FLAG_GROUPS: ClassVar[tuple[str, ...]] = (
        "cgo_cflags",
        "cgo_cppflags",
        "cgo_cxxflags",
        "cgo_ldflags",
        "cgo_pkg_config",
    )

    identifier: str = Field(alias="ImportPath")
    name: str = Field(default="", alias="Name")
    directory: str = Field(default="", alias="Dir")
    target: str = Field(default="", alias="Target")
    standard: bool = Field(default=False, alias="Standard")
    stale: bool = Field(default=False, alias="Stale")

    # Source files, relative to directory
    go_files: list[str] = Field(default_factory=list, alias="GoFiles")
    cgo_files: list[str] = Field(default_factory=list, alias="CgoFiles")
    c_files: list[str] = Field(default_factory=list, alias="CFiles")
    cxx_files: list[str] = Field(default_factory=list, alias="CXXFiles")
    m_files: list[str] = Field(default_factory=list, alias="MFiles")
    h_files: list[str] = Field(default_factory=list, alias="HFiles")
    s_files: list[str] = Field(default_factory=list, alias="SFiles")
    swig_files: list[str] = Field(default_factory=list, alias="SwigFiles")
    swig_cxx_files: list[str] = Field(default_factory=list, alias="SwigCXXFiles")
    syso_files: list[str] = Field(default_factory=list, alias="SysoFiles")

    # Build flags
    cgo_cflags: list[str] = Field(default_factory=list, alias="CgoCFLAGS")
    cgo_cppflags: list[str] = Field(default_factory=list, alias="CgoCPPFLAGS")
    cgo_cxxflags: list[str] = Field(default_factory=list, alias="CgoCXXFLAGS")
    cgo_ldflags: list[str] = Field(default_factory=list, alias="CgoLDFLAGS")
    cgo_pkg_config: list[str] = Field(default_factory=list, alias="CgoPkgConfig")

    # Dependency information
    imports: list[str] = Field(default_factory=list, alias="Imports")
    deps: list[str] = Field(default_factory=list, alias="Deps")
    test_imports: list[str] = Field(default_factory=list, alias="TestImports")
    xtest_imports: list[str] = Field(default_factory=list, alias="XTestImports")

    # Error information
    incomplete: bool = Field(default=False, alias="Incomplete")
    error: UnitError | None = Field(default=None, alias="Error")
    deps_errors: list[UnitError] = Field(default_factory=list, alias="DepsErrors")

    @property
    def has_errors(self) -> bool:
        """True if this unit or one of its dependencies failed to load."""
        return self.error is not None or bool(self.deps_errors) or self.incomplete

    def file_groups(self) -> list[tuple[str, list[str]]]:
        """Return (group, files) pairs in fingerprint feed order."""
        return [(group, getattr(self, group)) for group in self.FILE_GROUPS]

    def flag_groups(self) -> list[tuple[str, list[str]]]:
        """Return (group, flags) pairs in fingerprint feed order."""
        return [(group, getattr(self, group)) for group in self.FLAG_GROUPS]
