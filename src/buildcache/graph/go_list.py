# src/buildcache/graph/go_list.py - v1
"""Unit graph provider backed by ``go list -json``.

Every ``load`` call shells out once; the resolver guarantees each
identifier is loaded at most once per run.
"""

from __future__ import annotations

import json
import logging
import subprocess

from pydantic import ValidationError

from buildcache.errors import MetadataError
from buildcache.graph.base_provider import BaseGraphProvider
from buildcache.graph.models import Unit

logger = logging.getLogger(__name__)

# cgo pseudo-import, not a loadable package
_PSEUDO_IMPORTS = frozenset({"C"})


class GoListProvider(BaseGraphProvider):
    """Load units by running the Go toolchain's ``list`` command."""

    def __init__(
        self,
        go_binary: str = "go",
        build_mode: str = "default",
        cwd: str | None = None,
    ) -> None:
        self._go = go_binary
        self._build_mode = build_mode
        self._cwd = cwd
        self._identity: list[str] | None = None

    def load(self, path: str) -> Unit:
        """Run ``go list -json`` for a single package path."""
        args = [self._go, "list", "-json"]
        if self._build_mode == "race":
            args += ["-race", "-installsuffix=race"]
        args.append(path)

        output = self._run(args)
        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise MetadataError(f"Unparseable go list output for {path}: {e}") from e

        if isinstance(data, dict) and "Imports" in data:
            data["Imports"] = [i for i in data["Imports"] if i not in _PSEUDO_IMPORTS]
        try:
            unit = Unit.model_validate(data)
        except ValidationError as e:
            raise MetadataError(f"Invalid package record for {path}: {e}") from e

        logger.debug("Loaded %s (%d imports)", unit.identifier, len(unit.imports))
        return unit

    def is_standard(self, identifier: str) -> bool:
        """Standard library paths have no dot in their first element."""
        dot = identifier.find(".")
        if dot == -1:
            return True
        slash = identifier.find("/")
        return dot > slash

    def toolchain_identity(self) -> list[str]:
        """Report the toolchain that will actually build: GOVERSION, GOOS, GOARCH."""
        if self._identity is None:
            output = self._run([self._go, "env", "GOVERSION", "GOOS", "GOARCH"])
            lines = [line.strip() for line in output.splitlines() if line.strip()]
            if len(lines) != 3:
                raise MetadataError(f"Unexpected go env output: {output!r}")
            self._identity = lines
        return list(self._identity)

    def _run(self, args: list[str]) -> str:
        """Run a go subcommand and return stdout, raising MetadataError on failure."""
        try:
            completed = subprocess.run(
                args,
                cwd=self._cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise MetadataError(f"Cannot run {args[0]!r}: {e}") from e

        if completed.returncode != 0:
            raise MetadataError(
                f"{' '.join(args)} failed with exit code {completed.returncode}\n"
                f"{completed.stdout}{completed.stderr}"
            )
        return completed.stdout
