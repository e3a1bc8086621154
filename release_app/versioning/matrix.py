"""Best deployed version per (client environment, component) pair."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from release_app.core.models import ChangeRequestModel

from .version import Version, parse_versions


@dataclass(frozen=True, slots=True)
class MatrixCell:
    version: Version
    cm_key: str
    deployed_at: str | None

    def to_dict(self) -> dict[str, Any]:
        return {"version": str(self.version), "cmKey": self.cm_key, "deployedAt": self.deployed_at}


@dataclass(slots=True)
class VersionMatrix:
    cells: dict[str, dict[str, MatrixCell]] = field(default_factory=dict)

    @property
    def clients(self) -> list[str]:
        return sorted(self.cells)

    @property
    def components(self) -> list[str]:
        names: set[str] = set()
        for per_client in self.cells.values():
            names.update(per_client)
        return sorted(names)

    def get(self, client: str, component: str) -> MatrixCell | None:
        return self.cells.get(client, {}).get(component)

    def to_dict(self) -> dict[str, Any]:
        return {
            "matrix": {
                client: {component: cell.to_dict() for component, cell in per_client.items()}
                for client, per_client in self.cells.items()
            },
            "components": self.components,
            "clients": self.clients,
        }

    def to_frame(self) -> pd.DataFrame:
        """Client x component table of version strings ("" where nothing deployed)."""
        clients = self.clients
        components = self.components
        if not clients:
            return pd.DataFrame()
        rows = []
        for client in clients:
            row: dict[str, str] = {"client": client}
            for component in components:
                cell = self.get(client, component)
                row[component] = str(cell.version) if cell else ""
            rows.append(row)
        return pd.DataFrame(rows, columns=["client", *components])


def build_matrix(records: Iterable[ChangeRequestModel]) -> VersionMatrix:
    """Fold deployment records into the highest version per client/component.

    A candidate replaces the stored cell only when strictly greater, so on
    equal versions the first record seen keeps the provenance. Clients named
    on a record are listed even when none of its fix versions parse.
    """
    matrix = VersionMatrix()
    for record in records:
        versions = parse_versions(record.fix_versions)
        for client in record.client_environments:
            per_client = matrix.cells.setdefault(client, {})
            for component in record.components:
                for version in versions:
                    existing = per_client.get(component)
                    if existing is None or version > existing.version:
                        per_client[component] = MatrixCell(
                            version=version,
                            cm_key=record.source_key,
                            deployed_at=record.deployed_at,
                        )
    return matrix
