"""Build-once contract reference table indexed by id and by label."""

from __future__ import annotations

from datetime import datetime
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

import aiohttp

from common.errors import DuplicateContractError

from .models import ContractSpec


class ContractSpecTable:
    """Read-only view over a contract snapshot.

    Both indices hold the same spec objects, so a lookup by id and a lookup by
    label for one contract return the identical instance.
    """

    def __init__(
        self,
        id_table: Mapping[int, ContractSpec],
        label_table: Mapping[str, ContractSpec],
    ) -> None:
        self._id_table = MappingProxyType(dict(id_table))
        self._label_table = MappingProxyType(dict(label_table))

    @classmethod
    def from_specs(cls, specs: Iterable[ContractSpec]) -> "ContractSpecTable":
        id_table: dict[int, ContractSpec] = {}
        label_table: dict[str, ContractSpec] = {}
        for spec in specs:
            if spec.id in id_table:
                raise DuplicateContractError(f"duplicate contract id {spec.id}")
            if spec.label in label_table:
                raise DuplicateContractError(f"duplicate contract label {spec.label!r}")
            id_table[spec.id] = spec
            label_table[spec.label] = spec
        return cls(id_table, label_table)

    @classmethod
    async def build(
        cls,
        session: aiohttp.ClientSession | None = None,
        api_url: Optional[str] = None,
        now: Optional[datetime] = None,
        unknown_contract_policy: str = "raise",
    ) -> "ContractSpecTable":
        """Fetch the venue's contract list and normalise it."""

        from .fetch import build_contract_table

        return await build_contract_table(
            session=session,
            api_url=api_url,
            now=now,
            unknown_contract_policy=unknown_contract_policy,
        )

    @property
    def id_table(self) -> Mapping[int, ContractSpec]:
        return self._id_table

    @property
    def label_table(self) -> Mapping[str, ContractSpec]:
        return self._label_table

    def lookup_by_id(self, contract_id: int) -> ContractSpec | None:
        return self._id_table.get(contract_id)

    def lookup_by_label(self, label: str) -> ContractSpec | None:
        return self._label_table.get(label)

    def __len__(self) -> int:
        return len(self._id_table)

    def __iter__(self) -> Iterator[ContractSpec]:
        return iter(self._id_table.values())

    def __contains__(self, contract_id: object) -> bool:
        return contract_id in self._id_table

    def __repr__(self) -> str:
        return f"ContractSpecTable({len(self)} contracts)"


__all__ = ["ContractSpecTable"]
