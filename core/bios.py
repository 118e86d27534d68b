"""
ProposalGen Bio Resolution
Maps selected bio ids to bio records, keeping selection order
"""

from typing import Dict, Iterable, List, Protocol, Sequence, Tuple

from core.models import Bio


class BioLookup(Protocol):
    async def find_bios_by_ids(self, ids: Sequence[str]) -> List[Bio]:
        ...


def resolve(selected_ids: Iterable[str], available: Iterable[Bio]) -> Tuple[Bio, ...]:
    """Ordered by selected_ids; ids without a record are dropped."""
    by_id: Dict[str, Bio] = {bio.id: bio for bio in available}
    return tuple(by_id[bio_id] for bio_id in selected_ids if bio_id in by_id)


def to_ids(bios: Iterable[Bio]) -> Tuple[str, ...]:
    return tuple(bio.id for bio in bios)


async def resolve_from_repository(
    repository: BioLookup,
    selected_ids: Sequence[str],
) -> Tuple[Bio, ...]:
    """Fetch only the selected records, then order them like the selection."""
    ids = [str(bio_id) for bio_id in selected_ids]
    if not ids:
        return ()
    records = await repository.find_bios_by_ids(ids)
    return resolve(ids, records)
