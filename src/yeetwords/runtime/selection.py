"""
Randomized selection and entity-group pointer maintenance.

All draws go through the caller's `random.Random` so a run can be seeded.
"""

import random
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .store import ValueStore, Namespace
from .values import gen_val


def unique_sample(source: Sequence[Any], count: int, rng: random.Random,
                  exclude: Iterable[Any] = ()) -> List[Any]:
    """
    Draw up to `count` distinct items from `source` without replacement.

    Items in `exclude` are never drawn. If the source runs out, fewer items
    are returned (possibly none); this is not an error.
    """
    excluded = list(exclude)
    pool = [item for item in source if item not in excluded]
    result: List[Any] = []
    while pool and len(result) < count:
        item = pool[rng.randrange(len(pool))]
        result.append(item)
        pool = [other for other in pool if other != item]
    return result


def sample_one(source: Sequence[Any], rng: random.Random,
               exclude: Iterable[Any] = ()) -> List[Any]:
    """A list holding one random item, or empty if nothing is left to draw."""
    return unique_sample(source, 1, rng, exclude)


def sample_catalog(catalog: Dict[str, List[str]], count: int,
                   rng: random.Random) -> Dict[str, List[str]]:
    """Draw up to `count` distinct keys, with their lists, from a catalog."""
    picked = unique_sample(list(catalog.items()), count, rng)
    return dict(picked)


def shift_pointer(pointer: Optional[int], offset: int, size: int) -> int:
    """Move a pointer cyclically by a signed offset."""
    if size <= 0:
        raise ValueError("cannot shift the pointer of an empty group")
    if pointer is None:
        raise ValueError("cannot shift an undefined pointer")
    return (pointer + offset) % size


def shift_group(store: ValueStore, group: str, offset: int) -> int:
    """Shift a group's active member; returns the new pointer."""
    members = store.group_members(group) or []
    new_pointer = shift_pointer(store.pointer(group), offset, len(members))
    store.set_pointer(group, new_pointer)
    return new_pointer


def shuffle_group(store: ValueStore, group: str, rng: random.Random) -> None:
    """
    Randomly reorder a group's members, keeping the same member active.

    Groups of size 0 or 1 are left alone. A shuffle may return the original
    order; small groups often do.
    """
    members = store.group_members(group)
    if members is None or len(members) <= 1:
        return
    shuffled = list(members)
    rng.shuffle(shuffled)
    store.replace(group, gen_val(shuffled), Namespace.ENTITY_GROUP)
