from __future__ import annotations

import pytest

from ihl.core import PythonRandomSource, seeded_random


def test_source_exposes_only_choice_and_spawn():
    public = {name for name in dir(PythonRandomSource) if not name.startswith("_")}
    assert public == {"choice", "spawn"}


def test_spawned_substreams_are_reproducible():
    items = list(range(50))
    first = seeded_random(7).spawn("autofill")
    second = seeded_random(7).spawn("autofill")
    other = seeded_random(7).spawn("moves")

    picks = [first.choice(items) for _ in range(20)]
    assert picks == [second.choice(items) for _ in range(20)]
    assert picks != [other.choice(items) for _ in range(20)]


def test_choice_rejects_empty():
    with pytest.raises(ValueError):
        seeded_random(1).choice([])
