from __future__ import annotations

import pytest

from tfharness.configuration.var_captor import VarCaptor


def test_var_captor_starts_from_initial_mapping_without_aliasing() -> None:
    initial = {"region": "us-east-1"}
    captor = VarCaptor(initial)

    captor.var("region", "eu-west-2")

    assert captor.to_mapping() == {"region": "eu-west-2"}
    assert initial == {"region": "us-east-1"}


def test_var_captor_passes_values_through_unchanged() -> None:
    captor = VarCaptor()
    tags = {"team": "infra"}

    captor.var("tags", tags)
    captor.var("count", 3)
    captor.var("", None)

    snapshot = captor.to_mapping()
    assert snapshot["tags"] is tags
    assert snapshot["count"] == 3
    assert snapshot[""] is None


def test_var_captor_snapshot_is_read_only_and_detached() -> None:
    captor = VarCaptor({"a": 1})
    snapshot = captor.to_mapping()

    with pytest.raises(TypeError):
        snapshot["a"] = 2  # type: ignore[index]

    captor.var("b", 2)
    assert "b" not in snapshot
