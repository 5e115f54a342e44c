"""Tests for full-state export and import."""

import json
from collections.abc import Callable
from typing import Any

import pytest
from pydantic import ValidationError

from lean_imt import ConfigError, CorruptStateError, LeanIMT, TreeState
from tests.lean_imt.helpers import h1, h2


@pytest.mark.parametrize("size", [0, 1, 2, 3, 7, 8, 21])
def test_export_import_round_trip(tree_factory: Callable[[int], LeanIMT], size: int) -> None:
    """An imported tree equals the exported one, node for node."""
    tree = tree_factory(size)

    for state in (tree.export_state(), tree.export(), tree.export().encode()):
        restored = LeanIMT.import_state(h1, h2, state)
        assert restored.levels == tree.levels
        assert restored.root == tree.root
        assert restored.depth == tree.depth


def test_import_from_mapping(tree_factory: Callable[[int], LeanIMT]) -> None:
    """The parsed JSON mapping is accepted as well."""
    tree = tree_factory(5)
    restored = LeanIMT.import_state(h1, h2, json.loads(tree.export()))
    assert restored.levels == tree.levels


def test_imported_tree_keeps_working(tree_factory: Callable[[int], LeanIMT]) -> None:
    """An imported tree supports further mutations and proofs."""
    restored = LeanIMT.import_state(h1, h2, tree_factory(4).export())

    restored.insert(h1(4))
    assert restored.levels == tree_factory(5).levels
    assert restored.verify_proof(restored.generate_proof(4))


def test_export_is_a_snapshot(tree_factory: Callable[[int], LeanIMT]) -> None:
    """Mutating a tree does not alter a previous export."""
    tree = tree_factory(3)
    state = tree.export_state()
    tree.insert(h1(3))

    assert state.size == 3
    assert len(state.levels[0]) == 3


def test_import_does_not_alias_state(tree_factory: Callable[[int], LeanIMT]) -> None:
    """The imported tree owns its own levels."""
    state = tree_factory(3).export_state()
    restored = LeanIMT.import_state(h1, h2, state)
    restored.insert(h1(3))

    assert len(state.levels[0]) == 3


def test_export_json_layout(tree_factory: Callable[[int], LeanIMT]) -> None:
    """The JSON blob lists the size and every level as decimal strings."""
    tree = tree_factory(2)
    payload = json.loads(tree.export())

    assert payload == {
        "size": 2,
        "levels": [[str(leaf) for leaf in tree.leaves], [str(tree.root)]],
    }


def _state(tree: LeanIMT) -> dict[str, Any]:
    return json.loads(tree.export())


@pytest.mark.parametrize(
    "corrupt",
    [
        pytest.param(lambda s: s.update(size=s["size"] + 1), id="size mismatch"),
        pytest.param(lambda s: s["levels"].pop(), id="missing level"),
        pytest.param(lambda s: s["levels"].append([s["levels"][-1][0]]), id="extra level"),
        pytest.param(lambda s: s["levels"][1].pop(), id="short level"),
        pytest.param(lambda s: s["levels"][1].__setitem__(0, "1"), id="wrong internal node"),
        pytest.param(lambda s: s["levels"][-1].__setitem__(0, "1"), id="wrong root"),
        pytest.param(lambda s: s["levels"][0].__setitem__(0, "1"), id="wrong leaf"),
    ],
)
def test_import_rejects_inconsistent_state(
    tree_factory: Callable[[int], LeanIMT], corrupt: Callable[[dict[str, Any]], None]
) -> None:
    """Any break of the layout or of the node invariants is detected."""
    state = _state(tree_factory(5))
    corrupt(state)

    with pytest.raises(CorruptStateError):
        LeanIMT.import_state(h1, h2, state)


def test_import_rejects_carried_node_that_was_hashed(
    tree_factory: Callable[[int], LeanIMT],
) -> None:
    """A node without a sibling must equal its only child."""
    state = _state(tree_factory(5))
    state["levels"][1][2] = str(h2(int(state["levels"][0][4]), 0))

    with pytest.raises(CorruptStateError) as exc_info:
        LeanIMT.import_state(h1, h2, state)

    assert exc_info.value.level == 1
    assert exc_info.value.index == 2


@pytest.mark.parametrize(
    "blob",
    [
        pytest.param("not json", id="not json"),
        pytest.param(b"{}", id="empty object"),
        pytest.param('{"size": 0, "levels": []}', id="no levels"),
        pytest.param('{"size": -1, "levels": [[]]}', id="negative size"),
        pytest.param('{"size": 1, "levels": [["-5"]]}', id="negative node"),
        pytest.param('{"size": 0, "levels": [[]], "depth": 0}', id="unknown field"),
    ],
)
def test_import_rejects_malformed_blob(blob: str | bytes) -> None:
    """Unparseable blobs are reported as corrupt state."""
    with pytest.raises(CorruptStateError):
        LeanIMT.import_state(h1, h2, blob)


def test_import_requires_hash_functions(tree_factory: Callable[[int], LeanIMT]) -> None:
    """Import validates the hash functions like the constructor does."""
    with pytest.raises(ConfigError):
        LeanIMT.import_state(h1, None, tree_factory(2).export())  # type: ignore[arg-type]


def test_tree_state_model() -> None:
    """The state model validates and exposes its fields."""
    state = TreeState(size=1, levels=[[5]])
    assert state.size == 1
    assert state.levels == [[5]]
    assert LeanIMT.import_state(h1, h2, state).root == 5


def test_tree_state_json_helpers(tree_factory: Callable[[int], LeanIMT]) -> None:
    """`to_json` writes camelCase JSON that `from_json` reads back from str or bytes."""
    state = tree_factory(3).export_state()
    blob = state.to_json()

    assert blob == tree_factory(3).export()
    assert TreeState.from_json(blob) == state
    assert TreeState.from_json(blob.encode()) == state


def test_tree_state_from_json_is_strict() -> None:
    """Unknown keys are rejected when parsing a state."""
    with pytest.raises(ValidationError):
        TreeState.from_json('{"size": 1, "levels": [["5"]], "depth": 0}')
