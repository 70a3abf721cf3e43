import dataclasses

import pytest

from feverish.discovery import (
    DiscoveryDbSnapshot,
    DiscoveryEntry,
    DiscoveryInteraction,
    DiscoveryInteractionAction,
    DiscoveryInteractionActor,
    DiscoveryInteractionRecord,
    DiscoveryKind,
    DropItem,
)


def test_entry_builders_do_not_mutate():
    base = DiscoveryEntry("key", "Key")
    built = base.with_subtitle("s").with_description("d").with_model_path("m.glb").with_seen(True)
    assert base.seen is False and base.subtitle == ""
    assert (built.subtitle, built.description, built.model_path, built.seen) == ("s", "d", "m.glb", True)
    assert built.with_image_path("i.png").image_path == "i.png"


def test_entry_dict_round_trip_and_defaults():
    entry = DiscoveryEntry("a", "A").with_seen(True)
    assert DiscoveryEntry.from_dict(entry.to_dict()) == entry
    assert DiscoveryEntry.from_dict({"id": "x"}) == DiscoveryEntry("x")


def test_interaction_defaults():
    i = DiscoveryInteraction()
    assert i.kind is DiscoveryKind.ITEM
    assert i.action is DiscoveryInteractionAction.STATUS_CHANGED
    assert i.actor == DiscoveryInteractionActor.system()


def test_interaction_serialization_tags():
    i = DiscoveryInteraction(
        DiscoveryKind.NPC, "n", DiscoveryInteractionAction.SHARED,
        DiscoveryInteractionActor.speaker("mr. d."),
    ).with_script("s").with_node("n1").with_option("o").with_note("dialogue.start")
    data = i.to_dict()
    assert data["actor"] == {"speaker": "mr. d."}
    assert data["action"] == "shared"
    assert DiscoveryInteraction.from_dict(data) == i


def test_bad_actor():
    with pytest.raises(ValueError):
        DiscoveryInteractionActor.from_data("nobody")


def test_snapshot_round_trip():
    snap = DiscoveryDbSnapshot(
        items=[DiscoveryEntry("a", "A")],
        interactions=[DiscoveryInteractionRecord(3, DiscoveryInteraction(id="a"))],
        revision=7,
    )
    assert DiscoveryDbSnapshot.from_dict(snap.to_dict()) == snap
    empty = DiscoveryDbSnapshot.from_dict({})
    assert (empty.revision, empty.next_interaction_sequence) == (1, 1)


def test_commands_are_values():
    command = DropItem("a")
    assert dataclasses.astuple(command) == ("a",)
    assert command == DropItem("a")
    assert (command == DropItem("b")) is False