from feverish.discovery import DiscoveryEntry
from feverish.ui_messages import (
    StartDialogue,
    UiDialogueMode,
    UiDialogueOption,
    UiDialoguePreview,
    UiDialogueRequest,
)


def test_preview_from_entry_copies_fields():
    entry = DiscoveryEntry("k", "Key").with_subtitle("sub").with_description("desc").with_model_path("m")
    preview = UiDialoguePreview.from_entry(entry)
    assert preview == UiDialoguePreview("Key", "sub", "desc", None, "m")


def test_back_option():
    back = UiDialogueOption.back()
    assert (back.text, back.item_id, back.seen, back.enabled) == ("back", None, False, True)


def test_request_defaults():
    req = UiDialogueRequest(UiDialogueMode.INVENTORY, "inventory", "t", "p.png")
    assert req.options == [] and req.reveal_duration_secs == 0.0
    assert StartDialogue(req).request.mode is UiDialogueMode.INVENTORY