import pytest

from feverish import ron
from feverish.ratspinner.parser import (
    InvalidScriptError,
    RatScriptLoadError,
    UnsupportedExtensionError,
    load_script_bytes,
    load_script_file,
    parse_option_line,
    parse_rat_script,
    parse_rat_scripts,
)
from feverish.ratspinner.types import RatScript, RatScriptBuilder, RatNodeBuilder, RatOptionBuilder, VoicePreset

SAMPLE = """\
// script: npc.guard
// entry: hello

[hello]
speaker: guard
text: halt!
hook: guard.greet, guard.alert
> who are you? -> identity [id: ask] [hook: guard.ask]
> i should go.

[identity]
speaker: guard
voice: lost_child
text: nobody
-> hello
"""


def test_parse_basic_script():
    script = parse_rat_script(SAMPLE, "fallback")
    assert script.id == "npc.guard"
    assert script.entry == "hello"
    assert set(script.nodes) == {"hello", "identity"}
    hello = script.nodes["hello"]
    assert hello.speaker == "guard"
    assert hello.text == "halt!"
    assert hello.hooks == ["guard.greet", "guard.alert"]
    assert [o.text for o in hello.options] == ["who are you?", "i should go."]
    first = hello.options[0]
    assert first.next == "identity"
    assert first.id == "ask"
    assert first.hooks == ["guard.ask"]
    assert hello.options[1].next is None


def test_node_defaults_and_next():
    script = parse_rat_script(SAMPLE, "fallback")
    identity = script.nodes["identity"]
    assert identity.next == "hello"
    assert identity.voice is VoicePreset.LOST_CHILD
    assert identity.portrait_path == "models/npc_a/npc_a.png"
    assert script.nodes["hello"].voice is VoicePreset.NEUTRAL_NPC


def test_unknown_voice_falls_back_to_neutral():
    script = parse_rat_script("[a]\nvoice: whisper\n", "x")
    assert script.nodes["a"].voice is VoicePreset.NEUTRAL_NPC


def test_fallback_id_and_entry_to_first_node():
    script = parse_rat_script("[first]\ntext: one\n[second]\ntext: two\n", "my_file")
    assert script.id == "my_file"
    assert script.entry == "first"


def test_default_entry_start_kept_when_present():
    script = parse_rat_script("[other]\n[start]\n", "x")
    assert script.entry == "start"


def test_lines_before_first_node_ignored():
    script = parse_rat_script("text: stray\n> stray option\n[a]\n", "x")
    assert script.nodes["a"].text == ""
    assert script.nodes["a"].options == []


def test_no_nodes_is_invalid():
    with pytest.raises(InvalidScriptError, match="does not define any nodes"):
        parse_rat_script("// script: empty\n", "x")


def test_empty_node_id_reports_line():
    with pytest.raises(InvalidScriptError, match="line 2 has an empty node id"):
        parse_rat_script("[a]\n[  ]\n", "x")


def test_duplicate_node_id():
    with pytest.raises(InvalidScriptError, match="duplicate node id 'a'"):
        parse_rat_script("[a]\n[a]\n", "x")


def test_empty_option_text_reports_line():
    with pytest.raises(InvalidScriptError, match="line 3 has an empty option text"):
        parse_rat_script("[a]\ntext: hi\n> -> b\n", "x")


def test_option_inline_annotations_without_target():
    option = parse_option_line("leave now [id: bye] [hook: a, b]", 1)
    assert option.text == "leave now"
    assert option.next is None
    assert option.id == "bye"
    assert option.hooks == ["a", "b"]


def test_option_empty_id_annotation_ignored():
    option = parse_option_line("go -> there [id:   ]", 1)
    assert option.id is None
    assert option.next == "there"


def test_option_unclosed_annotation_stops():
    option = parse_option_line("go -> there [hook: x", 1)
    assert option.next == "there"
    assert option.hooks == []


def test_multiple_sections():
    content = "// script: one\n[a]\ntext: 1\n// script: two\n[b]\ntext: 2\n"
    scripts = parse_rat_scripts(content, "file")
    assert [s.id for s in scripts] == ["one", "two"]
    assert scripts[0].entry == "a"
    assert scripts[1].nodes["b"].text == "2"


def test_empty_content_is_invalid():
    with pytest.raises(InvalidScriptError, match="does not define any content"):
        parse_rat_scripts("   \n\n", "file")


def test_crlf_lines():
    script = parse_rat_script("[a]\r\ntext: hi\r\n", "x")
    assert script.nodes["a"].text == "hi"


def test_load_rat_bytes_uses_file_stem():
    asset = load_script_bytes(b"[a]\ntext: hi\n", "scripts/npc_b.RAT")
    assert [s.id for s in asset.scripts] == ["npc_b"]


def test_load_rat_bytes_invalid_utf8():
    with pytest.raises(RatScriptLoadError, match="not valid utf-8"):
        load_script_bytes(b"\xff\xfe[a]", "bad.rat")


def test_unsupported_extension():
    with pytest.raises(UnsupportedExtensionError) as info:
        load_script_bytes(b"", "script.txt")
    assert info.value.extension == "txt"
    assert str(info.value) == "unsupported script extension 'txt'"


def _sample_script() -> RatScript:
    return (
        RatScriptBuilder("npc.test")
        .entry("greeting")
        .node(
            RatNodeBuilder("greeting")
            .speaker("mr. d.")
            .text("hey there!")
            .hook("npc.test.greeting")
            .option(RatOptionBuilder("who are you?").id("ask").goto("identity"))
        )
        .node(RatNodeBuilder("identity").text("me").next("greeting"))
        .build()
    )


def test_load_ron_round_trip():
    script = _sample_script()
    text = ron.dumps(script.to_ron_data(), "RatScriptRon")
    asset = load_script_bytes(text.encode("utf-8"), "npc.ron")
    assert len(asset.scripts) == 1
    assert asset.scripts[0] == script


def test_load_ron_missing_entry_is_invalid():
    data = _sample_script().to_ron_data()
    data["entry"] = "nowhere"
    with pytest.raises(InvalidScriptError, match="entry node 'nowhere' not found"):
        load_script_bytes(ron.dumps(data).encode("utf-8"), "npc.ron")


def test_load_ron_syntax_error():
    with pytest.raises(RatScriptLoadError, match="failed to parse script RON"):
        load_script_bytes(b"(id: ", "npc.ron")


def test_load_script_file(tmp_path):
    path = tmp_path / "guard.rat"
    path.write_text(SAMPLE, encoding="utf-8")
    asset = load_script_file(path)
    assert asset.scripts[0] == parse_rat_script(SAMPLE, "guard")


def test_load_missing_file(tmp_path):
    with pytest.raises(RatScriptLoadError, match="failed to read script asset bytes"):
        load_script_file(tmp_path / "missing.rat")