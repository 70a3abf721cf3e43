# feverish

Core game logic for a small narrative game, usable on its own:

- **Settings**: `feverish.settings.GameSettings` holds volumes, dialogue speed,
  UI scale and effect toggles. `GameSettings.adjust` steps a numeric value by the
  sign of a direction and clamps it to its range, or toggles a flag.
  `GameSettings.value_text` renders a value for display. `SettingsStore` reads
  and writes the settings as a RON file, `saves/settings.ron` by default.
- **RON**: `feverish.ron.loads` and `feverish.ron.dumps` read and write the small
  subset of RON that the package uses. Bad input raises `feverish.ron.RonError`.
- **Discovery tracking**: `feverish.discovery` describes discovered items and
  NPCs (`DiscoveryEntry`) and the interactions with them (`DiscoveryInteraction`,
  `DiscoveryInteractionRecord`). It also holds a database snapshot
  (`DiscoveryDbSnapshot`) and the command messages that change the database
  (`Upsert`, `Remove`, `SetSeen`, `MoveItem`, `DropItem`, `ClearKind`,
  `RecordInteraction`, `ReplaceAll`). `feverish.commands.DiscoveryCommands`
  queues those commands until `drain()` is called.
- **Dialogue scripts**: `feverish.ratspinner.parser` parses `.rat` and `.ron`
  dialogue scripts into nodes and options. `feverish.ratspinner.runtime.RatRuntime`
  runs the scripts and puts the UI requests, hook events, discovery commands and
  voice messages it produces into a `RatOutbox`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Settings

```python
from feverish.settings import GameSettings, SettingKey, SettingsStore

settings = GameSettings()
settings.adjust(SettingKey.MUSIC_VOLUME, 1)
print(SettingKey.MUSIC_VOLUME.label(), settings.value_text(SettingKey.MUSIC_VOLUME))
# music volume 25%

restored = GameSettings.from_ron(settings.to_ron())

store = SettingsStore("saves/settings.ron")
store.save(settings)
loaded = store.load()  # defaults when the file does not exist
```

When a file cannot be read, parsed or written, `SettingsError` is raised. Fields
that are missing from a file keep their default values.

## Dialogue scripts

A `.rat` file holds one or more scripts. A new script starts at each
`// script: <id>` line. Each script is made of nodes, and each node starts with
`[node_id]`:

```
// script: npc.guard
// entry: hello
[hello]
speaker: guard
text: halt! who goes there?
hook: guard.greeted
> a friend -> friendly [id:friend] [hook:guard.friend]
> nobody [id:leave]

[friendly]
speaker: guard
text: then pass.
```

A node can also set `portrait:` and `voice:`, and it can name the node that
follows it with `-> node_id`. If the entry node does not exist, the script
starts at the first node. A script with an empty node id, an empty option text or
a duplicate node id raises `InvalidScriptError`. A file extension other than
`.rat` or `.ron` raises `UnsupportedExtensionError`. Both errors are subclasses
of `RatScriptLoadError`.

```python
from feverish.ratspinner.parser import load_script_file
from feverish.ratspinner.runtime import RatLibrary, RatRuntime
from feverish.ratspinner.types import RatChoose, RatStart

library = RatLibrary()
for script in load_script_file("guard.rat").scripts:
    library.register(script)

runtime = RatRuntime(library)
runtime.handle(RatStart("npc.guard"))
runtime.handle(RatChoose(0))

for message in runtime.outbox.ui:
    print(message)
runtime.outbox.clear()
```

Scripts can also be built in code with `RatScriptBuilder`, `RatNodeBuilder` and
`RatOptionBuilder`. `RatLibrary.seed_builtin` adds a small default script with the
id `npc.default`.

`RatRuntime` accepts `RatStart`, `RatAdvance`, `RatChoose`, `RatClose` and
`RatRegister`. Any other value raises `TypeError`. Options that let the player
show an item come from the `DiscoveryView` given to the runtime. Scripts whose id
starts with `npc.phone` do not get them. A `RatStart` made with `.headless()`
still moves through the nodes and fires hooks, but it sends no UI requests and no
speech.

## What this package does not do

This package holds game logic only. It does not draw the dialogue box, menus or
previews, and it does not play audio. `Speak` and `StopVoice` are messages in
the outbox for some other part of the game to act on. Discovery commands are
queued and emitted, but the package has no database that applies them.
`RatRuntime` estimates no speech durations of its own: reveal durations are 0
unless a `speech_duration` function is passed in.