# clice

Building blocks for a C++ language server, written in plain Python on top
of `asyncio` and the standard library. The package has no runtime
dependencies.

## What is inside

| Module | Purpose |
| --- | --- |
| `clice.tasks` | `run` runs coroutines on a private event loop until every scheduled task has finished and returns their results as a tuple; `schedule` queues a coroutine as a task; `sleep` waits a number of milliseconds (or a `timedelta`); `submit` runs a callable on a pool of `THREAD_POOL_SIZE` (20) worker threads. |
| `clice.sync` | Coordination between tasks: `Event` (`set`, `clear`, `is_set`, `wait`, and directly awaitable), `Lock` (first-come, first-served; `acquire` returns a guard, `release`, `locked`, `async with`), `gather` for a fixed set of awaitables, and `gather_range` for running a coroutine over many values with bounded concurrency, stopping at the first false result. |
| `clice.filesystem` | Asynchronous file access on the worker pool: open modes (`Mode`, translated by `to_flags`), `open_file` returning a `FileHandle` (`read`, `write`, `close`, usable in `with` and `async with`), whole-file helpers `read_file` and `write_file`, and `stat` returning `Stats` with a modification time truncated to whole seconds. |
| `clice.network` | Language Server Protocol framing: `MessageReader.feed` parses `Content-Length` framed JSON messages, `encode_message` produces them, `listen` serves messages from stdin with answers on stdout, `listen_tcp` accepts one client on an address and port, and `write` sends a value to the connected client. |
| `clice.lexer` | A raw C++ tokenizer (`tokenize`, `Token`, `TokenKind`) without preprocessing. It handles comments (dropped or kept), string and character literals with prefixes, raw strings, numbers, punctuators and line continuations, marks tokens at the start of a line, and ends with one `EOF` token. |
| `clice.preamble` | `compute_preamble_bound` returns the offset where the leading block of preprocessor directives (and a leading `module;`) ends, or 0; `PCHInfo` describes a built precompiled header. |
| `clice.module` | `scan_module_name` returns the name in an `export module` declaration, `""` when there is none, and `None` when the declaration sits inside a conditional directive; `ModuleInfo` and `PCMInfo` describe module units. |
| `clice.command` | `mangle_command` splits a compile command on spaces (honouring quotes), appends `-resource-dir=<dir>`, and drops `-c`, `-o` with its value, `-o...` and `@CMakeFiles...` arguments. |
| `clice.source_converter` | Conversion between UTF-8 byte offsets and LSP positions counted in UTF-8, UTF-16 or UTF-32 (`SourceConverter` with `remeasure`, `to_position`, `to_range`, `to_offset`; `Position`, `Range`, `LocalSourceRange`, `PositionEncoding`), and between absolute paths and `file://` URIs (`to_uri`, `to_path`). |

## Examples

Running a coroutine over many values, four at a time:

```python
from clice.tasks import run, sleep
from clice.sync import gather_range

async def check(value):
    await sleep(10)
    return value >= 0

async def main():
    return await gather_range(range(30), check, 4)

print(run(main()))  # (True,)
```

Framing LSP messages:

```python
from clice.network import MessageReader, encode_message

frame = encode_message({"jsonrpc": "2.0", "id": 1, "result": None})
reader = MessageReader()
for message in reader.feed(frame):
    print(message["id"])
```

Finding the preamble and the module name of a source file:

```python
from clice.preamble import compute_preamble_bound
from clice.module import scan_module_name

source = '#include <vector>\n#include "a.h"\nint x;\n'
bound = compute_preamble_bound(source)
print(source[:bound])

print(scan_module_name("export module app.core:util;\n"))  # app.core:util
```

Cleaning a compile command:

```python
from clice.command import mangle_command

args = mangle_command("clang++ -std=c++23 -c main.cpp -o main.o", "/opt/clang/lib")
print(args)  # ['clang++', '-std=c++23', 'main.cpp', '-resource-dir=/opt/clang/lib']
```

Converting between offsets and editor positions:

```python
from clice.source_converter import (
    Position,
    PositionEncoding,
    SourceConverter,
    to_uri,
)

converter = SourceConverter(PositionEncoding.UTF16)
text = "int a;\nauto s = \"😀\";\n"
position = converter.to_position(text, len(text.encode()) - 2)
offset = converter.to_offset(text, Position(line=1, character=4))

uri = to_uri("/home/user/project/main.cpp")
```

## What it does not do

This is a library of parts, not a language server. It has no command to
start, no compiler front end, and no AST-based features such as
diagnostics, completion or inlay hints. `scan_module_name` works by lexing
only: when a module declaration depends on conditional directives it
returns `None` rather than preprocessing the file. `PCHInfo` and `PCMInfo`
only describe build results; nothing here builds precompiled headers or
modules.

## Tests

The test suite uses `pytest` and `pytest-asyncio`, listed in the `test`
optional dependency group.