# logweave

Building blocks for routing and formatting log records: a logger
hierarchy, filters, pattern and JSON encoders, and writers that
receive the encoded bytes.

## Records and levels

`logweave.record` defines `Level` (`ERROR`, `WARN`, `INFO`, `DEBUG`,
`TRACE`) and `LevelFilter`, which adds `OFF`. A larger value means more
verbose output. `parse_level_filter("warn")` parses a name and ignores
case. An unknown name raises `ValueError`.

A `Record` is a frozen dataclass with `level`, `target`, `message`,
`module_path`, `file` and `line`.

Each thread has its own mapped diagnostic context. It is managed with
`mdc_insert`, `mdc_get`, `mdc_remove`, `mdc_clear` and `mdc_items`.

## Writers and styles

Encoders write bytes to a `logweave.style.Writer`. That is an abstract
class with `write(data)`, `flush()` and `set_style(style)`. A `Style` has
optional `text` and `background` colors (`Color`) and an optional
`intense` flag.

`logweave.writers` provides three writers:

- `SimpleWriter(stream)` writes to a binary stream and ignores styles.
- `AnsiWriter(stream)` writes to a binary stream and turns styles into ANSI
  escape codes. `ansi_escape(style)` returns such a code on its own.
- `ConsoleWriter(stream)` writes to a text or binary console stream with
  ANSI styling. Its `lock()` context manager holds the stream so that
  other threads cannot write in between. `console_stdout()` and
  `console_stderr()` return a `ConsoleWriter`, or `None` when the stream
  is not a terminal.

## Pattern encoder

`logweave.pattern.PatternEncoder(pattern)` renders records from a
template. The default template is `{d} {l} {t} - {m}{n}`. Mistakes in a
pattern do not raise. They are rendered inline as `{ERROR: ...}`.
`is_error_free()` reports whether the pattern compiled cleanly.

| Formatter | Output |
|---|---|
| `d`, `date` | Current time. Takes an optional strftime-style format (default `%+`) and an optional timezone, `utc` or `local` |
| `l`, `level` | Level |
| `m`, `message` | Message |
| `M`, `module` | Module path, or `???` |
| `f`, `file` | Source file, or `???` |
| `L`, `line` | Line number, or `???` |
| `t`, `target` | Target |
| `T`, `thread` | Current thread's name |
| `I`, `thread_id` | Native thread id |
| `i`, `tid` | Native thread id, cached per thread |
| `P`, `pid` | Process id |
| `n` | Platform newline |
| `h(...)`, `highlight(...)` | The argument, styled by level: error bold red, warn yellow, info green, trace cyan |
| `D(...)`, `debug(...)` | The argument, only when Python runs without `-O` |
| `R(...)`, `release(...)` | The argument, only when Python runs with `-O` |
| `X(key)(default)`, `mdc` | A value from the thread's diagnostic context. The default is optional and empty if left out |
| `(...)` | The argument, with the format spec applied |

A format spec follows a colon: `[[fill]align][min_width][.max_width]`.
The alignment is `<` or `>`. For example, `{m:~>5.6}` right-aligns the
message to at least 5 characters, padding with `~`, and cuts it off after
6 characters. Widths count characters, not bytes.

To output a special character literally, double it (`{{`, `}}`, `((`,
`))`) or put a backslash before it (`\{`, `\\`).

```python
import io

from logweave.pattern import PatternEncoder
from logweave.record import Level, Record
from logweave.writers import SimpleWriter

buffer = io.BytesIO()
PatternEncoder("{l} {m:>10}").encode(
    SimpleWriter(buffer), Record(level=Level.INFO, message="hello")
)
print(buffer.getvalue())  # b'INFO      hello'
```

The parser (`logweave.pattern_parser.parse`), the compiled chunks
(`logweave.chunks`) and the width writers (`logweave.alignment`) can also
be used on their own.

## JSON encoder

`logweave.json_encoder.JsonEncoder` writes each record as one compact JSON
object followed by a newline. The object has these fields: `time`
(RFC 3339, local time), `level`, `message`, `module_path`, `file` and
`line` (each only when set), `target`, `thread`, `thread_id` and `mdc`.
`encode_at(w, time, record)` stamps the record with a given time.

## Filters

`logweave.filters.Filter` returns a `Response`: `ACCEPT`, `NEUTRAL` or
`REJECT`. `ThresholdFilter(level)` rejects records that are more verbose
than `level`.

## Loggers

`logweave.logger.build_logger(root_level, root_appenders, loggers,
appenders, err_handler)` creates a `Logger`. The arguments work like this:

- `loggers` are `LoggerConfig(name, level, appenders, additive)` entries.
  Their names are paths whose components are separated by `::`.
- `appenders` are `NamedAppender(name, appender, filters)` entries.
- A logger that is not configured uses the level and appenders of its
  nearest configured ancestor.
- An additive logger also sends records to its parent's appenders.
- If a name refers to an appender that does not exist, `ValueError` is
  raised.

A `Logger` has these methods:

- `enabled(level, target)` reports whether a record would pass.
- `log(record)` routes a record. The filters are checked in order: the
  first `ACCEPT` or `REJECT` decides. Any exception an appender raises is
  passed to the error handler. The default handler prints it to standard
  error.
- `flush()` flushes every appender.
- `max_log_level()` returns the most verbose level that any logger allows.
- `set_config(...)` replaces the configuration at runtime.

## What is not included

The package contains no appenders. An appender is any object with
`append(record)` and `flush()` methods, so writing to files, rolling
files or the console is up to the caller. For example, such an object can
combine an encoder with one of the writers above.

The package does not read configuration files and does not watch them for
changes. Loggers are configured in code only.

It does not hook into Python's standard `logging` module.

## Tests

The test suite in `tests/` runs under pytest, which the `test` extra
installs.