# onexutil

Small building blocks for backend services, written as a plain library with no
command-line program of its own.

| Module | What it offers |
| --- | --- |
| `onexutil.semver` | Parse, format and compare semantic and generic version strings (`Version`, `parse_semantic`, `parse_generic`, `major_minor`, `highest_supported_version`). |
| `onexutil.strutil` | List and string helpers: `diff`, `include`, `unique`, `frequency_sort`, `reverse`, case conversion, `decode_base64` and more. |
| `onexutil.netutil` | `get_local_ip`, `remote_ip` (from a remote address and request headers) and `append_port_if_needed`. |
| `onexutil.fileutil` | File system helpers: `ensure_dir_all`, `empty_dir`, `list_dir`, `safe_move`, `is_zip_file_uncompressed`, `write_file`, `get_intra_dir`, `match_entries`, `out_dir` and others. |
| `onexutil.buildinfo` | Build information (`Info`, `get`), dynamic version overrides and a `--version` flag for `argparse`. |
| `onexutil.objutil` | Inspect and copy object fields (`get_obj_fields_map`, `copy_obj`, `copy_obj_via_yaml`, `to_db_map`, `struct_name`). |
| `onexutil.retry` | `retry` with exponential backoff, `poll` and `poll_immediate`; failures raise `WaitTimeoutError`. |
| `onexutil.validation` | `Validator` dispatching to `validate_<request>` methods, plus `valid_required`, `validate_all_fields` and `validate_selected_fields`. |
| `onexutil.token` | Sign and parse HS256 JSON Web Tokens that carry a user identity. |
| `onexutil.where` | Offset/limit/filter/clause query options, tenant scoping and `get_page_offset`. |
| `onexutil.watch_manager` | A cron scheduler (`Scheduler`) and a `JobManager` of named jobs. |
| `onexutil.watch_registry` | Watcher registration, `WatcherInitializer`, `WatchOptions` and a `NullLogger`. |

## Installation

```
pip install onexutil
```

To run the test suite:

```
pip install "onexutil[test]"
pytest
```

## Examples

### Versions

```python
from onexutil.semver import parse_semantic, parse_generic, highest_supported_version

v = parse_semantic("v1.0.0-beta.2+exp.sha.5114f85")
print(str(v))                      # 1.0.0-beta.2+exp.sha.5114f85
print(v.pre_release())             # beta.2
print(v.compare("1.0.0-beta.11"))  # -1
print(v.at_least(parse_semantic("1.0.0-alpha")))  # True

print(str(parse_generic("1.2.3a")))  # 1.2.3
print(str(highest_supported_version(["v1.2.3", "v0.3.0", "2.0.1"])))  # 1.2.3
```

Invalid input raises `onexutil.semver.VersionError` (a `ValueError`).

### Strings

```python
from onexutil.strutil import diff, frequency_sort, reverse, underscore_to_camel_case

diff(["foo", "bar", "hello"], ["foo", "bar", "world"])  # ["hello"]
reverse("héllo")                                         # "olléh"
frequency_sort(["c", "b", "c", "a", "c", "b"])           # ["a", "b", "c"]
underscore_to_camel_case("create_user")                  # "CreateUser"
```

### Build information

```python
import argparse
from onexutil import buildinfo

parser = argparse.ArgumentParser()
buildinfo.add_flags(parser)                 # --version, --version=raw, --version=false
args = parser.parse_args()
buildinfo.print_and_exit_if_requested(args.version)
print(buildinfo.get().to_json())
```

### Query options and pagination

```python
from onexutil.where import new_where, with_offset, with_limit, p, get_page_offset

opts = new_where(with_offset(10), with_limit(20))
paged = p(3, 20).f("status", "active")   # offset 40, limit 20, filter status=active
get_page_offset(3, 20)                    # 40
```

A limit of `-1` (`DEFAULT_LIMIT`) means no limit.

### Tokens

```python
from onexutil.token import init, sign, parse_request

init(key="secret", identity_key="userID", expiration=3600)
token, expires_at = sign("user-42")
identity = parse_request({"Authorization": "Bearer " + token})  # "user-42"
```

Only the first call to `init` has any effect. Without it, tokens are signed
with a random key that lasts only as long as the process. Failures raise
`onexutil.token.TokenError`.

### Files

```python
from onexutil.fileutil import ensure_dir_all, get_intra_dir, out_dir

ensure_dir_all("build/cache")
get_intra_dir("0af63ce3c99162e9df23a997f62621c5", 2, 3)  # "0af/63c" on POSIX
out_dir("build")  # absolute path ending in "/"
```

### Jobs and watchers

```python
from onexutil.watch_manager import JobManager, Scheduler
from onexutil.watch_registry import WatcherInitializer, register, list_watchers

manager = JobManager(Scheduler(with_seconds=True))
manager.add_job("cleanup", "@every 3s", lambda: None)
manager.job_exists("cleanup")  # True
manager.start()
done = manager.stop()          # threading.Event, set once running jobs finish
done.wait()

register("cleanup", lambda: None)
initializer = WatcherInitializer(manager, max_workers=10)
for watcher in list_watchers().values():
    initializer.initialize(watcher)
```

Specs are five-field cron expressions (six with `with_seconds=True`),
descriptors such as `@hourly`, or `@every <duration>`. Adding a job under a
name already in use raises `JobExistsError`; updating an unknown job raises
`JobNotFoundError`; registering a watcher name twice raises
`DuplicateWatcherError`.

## What this package does not do

- It does not run a watch server: there is no distributed lock, no health
  check endpoint and nothing that turns registered watchers into running
  jobs for you. `WatchOptions` holds the settings such a server would use.
- It does not talk to a database. `onexutil.where.Options` only collects
  offsets, limits, filters, clauses and queries; applying them to a store is
  left to the caller.
- It installs no command-line program.