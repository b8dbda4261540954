# work_record

A library for keeping a record of daily work in an SQLite database. It
stores work records, the requirements they belong to, and reported
issues. It also stores the lookup tables that classify them: affected
areas, source types, work types, work-record statuses, requirement
statuses, issue progress values, departments and employees.

## Modules

- `work_record.db` opens connections and runs statements.
  - `open_db(path)` opens a database in autocommit mode with foreign
    keys switched on.
  - `execute` and `fetch_all` run statements. `transaction(conn)` is a
    context manager: it commits when the block ends and rolls back if
    the block raises.
  - Database failures raise `DaoError`. A missing row raises
    `NotFoundError`, which is also a `LookupError`.
  - Paged queries return a `Page` with `items` and `total`.
- `work_record.models` holds the dataclasses for every kind of record:
  `WorkRecord`, `RequirementRecord`, `IssueRecord`, `FileRecord`,
  `EmployeeDict`, `DepartmentDict` and the other lookup entries.
- `work_record.dictionaries` reads and writes the lookup tables.
  `DictionaryDao(conn, "work_type_dict")` provides `query_all`,
  `insert`, `update` and `delete`. `get_table(name)` describes a table
  and raises `KeyError` for an unknown name.
- `work_record.employees` reads and writes employees. On insert and
  update, the department is looked up by `department_name`. If no
  department has that name, the department id stored is 0.
- `work_record.file_records` reads and writes uploaded-file records and
  their links to work records.
- `work_record.issues`, `work_record.requirements` and
  `work_record.work_records` work on the main record tables.
  - Each has create, read, update and delete functions and a paged
    query. Pages are numbered from 1.
  - A paged query's filters can be ids, numeric strings, `""` or
    `None`. An empty filter matches everything.
  - `query_work_records_paged` also takes a `scope`. With `"month"` or
    `"year"` it keeps only records completed in the current month or
    year.
  - Work records come back with their attached files in `file_info`, a
    map from file id to a JSON description of the file.
- `work_record.config_providers` and `work_record.config_manager`
  handle layered configuration.
- `work_record.files` handles uploaded files.
  - `sanitize_filename` replaces `<>:"/\|?*` with `_` and caps the
    name at 100 UTF-8 bytes.
  - `create_directory` and `write_binary_file` create directories and
    write files.
  - `STATIC_UPLOAD_DIR` is the default upload directory.
- `work_record.responses` builds JSON response bodies as
  `JsonResponse` values: `send_success`, `send_error`,
  `send_bad_request`, `send_not_found` and the other helpers.
  `JsonResponse.body()` serialises the payload.
- `work_record.logs` sets up logging.
  - `init_logging` writes to the console and to a fresh log file.
  - `log_exception` logs an exception with its context.
  - `shutdown` detaches the handlers that `init_logging` installed.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from work_record.db import open_db, transaction
from work_record.issues import insert_issue, query_issues_paged
from work_record.models import IssueRecord

conn = open_db("db/work_record.db")
with transaction(conn):
    new_id = insert_issue(conn, IssueRecord(issue_title="Login fails", progress_id=1))

page = query_issues_paged(conn, 1, 20, "", "")
print(page.total, [issue.issue_title for issue in page.items])
```

The tables must already exist. The package runs queries against an
existing schema and does not create one.

## Configuration

```python
from work_record.config_manager import ConfigManager, initialize

initialize("config", "development")
config = ConfigManager.get_instance()
port = config.get_int("server.port", 8080)
```

`initialize(config_dir, environment)` builds the shared `ConfigManager`
from three providers, in this order:

1. `app.json` in the configuration directory, if it exists.
2. `<environment>.json` in the same directory, if it exists.
3. Environment variables. Only a fixed set is read:
   - `WORK_RECORD_ENVIRONMENT`
   - `WORK_RECORD_SERVER_PORT`
   - `WORK_RECORD_SERVER_HOST`
   - `WORK_RECORD_DATABASE_PATH`
   - `WORK_RECORD_LOGGING_LEVEL`
   - `WORK_RECORD_UPLOAD_BASE_DIR`
   - `WORK_RECORD_MAX_FILE_SIZE`

The first provider that has a value for a key wins. JSON keys are dotted
paths such as `server.port`. The environment provider looks the same key
up as `WORK_RECORD_SERVER_PORT`.

`initialize` returns the manager. It raises `ConfigError` if
`ConfigManager.validate` fails, which happens when:

- any of `server.port`, `server.host`, `database.path` or
  `upload.base_dir` is missing;
- the port is outside 1–65535;
- `upload.max_file_size` is not positive.

`validation_errors()` lists the problems found. `get_environment()` and
`get_config_dir()` report what the last `initialize` call was given.

## What this package does not do

- There is no HTTP server and no command to start one. `work_record.responses`
  only builds response bodies and status codes; serving them is up to
  the caller.
- There is no command-line program.
- There is no code that creates or migrates the database schema.
- There is nothing that serves stored upload files over the network.