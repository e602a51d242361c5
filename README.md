# bytebraise

A BitBake-style variable datastore for Python. It stores variables and their flags. It expands
`${VAR}` references and resolves conditional overrides such as `VAR_override` against
`OVERRIDES`. It also applies pending `_append`, `_prepend` and `_remove` operations when a
variable is read.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Usage

The datastore is `bytebraise.datastore.DataSmart`.

```python
from bytebraise.datastore import DataSmart

d = DataSmart()
d.set_var("FOO", "foo")
d.set_var("VAL", "val")
d.set_var("TEST", "${VAL}")
d.prepend_var("TEST", "${FOO}:")
d.append_var("TEST", ":extra")
print(d.get_var("TEST"))          # foo:val:extra
```

`get_var(var, *, expand=True, no_weak_default=False, parsing=False)` returns `None` for an
unset variable. If a reference names a variable that is not set, the reference stays in the
result as it is.

### Overrides

```python
d = DataSmart()
d.set_var("OVERRIDES", "foo:bar:local")
d.set_var("TEST", "testvalue")
d.set_var("TEST_local", "localvalue")
print(d.get_var("TEST"))          # localvalue
```

When several conditional forms are active, the one for the override that comes later in
`OVERRIDES` is used. A combined form such as `TEST_local_foo_bar` is used when all of its parts
are active. The datastore works out the active overrides again after any variable that feeds
`OVERRIDES` changes.

### Appending, prepending and removing

Setting a name that ends in `_append`, `_prepend` or `_remove` queues an operation on the base
variable. A trailing `_<override>` makes the operation conditional on that override:

```python
d = DataSmart()
d.set_var("TEST", "A B C D")
d.set_var("TEST_remove", "B D")
print(repr(d.get_var("TEST")))    # 'A  C '
```

Removal works on whitespace-separated items and keeps the surrounding whitespace. A plain
`set_var` of the base variable discards the operations queued on it.

### Flags

```python
d.set_var_flag("foo", "doc", "what foo is for")
print(d.get_var_flag("foo", "doc", expand=False))
print(d.get_var_flags("foo"))     # flags not starting with "_"
d.del_var_flag("foo", "doc")
```

Setting an `export` or `unexport` flag also records the variable in the set stored in
`__exportlist`.

### Other operations

- `d.expand(text, None)` expands references in any string.
- `d.keys()` lists stored variable names, together with the names reached through active
  overrides. A variable removed with `d.del_var(name)` keeps its name in `keys()`, but
  `get_var` returns `None` for it.
- `d.rename_var(old, new)` moves a variable together with its pending operations and its
  conditional forms.
- `d.expand_varref(name)` replaces `${name}` with the unexpanded value of `name` in every
  stored value.
- `d.expand_keys()` (or `bytebraise.datastore.expand_keys(d)`) renames every variable whose name
  contains a reference to the expanded name. It raises `DataSmartError` if both the old and the
  new name hold values.
- `d.create_copy()` returns an independent copy of the store.

### Tasks

`bytebraise.build.add_task(task, before, after, d)` sets the `task` flag to `"1"` on
`do_<task>`, adding the `do_` prefix if it is missing. `before` and `after` are accepted but not
used yet.

### Errors

The exceptions live in `bytebraise.errors`:

- `RecursiveReferenceError`: a variable refers to itself, directly or through other variables.
  Its `var` attribute names the variable.
- `DataConversionError`: a value used as a string is not a string.
- `DataSmartError`: the base class. It is also raised when `OVERRIDES` does not settle and for
  the `expand_keys` and `expand_varref` failures described above.

## What this package does not do

- It does not read or parse configuration, class or recipe files. Variables are set only through
  the API.
- It does not evaluate inline Python expressions (`${@...}`). These are left in values as
  written.
- It has no command-line tool.