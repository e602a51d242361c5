from bytebraise.overrides import PerVarOverrideData, VarAndOverride, decompose_variable


def test_decompose_example():
    assert decompose_variable("VAR_foo_bar_baz") == [
        ("VAR_foo_bar", VarAndOverride("VAR_foo_bar_baz", "baz")),
        ("VAR_foo", VarAndOverride("VAR_foo_bar_baz", "bar_baz")),
        ("VAR", VarAndOverride("VAR_foo_bar_baz", "foo_bar_baz")),
    ]


def test_decompose_dashed_overrides():
    assert decompose_variable("ALTERNATIVE_ncurses-tools_class-target") == [
        (
            "ALTERNATIVE_ncurses-tools",
            VarAndOverride("ALTERNATIVE_ncurses-tools_class-target", "class-target"),
        ),
        (
            "ALTERNATIVE",
            VarAndOverride(
                "ALTERNATIVE_ncurses-tools_class-target", "ncurses-tools_class-target"
            ),
        ),
    ]


def test_decompose_rejects_unexpanded_override():
    assert decompose_variable("TEST_${PN}") == []


def test_decompose_rejects_empty_base():
    assert decompose_variable("_foo") == []


def test_decompose_plain_variable():
    assert decompose_variable("TEST") == []


def test_record_and_get():
    data = PerVarOverrideData()
    data.record_overrides("TEST_bar")
    assert data.get("TEST") == [VarAndOverride("TEST_bar", "bar")]
    assert data.get("TEST_bar") is None


def test_collect_lists_all_entries():
    data = PerVarOverrideData()
    data.record_overrides("TEST_local_foo")
    collected = data.collect()
    assert sorted((var, e.override_str) for var, e in collected) == [
        ("TEST", "local_foo"),
        ("TEST_local", "foo"),
    ]


def test_remove_returns_entries():
    data = PerVarOverrideData()
    data.record_overrides("TEST_bar")
    assert data.remove("TEST") == [VarAndOverride("TEST_bar", "bar")]
    assert data.get("TEST") is None
    assert data.remove("TEST") is None


def test_remove_overrides_drops_contributions():
    data = PerVarOverrideData()
    data.record_overrides("TEST_bar")
    data.record_overrides("TEST_foo")
    data.remove_overrides("TEST_bar")
    assert data.get("TEST") == [VarAndOverride("TEST_foo", "foo")]


def test_copy_is_independent():
    data = PerVarOverrideData()
    data.record_overrides("TEST_bar")
    other = data.copy()
    other.record_overrides("TEST_foo")
    assert data.get("TEST") == [VarAndOverride("TEST_bar", "bar")]
    assert len(other.get("TEST")) == 2