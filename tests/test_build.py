import pytest

from bytebraise.build import add_task
from bytebraise.datastore import DataSmart


@pytest.fixture
def d():
    return DataSmart()


def test_prefix_added(d):
    add_task("compile", [], [], d)
    assert d.get_var_flag("do_compile", "task", expand=False) == "1"
    assert d.get_var_flag("compile", "task", expand=False) is None


def test_prefix_not_duplicated(d):
    add_task("do_build", [], [], d)
    assert d.get_var_flag("do_build", "task", expand=False) == "1"
    assert d.get_var_flag("do_do_build", "task", expand=False) is None


def test_task_flag_is_only_public_flag(d):
    add_task("patch", ["do_compile"], ["do_fetch"], d)
    assert d.get_var_flags("do_patch") == {"task": "1"}


def test_variable_content_untouched(d):
    add_task("configure", [], [], d)
    assert d.get_var("do_configure") is None


def test_existing_flags_preserved(d):
    d.set_var_flag("do_install", "dirs", "/tmp")
    add_task("install", [], [], d)
    assert d.get_var_flags("do_install") == {"dirs": "/tmp", "task": "1"}


def test_non_string_task_name(d):
    add_task(5, [], [], d)
    assert d.get_var_flag("do_5", "task", expand=False) == "1"


def test_repeated_add_is_idempotent(d):
    add_task("fetch", [], [], d)
    add_task("do_fetch", [], [], d)
    assert d.get_var_flags("do_fetch") == {"task": "1"}