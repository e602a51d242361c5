from bytebraise.errors import (
    DataConversionError,
    DataSmartError,
    RecursiveReferenceError,
)


def _raise_and_catch(error):
    try:
        raise error
    except DataSmartError as caught:
        return caught
    return None


def test_recursive_reference_keeps_variable_name():
    err = RecursiveReferenceError("FOO")
    assert err.var == "FOO"


def test_recursive_reference_message():
    assert str(RecursiveReferenceError("BAR")) == "A variable references itself"


def test_recursive_reference_caught_as_base_error():
    caught = _raise_and_catch(RecursiveReferenceError("BAZ"))
    assert caught is not None
    assert caught.var == "BAZ"
    assert str(caught) == "A variable references itself"


def test_conversion_error_default_message():
    assert str(DataConversionError()) == "Unable to convert"


def test_conversion_error_caught_as_base_error():
    caught = _raise_and_catch(DataConversionError())
    assert caught is not None
    assert str(caught) == "Unable to convert"
    assert issubclass(DataConversionError, DataSmartError)