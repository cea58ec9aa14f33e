import pytest

from brewerydb.errors import (
    BreweryDBError,
    ConfigurationError,
    DecodeError,
    RemoteError,
    ServiceError,
    TransportError,
    UnsupportedMethod,
    UsageError,
)


@pytest.mark.parametrize("error_type", [ConfigurationError, UnsupportedMethod])
def test_usage_errors_are_not_remote_errors(error_type):
    assert issubclass(error_type, UsageError)
    assert not issubclass(error_type, RemoteError)


@pytest.mark.parametrize("error_type", [TransportError, ServiceError, DecodeError])
def test_remote_errors_are_not_usage_errors(error_type):
    assert issubclass(error_type, RemoteError)
    assert not issubclass(error_type, UsageError)
    assert issubclass(error_type, BreweryDBError)


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        raise ConfigurationError("bad input")


def test_unsupported_method_message():
    error = UnsupportedMethod("DELETE")

    assert error.verb == "DELETE"
    assert str(error) == "DELETE not supported"


def test_service_error_prefixes_message():
    error = ServiceError("Invalid API Key")

    assert str(error) == "Brewerydb Service Error: Invalid API Key"
    assert error.message == str(error)
    assert error.service_message == "Invalid API Key"
    assert error.request is None
    assert error.response is None
