"""
Unit tests for the exception hierarchy.
"""

import pytest

from tordownloader.core.exceptions import (
    HttpError,
    MissingStatusCodeError,
    TorDownloaderError,
    UnpackError,
    VersionNotFoundError,
)


class TestHttpError:
    """Tests for HttpError construction."""

    def test_message_and_status_code(self):
        error = HttpError("foo", 500)

        assert str(error) == "foo"
        assert error.status_code == 500
        assert isinstance(error, TorDownloaderError)

    def test_status_code_only(self):
        error = HttpError(500)

        assert str(error) == "500"
        assert error.status_code == 500

    @pytest.mark.parametrize("args", [("bar",), ()])
    def test_status_code_mandatory(self, args):
        with pytest.raises(TypeError, match="status_code"):
            HttpError(*args)


class TestOtherErrors:
    """Tests for messages of the other domain errors."""

    def test_version_not_found(self):
        error = VersionNotFoundError("alpha")

        assert error.branch == "alpha"
        assert str(error) == 'No latest "alpha" version found on the repository'

    def test_missing_status_code(self):
        assert "missing status code" in str(MissingStatusCodeError())

    def test_unpack_error(self):
        error = UnpackError(2, "cannot open archive\n")

        assert error.returncode == 2
        assert str(error) == "mar unpack failed with exit code 2: cannot open archive"
