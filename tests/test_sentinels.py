#
# DURFMT - Sentinels Tests
#

# Local ----------------------------------------------------------------------------------------------------------------
from durfmt.sentinels import NOT_FOUND, NotFoundType, iffound


# Tests ----------------------------------------------------------------------------------------------------------------

class TestNotFound:
    def test_singleton(self):
        assert NotFoundType() is NOT_FOUND

    def test_falsy(self):
        assert not NOT_FOUND

    def test_repr(self):
        assert repr(NOT_FOUND) == "<NOT_FOUND>"

    def test_identity_equality(self):
        assert NOT_FOUND == NOT_FOUND
        assert NOT_FOUND != None  # noqa: E711
        assert NOT_FOUND != 0

    def test_distinguishes_stored_none(self):
        table = {"en": None}
        assert table.get("en", NOT_FOUND) is None
        assert table.get("fr", NOT_FOUND) is NOT_FOUND


class TestIffound:
    def test_found(self):
        assert iffound(0, default=5) == 0
        assert iffound(None, default=5) is None

    def test_default(self):
        assert iffound(NOT_FOUND, default=5) == 5
        assert iffound(NOT_FOUND) is None
