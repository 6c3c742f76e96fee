import pytest

from dabe import aw11_core


@pytest.fixture(scope="session")
def gp():
    return aw11_core.setup()


@pytest.fixture(scope="session")
def group(gp):
    return gp.group


@pytest.fixture(scope="session")
def authorities(gp):
    """Three independent authorities over disjoint attribute sets."""
    auth1 = aw11_core.authgen(gp, ["A", "B", "C"])
    auth2 = aw11_core.authgen(gp, ["D", "E", "F"])
    auth3 = aw11_core.authgen(gp, ["G", "H", "I"])
    return auth1, auth2, auth3
