import os

import pytest

from PumpSelectorTool import catalog as CAT
from PumpSelectorTool import config as C


@pytest.fixture(scope="session")
def panelli():
    return CAT.load_brand(os.path.join(C.PACKAGE_DATA_DIR, "panelli.json"))


@pytest.fixture
def series_95pr08(panelli):
    return panelli.get_series("95PR08")


@pytest.fixture(autouse=True)
def _fresh_registry():
    CAT.reset_registry_cache()
    yield
    CAT.reset_registry_cache()
    C.set_catalog_dir(None)
    C.set_strict_catalog(False)
