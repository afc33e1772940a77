import pytest
from trackdb import build_example_db

import pytracks as pt


@pytest.fixture(scope="session")
def example_root(tmp_path_factory):
    return build_example_db(tmp_path_factory.mktemp("trackdb"))


@pytest.fixture
def db(example_root):
    pt.db_init(str(example_root))
    yield example_root
    pt.db_unload()
