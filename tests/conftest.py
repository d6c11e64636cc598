import gc
import pathlib

import pytest


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow to run")


@pytest.fixture(scope="session")
def DATA_DIR() -> pathlib.Path:
    return pathlib.Path(__file__).parent / "data"


@pytest.fixture
def four_taxa() -> tuple[list[str], list[list[float]]]:
    """an additive matrix whose neighbour joining tree is
    (((A:2,B:3):3,C:4):2,D:2);"""
    names = ["A", "B", "C", "D"]
    dists = [
        [0, 5, 9, 9],
        [5, 0, 10, 10],
        [9, 10, 0, 8],
        [9, 10, 8, 0],
    ]
    return names, dists


@pytest.fixture(scope="session", autouse=True)
def _try_cleaning_up_on_autouse_fixture_teardown():
    yield
    for _ in range(10):
        gc.collect()


def pytest_sessionfinish(session, exitstatus):
    for _ in range(10):
        gc.collect()
