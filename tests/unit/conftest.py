"""Pytest configuration and shared fixtures for unit tests."""

import pytest
import requests
from cmrquery import Query


@pytest.fixture
def session() -> requests.Session:
    return requests.Session()


@pytest.fixture
def collections_query(session: requests.Session) -> Query:
    return Query("collections", "CMR_OPS", session=session)


@pytest.fixture
def granules_query(session: requests.Session) -> Query:
    return Query("granules", "CMR_OPS", session=session)
