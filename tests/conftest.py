# tests/conftest.py

import pytest

from credport.common.models import CanonicalCredential, StoredCredential
from credport.common.store import MemoryStore


def make_credential(site="example.com", username="user@test.com", password="password123", **extra):
    return CanonicalCredential(site=site, username=username, password=password, **extra)


def make_stored(record_id, created_at="2023-01-01", **fields):
    return StoredCredential(record_id, make_credential(**fields), created_at)


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def lastpass_csv():
    return (
        "url,username,password,extra,name,grouping,fav\n"
        "https://example.com,user@test.com,password123,notes,Example Site,Work,0\n"
    )
