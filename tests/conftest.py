import pytest

from ens_db.name_db import NameDB
from ens_db.registry_db import RegistryDB
from ens_namehash.namehash import ROOT_NODE, label_hash, namehash
from ens_reverse.reverse_registrar import ReverseRegistrar
from ens_reverse.reverse_resolver import DefaultReverseResolver

ROOT_OWNER = "0x00000000000000000000000000000000000000aa"
REGISTRAR = "0x00000000000000000000000000000000000000bb"
RESOLVER = "0x00000000000000000000000000000000000000cc"
ALICE = "0x112234455c3a32fd11230c42e7bccd4a84e02010"
BOB = "0x00000000000000000000000000000000000b0b00"
CAROL = "0x0000000000000000000000000000000000ca7010"


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "ens.db")


@pytest.fixture
def registry(db_path):
    registry = RegistryDB(db_path, ROOT_OWNER)
    registry.set_subnode_owner(ROOT_OWNER, ROOT_NODE, label_hash("reverse"), ROOT_OWNER)
    registry.set_subnode_owner(ROOT_OWNER, namehash("reverse"), label_hash("addr"), REGISTRAR)
    return registry


@pytest.fixture
def resolver(registry, db_path):
    return DefaultReverseResolver(registry, NameDB(db_path), RESOLVER)


@pytest.fixture
def registrar(registry, resolver):
    return ReverseRegistrar(registry, REGISTRAR, default_resolver=resolver)


class RecordingStore:
    """Ownership store double that records every call it receives."""

    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def set_subnode_owner(self, caller, node, label, owner):
        self.calls.append((caller, node, label, owner))
        if self.error is not None:
            raise self.error


@pytest.fixture
def recording_store():
    return RecordingStore()
