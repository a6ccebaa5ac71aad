import logging
import os
from dotenv import load_dotenv

from ens_db.name_db import NameDB
from ens_db.registry_db import RegistryDB
from ens_namehash.namehash import ADDR_REVERSE_NODE, ROOT_NODE, label_hash, namehash
from ens_reverse.reverse_registrar import ReverseRegistrar
from ens_reverse.reverse_resolver import DefaultReverseResolver

logger = logging.getLogger("ens_reverse")


def get_config():
    load_dotenv()
    return {
        "db_path": os.getenv('SQLITE_DB_PATH', 'ens_reverse.db'),
        "root_owner": os.getenv('ROOT_OWNER_ADDRESS'),
        "registrar_address": os.getenv('REVERSE_REGISTRAR_ADDRESS'),
        "resolver_address": os.getenv('DEFAULT_RESOLVER_ADDRESS'),
        "log_level": os.getenv('LOG_LEVEL', 'INFO'),
    }


def deploy(config):
    """Create the stores and delegate `addr.reverse` to the registrar.

    :returns: (registry, registrar, resolver)"""

    logging.basicConfig(level=config["log_level"])

    for key in ("root_owner", "registrar_address", "resolver_address"):
        if not config.get(key):
            raise ValueError(f"Missing config value: {key}")

    registry = RegistryDB(config["db_path"], config["root_owner"])
    registry.set_subnode_owner(config["root_owner"], ROOT_NODE, label_hash("reverse"), config["root_owner"])
    registry.set_subnode_owner(
        config["root_owner"], namehash("reverse"), label_hash("addr"), config["registrar_address"])

    resolver = DefaultReverseResolver(registry, NameDB(config["db_path"]), config["resolver_address"])
    registrar = ReverseRegistrar(registry, config["registrar_address"], ADDR_REVERSE_NODE, resolver)
    logger.info(f"Reverse registrar {registrar.address} owns 0x{ADDR_REVERSE_NODE.hex()}")
    return registry, registrar, resolver
