import logging
import sqlite3
from contextlib import closing

from ens_namehash.namehash import ROOT_NODE, NODE_LENGTH, ZERO_ADDRESS, checksum_address, keccak256
from ens_reverse.errors import NotAuthorised, StoreUnavailable

logger = logging.getLogger("registry_db")

def _node_key(node):
    if len(node) != NODE_LENGTH:
        raise ValueError(f"Node must be {NODE_LENGTH} bytes, got {len(node)}")
    return bytes(node).hex()


class RegistryDB:
    """ENS-style ownership registry kept in sqlite.

    Every write is checked against the current owner of the node being written,
    the same rule the on-chain registry applies to msg.sender.
    """

    def __init__(self, db_file, root_owner):
        self.db_file = db_file
        self._create_tables()
        if self.owner(ROOT_NODE) == ZERO_ADDRESS:
            self._write_owner(ROOT_NODE, checksum_address(root_owner))

    def _connect(self):
        try:
            return sqlite3.connect(self.db_file)
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Cannot open registry db {self.db_file}: {e}") from e

    def _create_tables(self):
        try:
            with closing(self._connect()) as conn:
                cursor = conn.cursor()
                cursor.execute('''
                    CREATE TABLE IF NOT EXISTS records (
                        node TEXT,
                        owner TEXT,
                        resolver TEXT,
                        updated TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                        PRIMARY KEY (node)
                    )
                ''')
                conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Cannot create registry tables: {e}") from e

    def _get_field(self, node, field):
        try:
            with closing(self._connect()) as conn:
                cursor = conn.cursor()
                cursor.execute(f'''
                    SELECT {field} FROM records WHERE node = ?
                ''', (_node_key(node),))
                result = cursor.fetchone()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Cannot read {field} of node 0x{bytes(node).hex()}: {e}") from e
        if result and result[0]:
            return result[0]
        return ZERO_ADDRESS

    def _write_owner(self, node, owner):
        try:
            with closing(self._connect()) as conn:
                cursor = conn.cursor()
                cursor.execute('''
                    INSERT INTO records (node, owner, resolver) VALUES (?, ?, NULL)
                    ON CONFLICT(node) DO UPDATE SET owner = excluded.owner, updated = CURRENT_TIMESTAMP
                ''', (_node_key(node), owner))
                conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Cannot write owner of node 0x{bytes(node).hex()}: {e}") from e

    def _write_resolver(self, node, resolver):
        try:
            with closing(self._connect()) as conn:
                cursor = conn.cursor()
                cursor.execute('''
                    INSERT INTO records (node, owner, resolver) VALUES (?, NULL, ?)
                    ON CONFLICT(node) DO UPDATE SET resolver = excluded.resolver, updated = CURRENT_TIMESTAMP
                ''', (_node_key(node), resolver))
                conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Cannot write resolver of node 0x{bytes(node).hex()}: {e}") from e

    def _authorise(self, caller, node):
        caller = checksum_address(caller)
        owner = self.owner(node)
        if caller != owner:
            raise NotAuthorised(caller, bytes(node), owner)

    def owner(self, node):
        return self._get_field(node, "owner")

    def resolver(self, node):
        return self._get_field(node, "resolver")

    def set_owner(self, caller, node, owner):
        self._authorise(caller, node)
        self._write_owner(node, checksum_address(owner))

    def set_subnode_owner(self, caller, node, label, owner):
        """Give the child of `node` under `label` (a keccak label hash) to `owner`."""
        self._authorise(caller, node)
        subnode = keccak256(bytes(node) + bytes(label))
        owner = checksum_address(owner)
        self._write_owner(subnode, owner)
        logger.info(f"New owner of 0x{subnode.hex()}: {owner}")
        return subnode

    def set_resolver(self, caller, node, resolver):
        self._authorise(caller, node)
        self._write_resolver(node, checksum_address(resolver))
