import logging
from web3 import Web3

from ens_namehash.namehash import checksum_address
from ens_reverse.errors import NotAuthorised

logger = logging.getLogger("reverse_resolver")

NAME_INTERFACE_ID = bytes.fromhex("691f3431")  # name(bytes32)
ERC165_INTERFACE_ID = bytes.fromhex("01ffc9a7")  # supportsInterface(bytes4)

supported_interfaces = (NAME_INTERFACE_ID, ERC165_INTERFACE_ID)


def _interface_bytes(interface_id):
    if isinstance(interface_id, int):
        return interface_id.to_bytes(4, byteorder='big')
    if isinstance(interface_id, str):
        return Web3.to_bytes(hexstr=interface_id)
    return bytes(interface_id)


class DefaultReverseResolver:
    """Holds the reverse `name` record for nodes in the ownership store.

    Only the current owner of a node can change its name.
    """

    def __init__(self, ens, name_db, address):
        self.ens = ens
        self.name_db = name_db
        self.address = checksum_address(address)

    def name(self, node):
        return self.name_db.get_name(node)

    def set_name(self, caller, node, name):
        caller = checksum_address(caller)
        owner = self.ens.owner(node)
        if caller != owner:
            logger.error(f"set_name rejected: {caller} does not own 0x{bytes(node).hex()}")
            raise NotAuthorised(caller, bytes(node), owner)
        self.name_db.set_name(node, name)
        logger.info(f"Name of 0x{bytes(node).hex()} set to '{name}'")

    def supports_interface(self, interface_id):
        try:
            interface_id = _interface_bytes(interface_id)
        except (ValueError, TypeError, OverflowError):
            return False
        return interface_id in supported_interfaces
