import logging

from ens_namehash.namehash import ADDR_REVERSE_NODE, ZERO_ADDRESS, checksum_address, hash_node, hex_label, label_hash
from ens_reverse.errors import ConfigurationError, NotAuthorised

logger = logging.getLogger("reverse_registrar")


class ReverseRegistrar:
    """Hands out reverse nodes `<hex address>.addr.reverse`.

    The registrar must own `root_node` in `ens`. The node a claim touches is
    derived from the authenticated caller alone, so an address can only ever
    move its own reverse record, while the new owner can be anyone.
    """

    def __init__(self, ens, address, root_node=ADDR_REVERSE_NODE, default_resolver=None):
        self.ens = ens
        self.address = checksum_address(address)
        self.root_node = bytes(root_node)
        self.default_resolver = default_resolver

    def node(self, addr):
        return hash_node(self.root_node, hex_label(addr))

    def _set_subnode_owner(self, label, owner):
        try:
            self.ens.set_subnode_owner(self.address, self.root_node, label_hash(label), owner)
        except NotAuthorised as e:
            logger.error(f"Registrar {self.address} does not own root node 0x{self.root_node.hex()}")
            raise ConfigurationError(
                f"Registrar {self.address} does not own root node 0x{self.root_node.hex()}") from e

    def claim(self, caller, owner):
        """Transfer the caller's reverse node to `owner`.

        :param caller: authenticated address of the invoker
        :param owner: new owner of the reverse node
        :returns: reverse node, bytes(32)"""

        label = hex_label(caller)
        self._set_subnode_owner(label, owner)
        node = hash_node(self.root_node, label)
        logger.info(f"Reverse node 0x{node.hex()} of {checksum_address(caller)} claimed for {checksum_address(owner)}")
        return node

    def claim_with_resolver(self, caller, owner, resolver=None):
        """Like claim(), also pointing the reverse node at `resolver` when one is given and not zero."""
        label = hex_label(caller)
        node = hash_node(self.root_node, label)
        owner = checksum_address(owner)
        current_owner = self.ens.owner(node)

        if resolver is not None:
            resolver = checksum_address(resolver)
        # zero resolver counts as no resolver
        if resolver not in (None, ZERO_ADDRESS) and resolver != self.ens.resolver(node):
            # the registrar has to own the node to change its resolver
            if current_owner != self.address:
                self._set_subnode_owner(label, self.address)
                current_owner = self.address
            self.ens.set_resolver(self.address, node, resolver)

        if current_owner != owner:
            self._set_subnode_owner(label, owner)

        logger.info(f"Reverse node 0x{node.hex()} of {checksum_address(caller)} claimed for {owner}")
        return node

    def set_name(self, caller, name):
        """Claim the caller's reverse node for the registrar and store `name` in the default resolver."""
        if self.default_resolver is None:
            raise ConfigurationError("set_name needs a default resolver")
        node = self.claim_with_resolver(caller, self.address, self.default_resolver.address)
        self.default_resolver.set_name(self.address, node, name)
        return node
