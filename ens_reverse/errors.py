class ReverseError(Exception):
    pass


class InvalidAddress(ReverseError, ValueError):
    pass


class NotAuthorised(ReverseError):
    """Store rejected a write from an identity that does not own the node."""

    def __init__(self, caller, node, owner):
        self.caller = caller
        self.node = node
        self.owner = owner
        super().__init__(f"{caller} is not the owner of node 0x{node.hex()} (owner: {owner})")


class ConfigurationError(ReverseError):
    """Deployment fault, e.g. the registrar does not own its root node. Not retried."""


class StoreUnavailable(ReverseError):
    """Backing store could not complete the operation."""
