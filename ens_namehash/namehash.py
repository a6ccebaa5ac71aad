''' namehash(), reverse labels and node hashing for ENS.

namehash()/namehashg() adapted from namehash() by Noel Maersk (veox),
version 0.1.3, License: LGPLv3

Nodes are keccak-256 digests chained label by label:
node(parent, label) = keccak(parent + keccak(label)).
'''

# PyPI package 'pycryptodome'
from Crypto.Hash import keccak
from web3 import Web3

from ens_reverse.errors import InvalidAddress

ROOT_NODE = bytes(32)
REVERSE_SUFFIX = "addr.reverse"

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

ADDRESS_LENGTH = 20
NODE_LENGTH = 32


def keccak256(data: bytes) -> bytes:
    return keccak.new(digest_bits=256, data=data).digest()


def to_address_bytes(addr) -> bytes:
    '''Coerce an address to its 20 raw bytes.

    :param addr: 20-byte value or hex string, with or without 0x
    :returns: bytes(20)'''

    if isinstance(addr, str):
        try:
            addr = Web3.to_bytes(hexstr=addr)
        except (ValueError, TypeError) as e:
            raise InvalidAddress(f"Not a hex address: {addr!r}") from e
    elif isinstance(addr, (bytearray, memoryview)):
        addr = bytes(addr)

    if not isinstance(addr, bytes) or len(addr) != ADDRESS_LENGTH:
        raise InvalidAddress(f"Address must be {ADDRESS_LENGTH} bytes: {addr!r}")
    return addr


def checksum_address(addr) -> str:
    return Web3.to_checksum_address(Web3.to_hex(to_address_bytes(addr)))


def hex_label(addr) -> str:
    '''Lowercase hex of the address bytes, no 0x prefix. Always 40 chars.'''
    return to_address_bytes(addr).hex()


def label_hash(label: str, encoding='utf-8') -> bytes:
    return keccak256(bytes(label, encoding=encoding))


def hash_node(parent: bytes, label: str, encoding='utf-8') -> bytes:
    '''Child node of `parent` reached through `label`.

    The label is hashed first and the digest is combined with the parent,
    hashing the raw label against the parent lands on a different node.

    :param parent: parent node, bytes(32)
    :param label: single label, no dots
    :returns: bytes(32)'''

    if len(parent) != NODE_LENGTH:
        raise ValueError(f"Parent node must be {NODE_LENGTH} bytes, got {len(parent)}")
    return keccak256(bytes(parent) + label_hash(label, encoding))


def _namehashgen(encoding):
    '''Internal, generator iterator.

    Takes next label (string).

    Yields nodehash (bytes(32)), accounting for label.'''

    # start from nullhash
    nodehash = ROOT_NODE

    while True:
        label = (yield nodehash)
        nodehash = hash_node(nodehash, label, encoding)


def namehashg(name: str, encoding='utf-8'):
    '''ENS "namehash()" convention mapping of strings to bytes(32) hashes.

    Generator-based function variant. Performs worse than the recursive
    variant, but is not limited by the system stack depth limit.

    :param name: name to hash, labels separated by dots
    :type name: str
    :returns: bytes(32)'''

    hg = _namehashgen(encoding)
    h = hg.send(None)

    # short-circuit for empty name
    if name == '':
        return h

    for l in reversed(name.split('.')):
        h = hg.send(l)
    return h


def namehash(name: str, encoding='utf-8'):
    '''ENS "namehash()" convention mapping of strings to bytes(32) hashes.

    Recursive function variant.

    :param name: name to hash, labels separated by dots
    :type name: str
    :returns: bytes(32)'''

    if name == '':
        return ROOT_NODE
    label, _, remainder = name.partition('.')
    return hash_node(namehash(remainder, encoding), label, encoding)


ADDR_REVERSE_NODE = namehash(REVERSE_SUFFIX)


def reverse_name(addr) -> str:
    return f"{hex_label(addr)}.{REVERSE_SUFFIX}"


def reverse_node(addr, root_node=ADDR_REVERSE_NODE) -> bytes:
    return hash_node(root_node, hex_label(addr))
