"""ABI helpers for the contract reads the marketplace performs.

Only the handful of functions the discovery pipeline and marketplace
routes call are described here; everything is encoded with eth-abi.
"""

from typing import Any, Final

from eth_abi import decode, encode
from web3 import Web3

# ERC-721 accessors
OWNER_OF: Final[str] = "ownerOf(uint256)"
TOKEN_URI: Final[str] = "tokenURI(uint256)"
NAME: Final[str] = "name()"
SYMBOL: Final[str] = "symbol()"
TOTAL_SUPPLY: Final[str] = "totalSupply()"

# Launchpad collection rich accessor
GET_COLLECTION_INFO: Final[str] = "getCollectionInfo()"
COLLECTION_INFO_TYPE: Final[str] = (
    "(string,string,string,string,address,uint256,uint256,uint8,uint256)"
)

# ERC-721 approval
APPROVE: Final[str] = "approve(address,uint256)"

# Marketplace writes (built unsigned, signed by the client wallet)
LIST_ITEM: Final[str] = "listItem(address,uint256,uint256,uint8,uint256)"
BUY_ITEM: Final[str] = "buyItem(uint256)"

# Marketplace
GET_ACTIVE_LISTINGS: Final[str] = "getActiveListings(address,uint256,uint256)"
ACTIVE_LISTING_TYPE: Final[str] = "(uint256,address,uint256,address,uint256,uint8,uint8)[]"
GET_LISTING: Final[str] = "getListing(uint256)"
LISTING_TYPE: Final[str] = (
    "(uint256,address,uint256,address,uint256,uint8,uint8,uint256,uint256,address,uint256)"
)

# Launchpad events
LAUNCH_CREATED_EVENT: Final[str] = "LaunchCreated(uint256,address,address)"


def function_selector(signature: str) -> bytes:
    """First four bytes of the keccak hash of a function signature."""
    return bytes(Web3.keccak(text=signature)[:4])


def event_topic(signature: str) -> str:
    """0x-prefixed keccak hash of an event signature."""
    return "0x" + bytes(Web3.keccak(text=signature)).hex()


def arg_types(signature: str) -> list[str]:
    """Parse the argument types out of a flat function signature.

    Example:
        >>> arg_types("getActiveListings(address,uint256,uint256)")
        ['address', 'uint256', 'uint256']
    """
    inner = signature[signature.index("(") + 1 : signature.rindex(")")]
    return [t for t in inner.split(",") if t]


def encode_call(signature: str, *args: Any) -> str:
    """Build 0x-prefixed calldata for ``signature`` applied to ``args``."""
    types = arg_types(signature)
    if len(types) != len(args):
        raise ValueError(f"{signature} expects {len(types)} args, got {len(args)}")
    data = function_selector(signature)
    if types:
        data += encode(types, list(args))
    return "0x" + data.hex()


def decode_single(output_type: str, data: bytes) -> Any:
    """Decode a single return value."""
    (value,) = decode([output_type], data)
    return value
