"""EVM JSON-RPC client and typed contract reads."""

from squidmarket.services.evm.contracts import CollectionInfo, ContractReader
from squidmarket.services.evm.events import LaunchCreated, decode_launch_created
from squidmarket.services.evm.rpc_client import (
    EVMRPCClient,
    close_rpc_client,
    get_rpc_client,
)

__all__ = [
    "CollectionInfo",
    "ContractReader",
    "EVMRPCClient",
    "LaunchCreated",
    "close_rpc_client",
    "decode_launch_created",
    "get_rpc_client",
]
