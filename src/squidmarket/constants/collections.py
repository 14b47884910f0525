"""Statically known collections.

Collections on this list are verified regardless of any launch pool
row. Addresses are stored lowercased.
"""

from typing import Any, Final

KNOWN_COLLECTIONS: Final[list[dict[str, Any]]] = [
    {
        "address": "0xe4ee962f37a4c305c3f8abf4f5cec2347fd87a03",
        "name": "BG Test",
        "symbol": "BGTEST",
        "type": "ERC721",
        "verified": True,
        "description": "Our Launchpad Collection",
        "image": "https://gateway.pinata.cloud/ipfs/QmTsP6tHg2Lde4t6t2gidNLKmvDhvHb4cH2KCMyju3g5rM",
    },
]
