"""Collection discovery constants."""

from typing import Final

# Cache settings
COLLECTION_CACHE_TTL_SECONDS: Final[int] = 3600  # 1 hour
COLLECTION_CACHE_MAX_SIZE: Final[int] = 5000

# Metadata
METADATA_TIMEOUT_SECONDS: Final[float] = 5.0
DEFAULT_IPFS_GATEWAY: Final[str] = "https://gateway.pinata.cloud"
IPFS_SCHEME: Final[str] = "ipfs://"
METADATA_USER_AGENT: Final[str] = "SquidMarket/1.0"
PLACEHOLDER_IMAGE: Final[str] = "/placeholder-nft.png"

# Introspection defaults
UNKNOWN_COLLECTION_NAME: Final[str] = "Unknown Collection"
UNKNOWN_COLLECTION_SYMBOL: Final[str] = "UNKNOWN"

# Scan window
SEQUENTIAL_PROBE_CAP: Final[int] = 100  # IDs probed when supply is unknown
PREVIEW_IMAGE_PROBES: Final[int] = 5  # Tokens tried for a collection preview image
HOLDER_SAMPLE_SIZE: Final[int] = 50  # IDs probed for unique holder stats
KNOWN_COLLECTION_SCAN_LIMIT: Final[int] = 20  # Per collection in marketplace-wide scans

# Route limits
DEFAULT_PREVIEW_COUNT: Final[int] = 6
MAX_PREVIEW_COUNT: Final[int] = 50
DEFAULT_COLLECTION_LIMIT: Final[int] = 50
MAX_COLLECTION_LIMIT: Final[int] = 100

ZERO_ADDRESS: Final[str] = "0x0000000000000000000000000000000000000000"
