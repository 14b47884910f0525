"""Unsigned marketplace transactions for the client wallet.

The service never signs or sends anything: it validates the request,
converts ether prices to wei and returns the contract calls (with
encoded calldata) that the user's wallet submits.
"""

from decimal import Decimal, InvalidOperation

import structlog
from web3 import Web3

from squidmarket.core.exceptions import ConfigurationError, ValidationError
from squidmarket.data.models.listing import BuyRequest, ListRequest, UnsignedCall
from squidmarket.services.evm import abi

logger = structlog.get_logger(__name__)


def parse_price(price: str) -> int:
    """Convert a decimal ether amount to wei.

    Raises:
        ValidationError: If the price is not a positive ether amount.
    """
    try:
        amount = Decimal(price.strip())
    except (InvalidOperation, AttributeError) as e:
        raise ValidationError(f"Invalid price: {price!r}") from e

    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Price must be greater than 0")

    try:
        wei = Web3.to_wei(amount, "ether")
    except ValueError as e:
        raise ValidationError(f"Price out of range: {price}") from e
    if wei <= 0:
        raise ValidationError("Price must be at least 1 wei")
    return int(wei)


class MarketplaceTransactionBuilder:
    """Builds listItem/buyItem calls against the configured marketplace.

    Example:
        builder = MarketplaceTransactionBuilder(settings.marketplace_address)
        steps = builder.build_list(ListRequest(collection="0xabc...", token_id=1, price="0.5"))
    """

    def __init__(self, marketplace_address: str | None) -> None:
        self.marketplace_address = marketplace_address

    def _marketplace(self) -> str:
        if not self.marketplace_address:
            raise ConfigurationError("Marketplace address is not configured")
        return self.marketplace_address

    def build_list(self, request: ListRequest) -> list[UnsignedCall]:
        """Approve the marketplace for the token, then list it."""
        marketplace = self._marketplace()
        price_wei = parse_price(request.price)

        approve = UnsignedCall(
            step=1,
            description="Approve NFT for marketplace",
            contract_address=request.collection,
            function_name="approve",
            args=[marketplace, str(request.token_id)],
            data=abi.encode_call(abi.APPROVE, marketplace, request.token_id),
        )
        list_item = UnsignedCall(
            step=2,
            description="List NFT on marketplace",
            contract_address=marketplace,
            function_name="listItem",
            args=[
                request.collection,
                str(request.token_id),
                str(price_wei),
                request.listing_type,
                str(request.auction_duration),
            ],
            data=abi.encode_call(
                abi.LIST_ITEM,
                request.collection,
                request.token_id,
                price_wei,
                request.listing_type,
                request.auction_duration,
            ),
        )

        logger.info(
            "list_transaction_built",
            collection=request.collection,
            token_id=request.token_id,
            price_wei=price_wei,
        )
        return [approve, list_item]

    def build_buy(self, request: BuyRequest) -> UnsignedCall:
        """Pay ``price`` for a listing."""
        marketplace = self._marketplace()
        price_wei = parse_price(request.price)

        logger.info("buy_transaction_built", listing_id=request.listing_id, price_wei=price_wei)
        return UnsignedCall(
            description="Buy NFT from marketplace",
            contract_address=marketplace,
            function_name="buyItem",
            args=[str(request.listing_id)],
            data=abi.encode_call(abi.BUY_ITEM, request.listing_id),
            value=str(price_wei),
        )
