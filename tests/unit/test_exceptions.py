"""Tests for SquidMarket exception hierarchy."""

import pytest


class TestSquidMarketError:
    """Tests for base SquidMarketError exception."""

    def test_is_exception(self) -> None:
        from squidmarket.core.exceptions import SquidMarketError

        assert issubclass(SquidMarketError, Exception)

    def test_can_be_raised(self) -> None:
        from squidmarket.core.exceptions import SquidMarketError

        with pytest.raises(SquidMarketError, match="Test error message"):
            raise SquidMarketError("Test error message")


class TestContractErrors:
    """Tests for contract call exceptions."""

    def test_revert_is_a_contract_call_error(self) -> None:
        """
        Given: ContractRevertError
        When: Checking inheritance
        Then: It is a ContractCallError and a SquidMarketError
        """
        from squidmarket.core.exceptions import (
            ContractCallError,
            ContractRevertError,
            SquidMarketError,
        )

        assert issubclass(ContractRevertError, ContractCallError)
        assert issubclass(ContractCallError, SquidMarketError)

    def test_contract_call_error_message(self) -> None:
        from squidmarket.core.exceptions import ContractCallError

        error = ContractCallError("0xabc", "ownerOf(uint256)", "reverted")

        assert error.address == "0xabc"
        assert error.function == "ownerOf(uint256)"
        assert str(error) == "ownerOf(uint256) on 0xabc: reverted"


class TestExternalServiceError:
    """Tests for ExternalServiceError."""

    def test_carries_service_and_status(self) -> None:
        from squidmarket.core.exceptions import ExternalServiceError

        error = ExternalServiceError(service="rpc", message="Timeout", status_code=504)

        assert error.service == "rpc"
        assert error.status_code == 504
        assert str(error) == "rpc: Timeout"


class TestDuplicateEntryError:
    """Tests for DuplicateEntryError."""

    def test_carries_table_and_key(self) -> None:
        from squidmarket.core.exceptions import DuplicateEntryError

        error = DuplicateEntryError(table="waitlist", key="a@b.co")

        assert error.table == "waitlist"
        assert error.key == "a@b.co"
