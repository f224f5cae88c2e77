"""
Tests for the lending client and lending tools
"""

import httpx
import pytest

from neutron_mcp.exceptions import LendingAPIError, ToolArgumentError
from neutron_mcp.lending_client import LendingClient
from neutron_mcp.tools import lending as lending_tools

from conftest import json_body


def make_lending(lending_api, settings) -> LendingClient:
    return LendingClient(settings, transport=lending_api.transport)


class TestLendingClient:
    """Tests for LendingClient request and error handling."""

    @pytest.mark.asyncio
    async def test_simulate(self, lending_api, settings):
        """Test simulate posts the collateral and LTV."""
        lending_api.add("POST", "/api/loans/simulate", json={"loanAmount": 32500})
        lending = make_lending(lending_api, settings)

        result = await lending.simulate(1.0, 0.5)

        assert result == {"loanAmount": 32500}
        request = lending_api.calls("POST", "/api/loans/simulate")[0]
        assert json_body(request) == {"btcAmount": 1.0, "ltvRatio": 0.5}

    @pytest.mark.asyncio
    async def test_error_field(self, lending_api, settings):
        """Test the body's error field becomes the message."""
        lending_api.add("GET", "/api/loans/loan_1", json={"error": "Loan not found"}, status_code=404)
        lending = make_lending(lending_api, settings)

        with pytest.raises(LendingAPIError) as exc_info:
            await lending.get_loan("loan_1")

        assert exc_info.value.status_code == 404
        assert str(exc_info.value) == "Loan not found"

    @pytest.mark.asyncio
    async def test_generic_error(self, lending_api, settings):
        """Test errors without a body report the status code."""
        lending_api.add("POST", "/api/loans/loan_1/disburse", status_code=500)
        lending = make_lending(lending_api, settings)

        with pytest.raises(LendingAPIError) as exc_info:
            await lending.disburse("loan_1")

        assert str(exc_info.value) == "Lending API error 500"

    @pytest.mark.asyncio
    async def test_unreachable_service(self, lending_api, settings):
        """Test a down lending service is a LendingAPIError with status 0."""

        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        lending_api.add("GET", "/api/loans/admin/price", handler=fail)
        lending = make_lending(lending_api, settings)

        with pytest.raises(LendingAPIError) as exc_info:
            await lending.get_btc_price()

        assert exc_info.value.status_code == 0

    @pytest.mark.asyncio
    async def test_list_and_notifications_params(self, lending_api, settings):
        """Test agent filters and the unread flag."""
        lending_api.add("GET", "/api/loans", json=[])
        lending_api.add("GET", "/api/notifications/agent/agent-7", json=[])
        lending = make_lending(lending_api, settings)

        await lending.list_loans("agent-7")
        await lending.get_notifications("agent-7")
        await lending.get_notifications("agent-7", unread_only=True)

        assert lending_api.calls("GET", "/api/loans")[0].url.params["agent_id"] == "agent-7"
        notifications = lending_api.calls("GET", "/api/notifications/agent/agent-7")
        assert notifications[0].url.query == b""
        assert notifications[1].url.params["unread"] == "true"

    @pytest.mark.asyncio
    async def test_repay_omits_unset_fields(self, lending_api, settings):
        """Test optional repayment fields are only sent when given."""
        lending_api.add("POST", "/api/loans/loan_1/repay", json={"remainingOwed": 0})
        lending = make_lending(lending_api, settings)

        await lending.repay("loan_1", 100.0)

        request = lending_api.calls("POST", "/api/loans/loan_1/repay")[0]
        assert json_body(request) == {"usdtAmount": 100.0}


class TestCreateLoan:
    """Tests for the create_loan tool."""

    @pytest.mark.asyncio
    async def test_without_pubkey(self, lending_api, settings):
        """Test no DLC contract is opened without a borrower pubkey."""
        lending_api.add("POST", "/api/loans", json={"id": "loan_1", "status": "pending_collateral"})
        lending = make_lending(lending_api, settings)

        loan = await lending_tools.create_loan(
            agent_id="agent-7",
            btc_amount=0.5,
            ltv_ratio=0.5,
            return_address="tb1qreturn",
            usdt_receive_address="0xabc",
            lending=lending,
        )

        assert loan == {"id": "loan_1", "status": "pending_collateral"}
        assert json_body(lending_api.calls("POST", "/api/loans")[0]) == {
            "agentId": "agent-7",
            "btcAmount": 0.5,
            "ltvRatio": 0.5,
            "returnAddress": "tb1qreturn",
            "usdtReceiveAddress": "0xabc",
        }
        assert lending_api.calls("POST", "/api/dlc/contracts") == []

    @pytest.mark.asyncio
    async def test_with_pubkey_attaches_contract(self, lending_api, settings):
        """Test the DLC contract's multisig details are merged into the loan."""
        lending_api.add(
            "POST",
            "/api/loans",
            json={"id": "loan_1", "liquidationPrice": 40000, "explorer": {"loan": "x"}},
        )
        lending_api.add(
            "POST",
            "/api/dlc/contracts",
            json={
                "contractId": "dlc_1",
                "multisig": {"address": "tb1qmultisig", "pubkeys": ["a", "b", "c"]},
                "depositAddress": "tb1qfallback",
                "explorer": {"multisigAddress": "https://mempool.space/address/tb1qmultisig"},
            },
        )
        lending = make_lending(lending_api, settings)

        loan = await lending_tools.create_loan(
            agent_id="agent-7",
            btc_amount=0.5,
            ltv_ratio=0.5,
            return_address="tb1qreturn",
            usdt_receive_address="0xabc",
            lending=lending,
            quote_id="q_1",
            borrower_pubkey="02" + "ab" * 32,
        )

        assert json_body(lending_api.calls("POST", "/api/loans")[0])["quoteId"] == "q_1"
        assert json_body(lending_api.calls("POST", "/api/dlc/contracts")[0]) == {
            "loanId": "loan_1",
            "borrowerPubkey": "02" + "ab" * 32,
            "collateralSats": 50_000_000,
            "liquidationPrice": 40000,
            "returnAddress": "tb1qreturn",
        }
        assert loan["dlcContractId"] == "dlc_1"
        assert loan["depositAddress"] == "tb1qmultisig"
        assert loan["multisig"]["pubkeys"] == ["a", "b", "c"]
        assert loan["explorer"] == {
            "loan": "x",
            "multisigAddress": "https://mempool.space/address/tb1qmultisig",
        }

    @pytest.mark.asyncio
    async def test_contract_failure_recorded(self, lending_api, settings):
        """Test a DLC failure is reported on the loan instead of raised."""
        lending_api.add("POST", "/api/loans", json={"id": "loan_1"})
        lending_api.add(
            "POST", "/api/dlc/contracts", json={"error": "Invalid pubkey"}, status_code=400
        )
        lending = make_lending(lending_api, settings)

        loan = await lending_tools.create_loan(
            agent_id="agent-7",
            btc_amount=0.5,
            ltv_ratio=0.6,
            return_address="tb1qreturn",
            usdt_receive_address="0xabc",
            lending=lending,
            borrower_pubkey="bad",
        )

        assert loan["id"] == "loan_1"
        assert loan["dlcError"] == "Invalid pubkey"
        assert "dlcContractId" not in loan

    @pytest.mark.asyncio
    async def test_contract_without_body_recorded(self, lending_api, settings):
        """Test a 2xx contract response that is not an object is reported on the loan."""
        lending_api.add("POST", "/api/loans", json={"id": "loan_1"})
        lending_api.add(
            "POST",
            "/api/dlc/contracts",
            handler=lambda request: httpx.Response(
                200, content=b"null", headers={"Content-Type": "application/json"}
            ),
        )
        lending = make_lending(lending_api, settings)

        loan = await lending_tools.create_loan(
            agent_id="agent-7",
            btc_amount=0.5,
            ltv_ratio=0.5,
            return_address="tb1qreturn",
            usdt_receive_address="0xabc",
            lending=lending,
            borrower_pubkey="02" + "ab" * 32,
        )

        assert loan["id"] == "loan_1"
        assert loan["dlcError"] == "Failed to create DLC contract"
        assert "dlcContractId" not in loan

    @pytest.mark.asyncio
    async def test_contract_with_malformed_multisig(self, lending_api, settings):
        """Test a contract whose multisig is not an object falls back to depositAddress."""
        lending_api.add("POST", "/api/loans", json={"id": "loan_1"})
        lending_api.add(
            "POST",
            "/api/dlc/contracts",
            json={"contractId": "dlc_1", "multisig": "pending", "depositAddress": "tb1qdeposit"},
        )
        lending = make_lending(lending_api, settings)

        loan = await lending_tools.create_loan(
            agent_id="agent-7",
            btc_amount=0.5,
            ltv_ratio=0.5,
            return_address="tb1qreturn",
            usdt_receive_address="0xabc",
            lending=lending,
            borrower_pubkey="02" + "ab" * 32,
        )

        assert loan["dlcContractId"] == "dlc_1"
        assert loan["depositAddress"] == "tb1qdeposit"
        assert loan["explorer"] == {"multisigAddress": None}


class TestLoanStatus:
    """Tests for the get_loan_status tool."""

    @pytest.mark.asyncio
    async def test_with_contract(self, lending_api, settings):
        """Test verification links are added for a funded contract."""
        lending_api.add("GET", "/api/loans/loan_1", json={"id": "loan_1", "status": "active"})
        lending_api.add(
            "GET",
            "/api/dlc/contracts/by-loan/loan_1",
            json={
                "status": "funded",
                "depositAddress": "tb1qmultisig",
                "fundingTxid": "f00d",
                "multisig": {"address": "tb1qmultisig"},
            },
        )
        lending = make_lending(lending_api, settings)

        result = await lending_tools.get_loan_status("loan_1", lending=lending)

        assert result["status"] == "active"
        contract = result["dlcContract"]
        assert contract["status"] == "funded"
        assert contract["verification"]["multisigAddress"] == (
            "https://mempool.space/address/tb1qmultisig"
        )
        assert contract["verification"]["fundingTransaction"] == "https://mempool.space/tx/f00d"
        assert "2-of-3 multisig" in contract["verification"]["note"]

    @pytest.mark.asyncio
    async def test_pending_funding(self, lending_api, settings):
        """Test no funding link while the funding txid is pending."""
        lending_api.add("GET", "/api/loans/loan_1", json={"id": "loan_1"})
        lending_api.add(
            "GET",
            "/api/dlc/contracts/by-loan/loan_1",
            json={"status": "awaiting_funding", "depositAddress": "tb1q", "fundingTxid": "pending"},
        )
        lending = make_lending(lending_api, settings)

        result = await lending_tools.get_loan_status("loan_1", lending=lending)

        assert result["dlcContract"]["verification"]["fundingTransaction"] is None

    @pytest.mark.asyncio
    async def test_without_contract(self, lending_api, settings):
        """Test a missing contract leaves the loan untouched."""
        lending_api.add("GET", "/api/loans/loan_1", json={"id": "loan_1", "status": "active"})
        lending = make_lending(lending_api, settings)

        result = await lending_tools.get_loan_status("loan_1", lending=lending)

        assert result == {"id": "loan_1", "status": "active"}

    @pytest.mark.asyncio
    async def test_non_object_contract_ignored(self, lending_api, settings):
        """Test a contract lookup returning a list leaves the loan untouched."""
        lending_api.add("GET", "/api/loans/loan_1", json={"id": "loan_1", "status": "active"})
        lending_api.add("GET", "/api/dlc/contracts/by-loan/loan_1", json=[{"status": "funded"}])
        lending = make_lending(lending_api, settings)

        result = await lending_tools.get_loan_status("loan_1", lending=lending)

        assert result == {"id": "loan_1", "status": "active"}

    @pytest.mark.asyncio
    async def test_missing_loan_raises(self, lending_api, settings):
        """Test a missing loan is still an error."""
        lending_api.add("GET", "/api/loans/nope", json={"error": "Loan not found"}, status_code=404)
        lending = make_lending(lending_api, settings)

        with pytest.raises(LendingAPIError):
            await lending_tools.get_loan_status("nope", lending=lending)


class TestRollover:
    """Tests for the rollover_loan tool."""

    @pytest.mark.asyncio
    async def test_requires_accepted_terms(self, lending_api, settings):
        """Test rollover is refused locally without acceptance."""
        lending = make_lending(lending_api, settings)

        with pytest.raises(ToolArgumentError) as exc_info:
            await lending_tools.rollover_loan("loan_1", accept_terms=False, lending=lending)

        assert "Terms not accepted" in str(exc_info.value)
        assert lending_api.requests == []

    @pytest.mark.asyncio
    async def test_accepted_terms(self, lending_api, settings):
        """Test accepted terms forward the rollover."""
        lending_api.add("POST", "/api/loans/loan_1/rollover", json={"newRate": 0.09})
        lending = make_lending(lending_api, settings)

        result = await lending_tools.rollover_loan("loan_1", accept_terms=True, lending=lending)

        assert result == {"newRate": 0.09}


class TestSettle:
    """Tests for the settle_loan tool."""

    @pytest.mark.asyncio
    async def test_requires_repaid_status(self, lending_api, settings):
        """Test an unpaid loan cannot be settled."""
        lending_api.add(
            "GET", "/api/loans/loan_1", json={"status": "active", "remainingOwed": 1200}
        )
        lending = make_lending(lending_api, settings)

        with pytest.raises(ToolArgumentError) as exc_info:
            await lending_tools.settle_loan("loan_1", lending=lending)

        assert "'active'" in str(exc_info.value)
        assert "$1200" in str(exc_info.value)
        assert lending_api.calls("GET", "/api/dlc/contracts/by-loan/loan_1") == []

    @pytest.mark.asyncio
    async def test_requires_contract(self, lending_api, settings):
        """Test settlement needs a DLC contract."""
        lending_api.add("GET", "/api/loans/loan_1", json={"status": "repaid"})
        lending_api.add("GET", "/api/dlc/contracts/by-loan/loan_1", json={})
        lending = make_lending(lending_api, settings)

        with pytest.raises(ToolArgumentError) as exc_info:
            await lending_tools.settle_loan("loan_1", lending=lending)

        assert "No DLC contract" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_settles(self, lending_api, settings):
        """Test a repaid loan is settled with an explorer link."""
        lending_api.add(
            "GET", "/api/loans/loan_1", json={"status": "repaid", "returnAddress": "tb1qreturn"}
        )
        lending_api.add("GET", "/api/dlc/contracts/by-loan/loan_1", json={"contractId": "dlc_1"})
        lending_api.add("POST", "/api/dlc/contracts/dlc_1/settle", json={"txid": "beef"})
        lending = make_lending(lending_api, settings)

        result = await lending_tools.settle_loan("loan_1", lending=lending)

        assert result["success"] is True
        assert result["contractId"] == "dlc_1"
        assert result["settlementTxid"] == "beef"
        assert result["returnAddress"] == "tb1qreturn"
        assert result["explorer"] == "https://mempool.space/testnet4/tx/beef"

    @pytest.mark.asyncio
    async def test_settlement_txid_fallback(self, lending_api, settings):
        """Test settlementTxid is used when txid is absent."""
        lending_api.add("GET", "/api/loans/loan_1", json={"status": "repaid"})
        lending_api.add("GET", "/api/dlc/contracts/by-loan/loan_1", json={"contractId": "dlc_1"})
        lending_api.add(
            "POST", "/api/dlc/contracts/dlc_1/settle", json={"settlementTxid": "cafe"}
        )
        lending = make_lending(lending_api, settings)

        result = await lending_tools.settle_loan("loan_1", lending=lending)

        assert result["settlementTxid"] == "cafe"
        assert result["explorer"] is None
