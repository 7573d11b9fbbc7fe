"""
Contract - a deployed Soroban contract addressed by its C... id.
"""

from typing import List, Optional

from stellar_sdk import xdr as stellar_xdr
from stellar_sdk.strkey import StrKey

from stellar_baselib.core.address import Address
from stellar_baselib.exceptions import InvalidAddressError


class Contract:
    """
    A deployed contract.

    Builds invocation operations and the ledger key of the contract
    instance, which every invocation reads.
    """

    def __init__(self, contract_id: str):
        """
        Args:
            contract_id: C... contract address

        Raises:
            InvalidAddressError: If ``contract_id`` is not a contract strkey
        """
        if not isinstance(contract_id, str) or not StrKey.is_valid_contract(contract_id):
            raise InvalidAddressError(f"Invalid contract id: {contract_id!r}")
        self._id = contract_id

    def contract_id(self) -> str:
        return self._id

    def address(self) -> Address:
        return Address(self._id)

    def call(
        self,
        method: str,
        params: Optional[List[stellar_xdr.SCVal]] = None,
    ) -> stellar_xdr.Operation:
        """
        Build an operation invoking ``method`` on this contract.

        Args:
            method: Contract function name
            params: Function arguments as XDR values

        Returns:
            InvokeHostFunction operation with no auth entries and no source
        """
        from stellar_baselib.tx.operation import invoke_contract_function

        return invoke_contract_function(self._id, method, params)

    def get_footprint(self) -> stellar_xdr.LedgerKey:
        """Read-only ledger key of the contract instance."""
        return stellar_xdr.LedgerKey(
            stellar_xdr.LedgerEntryType.CONTRACT_DATA,
            contract_data=stellar_xdr.LedgerKeyContractData(
                contract=self.address().to_xdr_sc_address(),
                key=stellar_xdr.SCVal(
                    stellar_xdr.SCValType.SCV_LEDGER_KEY_CONTRACT_INSTANCE
                ),
                durability=stellar_xdr.ContractDataDurability.PERSISTENT,
            ),
        )

    def __eq__(self, other) -> bool:
        if isinstance(other, Contract):
            return self._id == other._id
        return NotImplemented

    def __hash__(self):
        return hash(self._id)

    def __str__(self) -> str:
        return self._id

    def __repr__(self) -> str:
        return f"Contract({self._id!r})"
