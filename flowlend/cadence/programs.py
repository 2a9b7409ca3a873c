"""FlowLend Cadence scripts and transactions.

Contract imports use ``0x<Name>`` placeholders; they are resolved against the
configured contract addresses before the program is sent to the ledger.
"""
from __future__ import annotations

from ..models import ActionKind

GET_USER_POSITION = """
import FlowLend from 0xFlowLend

access(all) fun main(user: Address): FlowLend.UserPosition {
    return FlowLend.getUserPosition(user: user)
}
"""

GET_USER_HEALTH_FACTOR = """
import FlowLend from 0xFlowLend

access(all) fun main(user: Address): UFix64 {
    return FlowLend.getUserHealthFactor(user: user)
}
"""

GET_POOL_STATE = """
import FlowLend from 0xFlowLend

access(all) fun main(): FlowLend.PoolState {
    return FlowLend.getPoolState()
}
"""

DEPOSIT = """
import FungibleToken from 0xFungibleToken
import FlowToken from 0xFlowToken
import FlowLend from 0xFlowLend

transaction(amount: UFix64) {
    prepare(acct: auth(Storage) &Account) {
        let vaultRef = acct.storage
            .borrow<auth(FungibleToken.Withdraw) &FlowToken.Vault>(
                from: /storage/flowTokenVault
            ) ?? panic("Could not borrow reference to FLOW vault")

        let payment <- vaultRef.withdraw(amount: amount) as! @FlowToken.Vault
        FlowLend.deposit(fromVault: <- payment, user: acct.address)
    }
}
"""

WITHDRAW = """
import FlowToken from 0xFlowToken
import FlowLend from 0xFlowLend

transaction(amount: UFix64) {
    prepare(acct: auth(Storage) &Account) {
        let userVaultRef = acct.storage
            .borrow<&FlowToken.Vault>(from: /storage/flowTokenVault)
            ?? panic("Could not borrow reference to FLOW vault")

        let outVault <- FlowLend.withdraw(amount: amount, user: acct.address)
        userVaultRef.deposit(from: <- outVault)
    }
}
"""

BORROW = """
import FlowToken from 0xFlowToken
import FlowLend from 0xFlowLend

transaction(amount: UFix64) {
    prepare(acct: auth(Storage) &Account) {
        let userVaultRef = acct.storage
            .borrow<&FlowToken.Vault>(from: /storage/flowTokenVault)
            ?? panic("Could not borrow reference to FLOW vault")

        let borrowedVault <- FlowLend.borrow(amount: amount, user: acct.address)
        userVaultRef.deposit(from: <- borrowedVault)
    }
}
"""

REPAY = """
import FungibleToken from 0xFungibleToken
import FlowToken from 0xFlowToken
import FlowLend from 0xFlowLend

transaction(amount: UFix64) {
    prepare(acct: auth(Storage) &Account) {
        let userVaultRef = acct.storage
            .borrow<auth(FungibleToken.Withdraw) &FlowToken.Vault>(
                from: /storage/flowTokenVault
            ) ?? panic("Could not borrow reference to FLOW vault")

        let payment <- userVaultRef.withdraw(amount: amount) as! @FlowToken.Vault
        FlowLend.repay(fromVault: <- payment, user: acct.address)
    }
}
"""

ACTION_PROGRAMS: dict[ActionKind, str] = {
    ActionKind.DEPOSIT: DEPOSIT,
    ActionKind.WITHDRAW: WITHDRAW,
    ActionKind.BORROW: BORROW,
    ActionKind.REPAY: REPAY,
}
