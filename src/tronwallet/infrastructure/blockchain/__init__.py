"""Blockchain infrastructure module."""

from tronwallet.infrastructure.blockchain.address import Address
from tronwallet.infrastructure.blockchain.client import ChainClient, TronClient
from tronwallet.infrastructure.blockchain.events import (
    ContractInvocation,
    InvocationParser,
    decode_transfer_log,
)
from tronwallet.infrastructure.blockchain.models import (
    AccountInfo,
    Block,
    EventFilter,
    TransactionEvent,
    TransactionInfo,
)
from tronwallet.infrastructure.blockchain.transaction import (
    AccountCreate,
    CoinTransfer,
    ContractTrigger,
    ContractType,
    SignedTransaction,
    SubmissionState,
    TokenTransfer,
    TransactionBuilder,
    TransactionPayload,
    TransactionSigner,
    UnsignedTransaction,
    generate_keypair,
)
from tronwallet.infrastructure.blockchain.transport import TronNodeTransport
from tronwallet.infrastructure.blockchain.units import to_display, to_smallest_unit

__all__ = [
    # Client
    "ChainClient",
    "TronClient",
    "TronNodeTransport",
    # Values
    "Address",
    "AccountInfo",
    "Block",
    "EventFilter",
    "TransactionEvent",
    "TransactionInfo",
    # Events
    "ContractInvocation",
    "InvocationParser",
    "decode_transfer_log",
    # Transactions
    "AccountCreate",
    "CoinTransfer",
    "ContractTrigger",
    "ContractType",
    "SignedTransaction",
    "SubmissionState",
    "TokenTransfer",
    "TransactionBuilder",
    "TransactionPayload",
    "TransactionSigner",
    "UnsignedTransaction",
    "generate_keypair",
    # Units
    "to_display",
    "to_smallest_unit",
]
