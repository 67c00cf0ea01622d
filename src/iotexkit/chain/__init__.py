"""
Chain - On-chain interaction layer for IoTeX.

Provides JSON-RPC client, ABI management, and transaction utilities
for the Ethereum-compatible Babel endpoint.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
