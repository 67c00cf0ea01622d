"""
Wallet - secp256k1 keys and message signatures for IoTeX accounts.

Uses eth-account; addresses are returned in both io- and 0x-form.
"""
