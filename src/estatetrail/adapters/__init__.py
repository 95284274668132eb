"""Adapters translating external ledger documents into the domain."""
