"""Marketplace-wide constants."""

# Custody holder id of every asset sitting in an open order.
ESCROW_HOLDER_ID = "MARKETPLACE_ESCROW"
