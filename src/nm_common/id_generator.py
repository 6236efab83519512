"""Order ID derivation.

order_id = sha256 over (item_id, created_at, asset_address, asset_id, price, seller).

item_id comes from a strictly monotonic DB sequence, so two listings with
identical content submitted in the same instant still hash to different ids.
The remaining fields bind the id to the listing it was issued for.
"""

import hashlib
from datetime import datetime

ORDER_ID_LENGTH = 64  # hex chars of a SHA-256 digest


def derive_order_id(
    item_id: int,
    created_at: datetime,
    asset_address: str,
    asset_id: int,
    price: int,
    seller: str,
) -> str:
    """Return the 64-char lowercase hex order id for a new listing."""
    if item_id <= 0:
        raise ValueError(f"item_id must be positive, got {item_id}")
    canonical = "|".join(
        (
            str(item_id),
            str(int(created_at.timestamp() * 1_000_000)),
            asset_address.lower(),
            str(asset_id),
            str(price),
            seller,
        )
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def is_well_formed_order_id(order_id: str) -> bool:
    """Cheap syntactic check used to reject empty/garbage ids before hitting the DB."""
    if len(order_id) != ORDER_ID_LENGTH:
        return False
    return all(c in "0123456789abcdef" for c in order_id)
