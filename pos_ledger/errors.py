"""Ledger errors and error message constants."""

from __future__ import annotations


class errmsg:
    """Error message constants for the ledger domain."""

    NAME_REQUIRED = "Product name is required"
    PRICE_POSITIVE = "Price must be a positive number"
    PRODUCT_NOT_FOUND = "Product does not exist"
    UNKNOWN_PRODUCT_FIELD = "Unknown product field"
    INVOICE_NOT_FOUND = "Invoice does not exist"
    ITEM_NOT_FOUND = "Invoice item does not exist"
    UNKNOWN_ITEM_FIELD = "Unknown invoice item field"
    ITEM_VALUE_NUMERIC = "Price and quantity must be finite numbers"
    CART_EMPTY = "Cart is empty"
    UNKNOWN_PAYMENT_METHOD = "Unknown payment method"
    SNAPSHOT_UNPARSABLE = "Snapshot is not valid JSON"
    SNAPSHOT_NOT_OBJECT = "Snapshot must be a JSON object"
    SNAPSHOT_MALFORMED = "Snapshot field is malformed"


class LedgerError(Exception):
    """Base class for ledger failures reported to the caller."""


class ValidationError(LedgerError):
    """Malformed input, e.g. an empty product name or non-positive price."""


class NotFoundError(LedgerError):
    """An operation targeted an id that does not exist."""


class EmptyCartError(LedgerError):
    """Finalize was called on a cart with no items."""


class SnapshotImportError(LedgerError):
    """A snapshot could not be parsed or has the wrong shape."""
