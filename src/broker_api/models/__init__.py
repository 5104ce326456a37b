"""API-specific request/response models.

Domain models (Order, LedgerSummary, ...) live in broker.models and are
reused here where appropriate.

Modules:
- common: Error and validation response models
- orders: Order creation, listing and verification models
"""
