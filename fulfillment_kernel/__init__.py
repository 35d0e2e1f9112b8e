"""
Fulfillment Kernel

The persistence and orchestration core of the fulfillment reconciliation
system:
- Order-to-sourcing matching with purchase status write-back
- Shipment reservations kept as a claim ledger over warehouse stock
- Tenant-scoped record stores with typed failures
- Structured JSON logging
"""

__version__ = "0.1.0"
