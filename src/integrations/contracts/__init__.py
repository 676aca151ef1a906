"""
Contracts (data models).

This folder defines the shapes exchanged with the connector's collaborators:
- CBS capability (KYC lookup, disbursement, collection, refund, status enquiry)
- Scheme adapter capability (initiate / continue outbound transfers)

Why this exists:
- Ensures consistent data structures across mock and real clients
- Keeps operator wire formats out of the reconciliation engine

Both mock and real HTTP clients should use these contracts.
"""
