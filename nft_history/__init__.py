"""
NFT Token History — transaction timeline for a single collectible.

Fetches transfer and sale events for one token from the marketplace API,
classifies them into a timeline (registration, mint, sale, transfer),
resolves counterparties to ENS names in one batched call, and exposes the
ordered result to the presentation layer and the read-only API.
"""

__version__ = "0.1.0"
