"""
Reverse ENS name resolution (batched ReverseRecords.getNames).
"""

from nft_history.ens.reverse_records import ReverseRecordsResolver

__all__ = ["ReverseRecordsResolver"]
