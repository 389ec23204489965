"""Ledger publishing module for the publishing pipeline.

This module handles:
- Creating shared video records on Sui
- Reading records back (including the network timestamp)
"""

from .sui_client import build_publish_command, fetch_record, publish_record

__all__ = [
    "build_publish_command",
    "publish_record",
    "fetch_record",
]
