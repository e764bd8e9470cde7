"""
ListLicensesQuery.

Query to list every license key.
"""
from dataclasses import dataclass


@dataclass
class ListLicensesQuery:
    """Query to list all license keys."""
