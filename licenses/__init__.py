"""
Licenses module - License key lifecycle.

This module handles:
- LicenseKey entity and its feature grants
- Key generation and secret hashing
- Issue, activate, upgrade, check and list operations
"""
