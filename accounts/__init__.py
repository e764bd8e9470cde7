"""
Accounts module - License owners.

This module handles:
- Account entity and its per-product license secret records
- Account directory (port) and its Django ORM adapter
"""
