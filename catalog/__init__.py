"""
Catalog module - Product and Feature metadata.

This module handles:
- Product and Feature entities
- Package tier membership of features
- Product catalog (port) and its Django ORM adapter
"""
