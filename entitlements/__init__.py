"""
Entitlements module - Feature quota enforcement.

This module handles:
- Per-feature usage accounting on license keys
- Violation escalation and feature suspension
- Restoration of disabled features
"""
