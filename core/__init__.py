"""
Core module for shared domain infrastructure.

This module contains:
- Domain events, exceptions and value objects
- The event bus and its audit/metrics handlers
- Observability middleware and health views
"""
