"""
Licenses module - License issue, validation and revocation.

This module handles:
- License entity and tier catalog
- Hardware binding on first validation
- License lifecycle (issue, expire, revoke)
"""
