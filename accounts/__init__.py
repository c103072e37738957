"""
Accounts module - Users, credentials and bearer tokens.

This module handles:
- User entity and credential checks
- Access token issue and validation (TokenService)
- Refresh token rotation and revocation
"""
