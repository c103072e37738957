"""
Activations module - Engine instances holding license slots.

This module handles:
- Activation entity and domain logic
- Activation limits per license tier
- Instance activation/deactivation
"""
