"""Use cases composing domain logic with the ports."""
