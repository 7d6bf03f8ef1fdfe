"""
Random number generation utilities.

Every fitting run owns its generator; nothing here is shared between runs.
"""

import secrets
from typing import Optional

from ..core.alea_prng import AleaPRNG


def create_prng(seed: Optional[str] = None) -> AleaPRNG:
    """
    Create the PRNG used by one fitting run.

    Args:
        seed: Seed string for reproducible placement; a fresh random seed
            is drawn from the OS when omitted

    Returns:
        AleaPRNG instance
    """
    if seed is None:
        seed = secrets.token_hex(8)
    return AleaPRNG(seed)
