"""
Test minting records for exercising the worker without real user wallets.
"""

import random
import secrets
from typing import Any, Dict, List, Optional

from mint_worker.models import MintingRecord
from mint_worker.services.minting.database.job_repository import MintJobRepository


TEST_WALLETS = [
    "0x1a2b3c4d5e6f7a8b9c0d1e2f3a4b5c6d7e8f9a0b1c2d3e4f5a6b7c8d9e0f1a2b",
    "0x2b3c4d5e6f7a8b9c0d1e2f3a4b5c6d7e8f9a0b1c2d3e4f5a6b7c8d9e0f1a2b3c",
    "0x3c4d5e6f7a8b9c0d1e2f3a4b5c6d7e8f9a0b1c2d3e4f5a6b7c8d9e0f1a2b3c4d",
    "0x4d5e6f7a8b9c0d1e2f3a4b5c6d7e8f9a0b1c2d3e4f5a6b7c8d9e0f1a2b3c4d5e",
    "0x5e6f7a8b9c0d1e2f3a4b5c6d7e8f9a0b1c2d3e4f5a6b7c8d9e0f1a2b3c4d5e6f",
]

# Inspector Gadget items
CARD_TYPES = [
    "Brella", "Mallet", "Laser", "Copter", "Skates",
    "Arms", "Legs", "Hands", "Ears", "Eyes",
]

RARITIES = ["Common", "Uncommon", "Rare", "Epic", "Legendary"]
LEVELS = [1, 2, 3, 4, 5]


def generate_test_mint(rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """Random pending mint payload; rank mirrors level."""
    rng = rng or random.Random()
    card_type = rng.choice(CARD_TYPES)
    level = rng.choice(LEVELS)
    return {
        "mint_id": secrets.token_hex(16),
        "card_type": card_type,
        "level": level,
        "title": f"Inspector Gadget's {card_type}",
        "recipient": rng.choice(TEST_WALLETS),
        "rarity": rng.choice(RARITIES),
        "rank": level,
    }


async def seed_test_mints(
    repository: MintJobRepository,
    count: int = 10,
    rng: Optional[random.Random] = None,
) -> List[MintingRecord]:
    """Insert `count` random pending records."""
    if count < 1:
        raise ValueError("count must be positive")

    rng = rng or random.Random()
    records = []
    for _ in range(count):
        records.append(await repository.create_job(**generate_test_mint(rng)))
    return records
