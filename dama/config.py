"""
config.py - Rule presets

The only rule that varies between rulesets is what happens when a man is
crowned in the middle of a capture chain:
- standard: crowned immediately, keeps man movement until its next turn
- flying_promotion: crowned immediately and finishes the chain as a flying king
"""

from dataclasses import dataclass

from .errors import ConfigurationError


@dataclass(frozen=True)
class RulesConfig:
    king_moves_after_midchain_promotion: bool = False


# ════════════════════════════════════════════════════════════════════
# CONFIGURATION PRESETS
# ════════════════════════════════════════════════════════════════════

CONFIGS = {
    'standard': {
        'KING_MOVES_AFTER_MIDCHAIN_PROMOTION': False,
        'description': 'Crowning mid-chain takes effect from the next turn'
    },
    'flying_promotion': {
        'KING_MOVES_AFTER_MIDCHAIN_PROMOTION': True,
        'description': 'Crowning mid-chain grants king captures for the rest of the chain'
    },
}

DEFAULT_RULES = RulesConfig()


def get_config(config_name: str) -> RulesConfig:
    """Build a RulesConfig from a named preset."""
    if not isinstance(config_name, str) or config_name not in CONFIGS:
        raise ConfigurationError(
            f"Unknown configuration: {config_name}",
            context={"available": ", ".join(CONFIGS.keys())},
        )
    preset = CONFIGS[config_name]
    return RulesConfig(
        king_moves_after_midchain_promotion=preset['KING_MOVES_AFTER_MIDCHAIN_PROMOTION'],
    )


def print_config(config_name: str):
    """Print configuration details."""
    if config_name not in CONFIGS:
        print(f"❌ Unknown configuration: {config_name}")
        print(f"Available: {', '.join(CONFIGS.keys())}")
        return

    config = CONFIGS[config_name]
    print(f"\n{'='*70}")
    print(f"Configuration: {config_name.upper()}")
    print(f"{'='*70}")
    print(f"Description: {config['description']}")
    print(f"\nSettings:")
    for key, value in config.items():
        if key != 'description':
            print(f"  {key}: {value}")
    print(f"{'='*70}\n")
