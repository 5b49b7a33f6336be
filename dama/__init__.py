from .board import Board, Piece, Player, initial_board
from .config import CONFIGS, DEFAULT_RULES, RulesConfig, get_config
from .errors import ConfigurationError, DamaError, IllegalMove, InvalidPosition, MoveError, NotYourTurn
from .game import ChainInProgress, MoveResult, Phase, TurnState, apply_move, legal_actions, step
from .rules import CaptureChain, CaptureStep, Captures, DamaRules, MoveSet, Slide, Slides, capture_chains, legal_moves

__all__ = [
    'Board',
    'Piece',
    'Player',
    'initial_board',
    'RulesConfig',
    'DEFAULT_RULES',
    'CONFIGS',
    'get_config',
    'DamaRules',
    'CaptureStep',
    'CaptureChain',
    'Slide',
    'MoveSet',
    'Captures',
    'Slides',
    'capture_chains',
    'legal_moves',
    'TurnState',
    'ChainInProgress',
    'Phase',
    'MoveResult',
    'apply_move',
    'step',
    'legal_actions',
    'DamaError',
    'MoveError',
    'IllegalMove',
    'NotYourTurn',
    'InvalidPosition',
    'ConfigurationError',
]
