from dama.board import Board, Piece, Player
from dama.game import Phase, TurnState, legal_actions, step
from dama.errors import IllegalMove
from dama.rules import CaptureStep, DamaRules

P1 = Player.PLAYER1
P2 = Player.PLAYER2


def test_capture_chains_two_directions():
    """
    A single man can have TWO different capture landings.
    This test catches the 'early return inside loop' bug.
    """
    b = Board.from_pieces({
        (2, 3): Piece(P1),
        # Two opponents on the forward diagonals
        (3, 2): Piece(P2),
        (3, 4): Piece(P2),
    })
    # Landing squares empty: (4,1) and (4,5)
    chains = DamaRules.capture_chains(b, (2, 3))
    assert len(chains) == 2, f"Expected 2 capture chains, got {len(chains)}: {chains}"


def test_forced_chain_behavior():
    """
    Ensure:
    - a capture step returns chain_continues=True and does NOT switch player
    - legal actions are restricted to the piece mid-chain
    """
    # 1 at (2,1) jumps 2 at (3,2) to (4,3), then jumps 2 at (5,4) to (6,5)
    board = Board.from_pieces({
        (2, 1): Piece(P1),
        (3, 2): Piece(P2),
        (5, 4): Piece(P2),
        (7, 0): Piece(P2),
    })
    state = TurnState(board, P1)

    legal1 = legal_actions(state)
    assert legal1.is_capture and legal1.chain_length == 2, f"Expected a 2-step capture, got: {legal1}"

    step1 = CaptureStep((2, 1), (3, 2), (4, 3))
    state, result = step(state, P1, step1)

    assert result.chain_continues is True, f"Expected chain_continues=True, got {result}"
    assert state.to_move == P1, "Player must not switch during a capture chain"
    assert state.phase == Phase.CHAIN_IN_PROGRESS
    assert state.chain.piece == (4, 3), f"Expected chain piece (4,3), got {state.chain.piece}"

    # Now only the piece on (4,3) may move
    legal2 = legal_actions(state)
    assert legal2.origins() == [(4, 3)], f"Expected only the chain piece, got {legal2}"

    try:
        step(state, P1, CaptureStep((4, 3), (3, 2), (2, 1)))
        assert False, "A step off the selected chain must be rejected"
    except IllegalMove:
        pass

    # Second capture ends the chain and switches player
    state, result = step(state, P1, CaptureStep((4, 3), (5, 4), (6, 5)))
    assert result.chain_continues is False
    assert state.to_move == P2, "After finishing the chain, player must switch"
    assert state.chain is None, "chain must clear when it ends"
    assert state.board.count(P2) == 1


if __name__ == "__main__":
    test_capture_chains_two_directions()
    test_forced_chain_behavior()
    print("OK: sanity tests passed")
