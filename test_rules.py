from dama.board import Board, Piece, Player, initial_board
from dama.config import RulesConfig
from dama.errors import InvalidPosition, NotYourTurn
from dama.rules import CaptureStep, Captures, DamaRules, Slide, Slides

P1 = Player.PLAYER1
P2 = Player.PLAYER2

FLYING = RulesConfig(king_moves_after_midchain_promotion=True)


def man(player):
    return Piece(player)


def king(player):
    return Piece(player, True)


def test_initial_slides():
    moves = DamaRules.legal_moves(initial_board(), P1)
    assert isinstance(moves, Slides)
    assert len(moves) == 7, f"Expected 7 opening moves, got {len(moves)}: {moves}"
    assert all(m.landing[0] == m.start[0] + 1 for m in moves)

    moves = DamaRules.legal_moves(initial_board(), P2)
    assert len(moves) == 7
    assert all(m.landing[0] == m.start[0] - 1 for m in moves)


def test_majority_capture_is_global():
    """
    Piece A can take one, piece B can take two.
    Only B's chain is legal, A must not appear at all.
    """
    b = Board.from_pieces({
        (2, 1): man(P1),   # A
        (3, 2): man(P2),
        (2, 5): man(P1),   # B
        (3, 6): man(P2),
        (5, 6): man(P2),
    })
    moves = DamaRules.legal_moves(b, P1)

    assert isinstance(moves, Captures)
    assert moves.chain_length == 2
    assert moves.origins() == [(2, 5)], f"Only B may capture, got {moves.origins()}"
    assert moves.moves == (
        ((2, 5), (CaptureStep((2, 5), (3, 6), (4, 7)), CaptureStep((4, 7), (5, 6), (6, 5)))),
    )


def test_equal_length_chains_are_all_legal():
    b = Board.from_pieces({
        (2, 1): man(P1),
        (3, 2): man(P2),
        (2, 5): man(P1),
        (3, 6): man(P2),
    })
    moves = DamaRules.legal_moves(b, P1)
    assert moves.chain_length == 1
    assert sorted(moves.origins()) == [(2, 1), (2, 5)]


def test_capture_blocks_slides():
    b = Board.from_pieces({(2, 1): man(P1), (3, 2): man(P2), (0, 7): man(P1)})
    moves = DamaRules.legal_moves(b, P1)
    assert isinstance(moves, Captures), "Slides must never be offered when a capture exists"


def test_men_never_capture_backward():
    b = Board.from_pieces({(4, 3): man(P1), (3, 2): man(P2), (3, 4): man(P2)})
    assert DamaRules.capture_chains(b, (4, 3)) == []

    moves = DamaRules.legal_moves(b, P1)
    assert isinstance(moves, Slides)
    assert set(moves.moves) == {Slide((4, 3), (5, 2)), Slide((4, 3), (5, 4))}


def test_player2_men_capture_toward_row_zero():
    b = Board.from_pieces({(5, 2): man(P2), (4, 3): man(P1), (6, 3): man(P1)})
    chains = DamaRules.capture_chains(b, (5, 2))
    assert chains == [(CaptureStep((5, 2), (4, 3), (3, 4)),)]


def test_king_flying_landings():
    """King on (0,7), opponent on (3,4): every empty cell beyond it is a landing."""
    b = Board.from_pieces({(0, 7): king(P1), (3, 4): man(P2)})
    chains = DamaRules.capture_chains(b, (0, 7))

    landings = sorted(chain[0].landing for chain in chains)
    assert landings == [(4, 3), (5, 2), (6, 1), (7, 0)], f"Unexpected landings {landings}"
    assert all(len(chain) == 1 for chain in chains)

    moves = DamaRules.legal_moves(b, P1)
    assert len(moves) == 4


def test_king_blocked_by_own_piece():
    b = Board.from_pieces({(0, 7): king(P1), (2, 5): man(P1), (3, 4): man(P2)})
    assert DamaRules.capture_chains(b, (0, 7)) == []


def test_king_cannot_take_two_adjacent_pieces():
    b = Board.from_pieces({(0, 7): king(P1), (3, 4): man(P2), (4, 3): man(P2)})
    assert DamaRules.capture_chains(b, (0, 7)) == []


def test_king_chain_turns_and_prefers_longest():
    b = Board.from_pieces({(0, 7): king(P1), (2, 5): man(P2), (5, 6): man(P2)})
    moves = DamaRules.legal_moves(b, P1)
    assert moves.chain_length == 2
    assert moves.moves == (
        ((0, 7), (CaptureStep((0, 7), (2, 5), (3, 4)), CaptureStep((3, 4), (5, 6), (6, 7)))),
    )


def test_king_passes_through_vacated_origin():
    """
    The fourth capture flies back across the king's starting square.
    Jumped pieces stay on the board until the chain commits.
    """
    b = Board.from_pieces({
        (2, 3): king(P1),
        (3, 4): man(P2),
        (5, 4): man(P2),
        (5, 2): man(P2),
        (1, 4): man(P2),
    })
    moves = DamaRules.legal_moves(b, P1)
    assert moves.chain_length == 4, f"Expected a 4-capture chain, got {moves}"
    assert moves.moves == (
        ((2, 3), (
            CaptureStep((2, 3), (3, 4), (4, 5)),
            CaptureStep((4, 5), (5, 4), (6, 3)),
            CaptureStep((6, 3), (5, 2), (4, 1)),
            CaptureStep((4, 1), (1, 4), (0, 5)),
        )),
    )


def test_no_piece_is_captured_twice():
    moves = DamaRules.legal_moves(
        Board.from_pieces({(0, 7): king(P1), (2, 5): man(P2), (5, 6): man(P2)}), P1
    )
    for _, chain in moves:
        overs = [s.over for s in chain]
        assert len(overs) == len(set(overs))
        for a, b in zip(chain, chain[1:]):
            assert a.landing == b.start


def test_king_slides_one_step_any_direction():
    b = Board.from_pieces({(4, 3): king(P1), (7, 0): man(P2)})
    moves = DamaRules.legal_moves(b, P1)
    assert set(m.landing for m in moves) == {(3, 2), (3, 4), (5, 2), (5, 4)}


def test_midchain_promotion_standard_rules():
    """Crowned on (7,4) mid-chain: the chain stops there."""
    b = Board.from_pieces({(5, 2): man(P1), (6, 3): man(P2), (5, 6): man(P2)})
    moves = DamaRules.legal_moves(b, P1)
    assert moves.chain_length == 1
    assert moves.moves == (((5, 2), (CaptureStep((5, 2), (6, 3), (7, 4)),)),)


def test_midchain_promotion_flying_rules():
    """Crowned on (7,4) mid-chain: the new king keeps capturing."""
    b = Board.from_pieces({(5, 2): man(P1), (6, 3): man(P2), (5, 6): man(P2)})
    moves = DamaRules.legal_moves(b, P1, FLYING)
    assert moves.chain_length == 2
    assert moves.moves == (
        ((5, 2), (CaptureStep((5, 2), (6, 3), (7, 4)), CaptureStep((7, 4), (5, 6), (4, 7)))),
    )


def test_legal_moves_is_repeatable():
    b = Board.from_pieces({(2, 1): man(P1), (3, 2): man(P2), (2, 5): man(P1), (3, 6): man(P2)})
    snapshot = b.array.copy()
    assert DamaRules.legal_moves(b, P1) == DamaRules.legal_moves(b, P1)
    assert (b.array == snapshot).all(), "legal_moves must not touch the board"


def test_no_pieces_means_no_moves():
    b = Board.from_pieces({(2, 1): man(P1)})
    moves = DamaRules.legal_moves(b, P2)
    assert isinstance(moves, Slides) and len(moves) == 0


def test_capture_chains_requires_a_piece():
    try:
        DamaRules.capture_chains(initial_board(), (3, 0))
        assert False, "Expected InvalidPosition"
    except InvalidPosition:
        pass


def test_unknown_player_id_is_not_your_turn():
    for player in [2, 0, "P1"]:
        try:
            DamaRules.legal_moves(initial_board(), player)
            assert False, f"Expected NotYourTurn for {player!r}"
        except NotYourTurn as e:
            assert e.context == {"player": player}
