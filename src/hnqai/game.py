"""
Hnefatafl rules, board state and hnfen notation.

Board representation: list[int] of length SIZE * SIZE, row-major from the
bottom-left cell (index = y * SIZE + x)
  - 0: empty
  - 1: attacker
  - 2: defender
  - 3: king

Rule set (11x11, Copenhagen-style start):
  - attackers move first, pieces slide orthogonally through empty cells
  - only the king may stop on the throne (centre) or a corner
  - custodial capture against a friendly piece, a corner or the empty throne
  - the king is captured when surrounded on four sides by attackers or the
    throne, and escapes on reaching a corner
"""

import re
from enum import Enum
from typing import Iterator, List, NamedTuple, Optional

SIZE = 11

EMPTY = 0
ATTACKER = 1
DEFENDER = 2
KING = 3

DIRECTIONS = [(0, 1), (1, 0), (0, -1), (-1, 0)]

START_HNFEN = (
    "3aaaaa3/5a5/11/a4d4a/a3ddd3a/aa1ddkdd1aa/a3ddd3a/a4d4a/11/5a5/3aaaaa3 a"
)

_PIECE_CHARS = {ATTACKER: "a", DEFENDER: "d", KING: "k"}
_CHAR_PIECES = {c: p for p, c in _PIECE_CHARS.items()}
_COLUMNS = "abcdefghijklmnopqrstuvwxyz"[:SIZE]
_CELL_RE = re.compile(r"^([%s])(\d{1,2})$" % _COLUMNS)
_MOVE_RE = re.compile(r"^([%s]\d{1,2})-?([%s]\d{1,2})$" % (_COLUMNS, _COLUMNS))


class IllegalMoveError(ValueError):
    """Raised when a move is applied that the rules do not allow."""


class Player(Enum):
    ATTACKER = "a"
    DEFENDER = "d"

    def opposite(self) -> "Player":
        return Player.DEFENDER if self is Player.ATTACKER else Player.ATTACKER

    def __str__(self) -> str:
        return self.name.lower()


class Position(NamedTuple):
    x: int
    y: int

    @classmethod
    def from_index(cls, idx: int) -> "Position":
        return cls(idx % SIZE, idx // SIZE)

    @classmethod
    def from_hnfen(cls, text: str) -> "Position":
        """Parse a cell such as 'f6'."""
        m = _CELL_RE.match(text.strip().lower())
        if m is None:
            raise ValueError(f"Invalid cell: {text!r}")
        x = _COLUMNS.index(m.group(1))
        y = int(m.group(2)) - 1
        if not 0 <= y < SIZE:
            raise ValueError(f"Row out of range: {text!r}")
        return cls(x, y)

    @property
    def index(self) -> int:
        return self.y * SIZE + self.x

    def on_board(self) -> bool:
        return 0 <= self.x < SIZE and 0 <= self.y < SIZE

    def step(self, dx: int, dy: int, n: int = 1) -> "Position":
        return Position(self.x + dx * n, self.y + dy * n)

    def neighbours(self) -> Iterator["Position"]:
        for dx, dy in DIRECTIONS:
            yield self.step(dx, dy)

    def __str__(self) -> str:
        return f"{_COLUMNS[self.x]}{self.y + 1}"


class Move(NamedTuple):
    src: Position
    dst: Position

    @classmethod
    def from_hnfen(cls, text: str) -> "Move":
        """Parse a move such as 'd1-d5' (the dash is optional)."""
        m = _MOVE_RE.match(text.strip().lower())
        if m is None:
            raise ValueError(f"Invalid move: {text!r}")
        return cls(Position.from_hnfen(m.group(1)), Position.from_hnfen(m.group(2)))

    def __str__(self) -> str:
        return f"{self.src}-{self.dst}"


CENTER = Position(SIZE // 2, SIZE // 2)
CORNERS = frozenset(
    [Position(0, 0), Position(0, SIZE - 1), Position(SIZE - 1, 0), Position(SIZE - 1, SIZE - 1)]
)
RESTRICTED = CORNERS | {CENTER}


def owner(piece: int) -> Optional[Player]:
    """Side a piece belongs to (the king fights for the defenders)."""
    if piece == ATTACKER:
        return Player.ATTACKER
    if piece in (DEFENDER, KING):
        return Player.DEFENDER
    return None


class Board:
    """Mutable board: cell contents plus the side to move."""

    def __init__(self, cells: Optional[List[int]] = None, turn: Player = Player.ATTACKER):
        if cells is None:
            cells = [EMPTY] * (SIZE * SIZE)
        if len(cells) != SIZE * SIZE:
            raise ValueError(f"Board needs {SIZE * SIZE} cells, got {len(cells)}")
        self.cells = list(cells)
        self.turn = turn

    @classmethod
    def default(cls) -> "Board":
        return cls.from_hnfen(START_HNFEN)

    def copy(self) -> "Board":
        return Board(self.cells, self.turn)

    def layout(self):
        return tuple(self.cells), self.turn

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.turn is other.turn and self.cells == other.cells

    def __hash__(self) -> int:
        return hash(self.layout())

    def __repr__(self) -> str:
        return f"Board({self.to_hnfen()!r})"

    def at(self, pos: Position) -> int:
        return self.cells[pos.index]

    def king(self) -> Optional[Position]:
        try:
            return Position.from_index(self.cells.index(KING))
        except ValueError:
            return None

    def king_escaped(self) -> bool:
        king = self.king()
        return king is not None and king in CORNERS

    def pieces(self, player: Player) -> List[Position]:
        """Positions of a side's soldiers (the king is reported by king())."""
        piece = ATTACKER if player is Player.ATTACKER else DEFENDER
        return [Position.from_index(i) for i, v in enumerate(self.cells) if v == piece]

    def _hostile(self, pos: Position, piece: int) -> bool:
        """Whether the cell at pos can close a capture of `piece`."""
        occupant = self.at(pos)
        if occupant == EMPTY:
            return pos in RESTRICTED
        return owner(occupant) is not owner(piece)

    def _king_surrounded(self, king: Position) -> bool:
        for n in king.neighbours():
            if not n.on_board():
                return False
            if self.at(n) != ATTACKER and n != CENTER:
                return False
        return True

    def check_move(self, move: Move) -> None:
        """Raise IllegalMoveError unless `move` is legal for the side to move."""
        src, dst = move
        if not (src.on_board() and dst.on_board()):
            raise IllegalMoveError(f"{move}: off the board")
        piece = self.at(src)
        if owner(piece) is not self.turn:
            raise IllegalMoveError(f"{move}: no {self.turn} piece on {src}")
        if src == dst or (src.x != dst.x and src.y != dst.y):
            raise IllegalMoveError(f"{move}: not an orthogonal move")
        if dst in RESTRICTED and piece != KING:
            raise IllegalMoveError(f"{move}: only the king may stop on {dst}")
        dx = (dst.x > src.x) - (dst.x < src.x)
        dy = (dst.y > src.y) - (dst.y < src.y)
        cur = src.step(dx, dy)
        while True:
            if self.at(cur) != EMPTY:
                raise IllegalMoveError(f"{move}: blocked at {cur}")
            if cur == dst:
                break
            cur = cur.step(dx, dy)

    def apply(self, move: Move) -> None:
        """Apply a legal move in place, resolve captures and pass the turn."""
        self.check_move(move)
        src, dst = move
        piece = self.at(src)
        self.cells[dst.index] = piece
        self.cells[src.index] = EMPTY

        for dx, dy in DIRECTIONS:
            victim = dst.step(dx, dy)
            anvil = dst.step(dx, dy, 2)
            if not (victim.on_board() and anvil.on_board()):
                continue
            target = self.at(victim)
            if target in (EMPTY, KING) or owner(target) is self.turn:
                continue
            if self._hostile(anvil, target):
                self.cells[victim.index] = EMPTY

        if self.turn is Player.ATTACKER:
            king = self.king()
            if king is not None and king in set(dst.neighbours()) and self._king_surrounded(king):
                self.cells[king.index] = EMPTY

        self.turn = self.turn.opposite()

    @classmethod
    def from_hnfen(cls, text: str) -> "Board":
        """Parse '<rows top to bottom separated by />[ <side to move>]'."""
        parts = text.split()
        if not parts or len(parts) > 2:
            raise ValueError(f"Invalid hnfen: {text!r}")
        rows = parts[0].split("/")
        if len(rows) != SIZE:
            raise ValueError(f"hnfen needs {SIZE} rows, got {len(rows)}")
        try:
            turn = Player(parts[1]) if len(parts) == 2 else Player.ATTACKER
        except ValueError:
            raise ValueError(f"Invalid side to move: {parts[1]!r}") from None

        cells = [EMPTY] * (SIZE * SIZE)
        for r, row in enumerate(rows):
            y = SIZE - 1 - r
            x = 0
            digits = ""
            for ch in row + " ":
                if ch.isdigit():
                    digits += ch
                    continue
                if digits:
                    x += int(digits)
                    digits = ""
                if ch == " ":
                    break
                if ch not in _CHAR_PIECES or x >= SIZE:
                    raise ValueError(f"Invalid hnfen row: {row!r}")
                cells[y * SIZE + x] = _CHAR_PIECES[ch]
                x += 1
            if x != SIZE:
                raise ValueError(f"hnfen row {row!r} covers {x} cells, expected {SIZE}")

        if cells.count(KING) > 1:
            raise ValueError("hnfen has more than one king")
        return cls(cells, turn)

    def to_hnfen(self) -> str:
        rows = []
        for y in range(SIZE - 1, -1, -1):
            row = ""
            run = 0
            for x in range(SIZE):
                piece = self.cells[y * SIZE + x]
                if piece == EMPTY:
                    run += 1
                    continue
                if run:
                    row += str(run)
                    run = 0
                row += _PIECE_CHARS[piece]
            if run:
                row += str(run)
            rows.append(row)
        return "/".join(rows) + " " + self.turn.value

    def pretty(self) -> str:
        """Multi-line board drawing with coordinates."""
        lines = []
        for y in range(SIZE - 1, -1, -1):
            cells = []
            for x in range(SIZE):
                pos = Position(x, y)
                piece = self.at(pos)
                if piece != EMPTY:
                    cells.append(_PIECE_CHARS[piece])
                elif pos in RESTRICTED:
                    cells.append("#")
                else:
                    cells.append(".")
            lines.append(f"{y + 1:>2} " + " ".join(cells))
        lines.append("   " + " ".join(_COLUMNS))
        lines.append(f"{self.turn} to move")
        return "\n".join(lines)


def possible_moves(board: Board) -> List[Move]:
    """Return legal moves for the side to move, in board order."""
    moves = []
    for idx, piece in enumerate(board.cells):
        if owner(piece) is not board.turn:
            continue
        src = Position.from_index(idx)
        for dx, dy in DIRECTIONS:
            dst = src.step(dx, dy)
            while dst.on_board() and board.at(dst) == EMPTY:
                if piece == KING or dst not in RESTRICTED:
                    moves.append(Move(src, dst))
                dst = dst.step(dx, dy)
    return moves
