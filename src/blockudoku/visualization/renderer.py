from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

import pygame

from blockudoku.game import BOX_SIZE, SIZE, Board, HintMove, Shape


Color = Tuple[int, int, int]

BACKGROUND: Color = (255, 255, 255)
GRID_LINE: Color = (200, 200, 200)
BOX_BORDER: Color = (130, 130, 130)
EMPTY_CELL: Color = (232, 236, 248)
PIECE: Color = (30, 90, 180)
GHOST_VALID: Color = (120, 170, 230)
GHOST_INVALID: Color = (220, 60, 60)
TEXT: Color = (30, 35, 65)
LABEL: Color = (150, 155, 185)
# Hint steps 1 -> 2 -> 3
HINT_COLORS: Tuple[Color, ...] = ((255, 200, 0), (255, 140, 0), (255, 80, 0))

# Every piece shares one color; keys stay so a theme can tell them apart
PIECE_COLORS: Dict[str, Color] = {
    key: PIECE
    for key in ("Yellow", "Cyan", "Green", "Blue", "Orange", "Teal", "LightBlue", "Default")
}


def piece_color(key: Optional[str]) -> Color:
    return PIECE_COLORS.get(key or "Default", PIECE)


def darken(color: Color, factor: float = 0.55) -> Color:
    return (int(color[0] * factor), int(color[1] * factor), int(color[2] * factor))


class Renderer:
    def __init__(self, cell_size: int = 40, margin: int = 20, tray_cell: int = 22) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.tray_cell = tray_cell
        self.board_px = SIZE * cell_size
        # Room for a 5-cell piece plus padding in each tray slot
        self.slot_px = tray_cell * 6

    @property
    def window_size(self) -> Tuple[int, int]:
        width = self.margin * 2 + self.board_px
        height = self.margin * 4 + self.board_px + self.slot_px + 30
        return width, height

    # Geometry -----------------------------------------------------------

    def board_origin(self) -> Tuple[int, int]:
        return self.margin, self.margin + 30

    def pixel_to_cell(self, px: int, py: int) -> Tuple[int, int]:
        ox, oy = self.board_origin()
        return (py - oy) // self.cell_size, (px - ox) // self.cell_size

    def tray_slot_rect(self, slot: int, slots: int = 3) -> pygame.Rect:
        ox, oy = self.board_origin()
        width = self.board_px // slots
        return pygame.Rect(ox + slot * width, oy + self.board_px + self.margin, width, self.slot_px)

    def tray_hit(self, px: int, py: int, tray: Sequence[Optional[Shape]]) -> Optional[Tuple[int, int, int]]:
        """Return (slot, pick_row, pick_col) for a click on a tray piece cell."""
        for slot, piece in enumerate(tray):
            if piece is None:
                continue
            x0, y0 = self._piece_origin(slot, piece, len(tray))
            col = (px - x0) // self.tray_cell
            row = (py - y0) // self.tray_cell
            if (row, col) in piece.cells:
                return slot, int(row), int(col)
        return None

    def _piece_origin(self, slot: int, piece: Shape, slots: int) -> Tuple[int, int]:
        rect = self.tray_slot_rect(slot, slots)
        x0 = rect.centerx - piece.col_span * self.tray_cell // 2
        y0 = rect.centery - piece.row_span * self.tray_cell // 2
        return x0, y0

    # Drawing ------------------------------------------------------------

    def draw_board(self, screen: pygame.Surface, board: Board) -> None:
        ox, oy = self.board_origin()
        cs = self.cell_size
        for r in range(SIZE):
            for c in range(SIZE):
                rect = pygame.Rect(ox + c * cs, oy + r * cs, cs, cs)
                color = EMPTY_CELL if board.is_cell_empty(r, c) else piece_color(board.get_color(r, c))
                pygame.draw.rect(screen, color, rect)
                pygame.draw.rect(screen, GRID_LINE, rect, 1)
        for i in range(0, SIZE + 1, BOX_SIZE):
            pygame.draw.line(screen, BOX_BORDER, (ox + i * cs, oy), (ox + i * cs, oy + self.board_px), 2)
            pygame.draw.line(screen, BOX_BORDER, (ox, oy + i * cs), (ox + self.board_px, oy + i * cs), 2)

    def draw_cells(self, screen: pygame.Surface, piece: Shape, row: int, col: int, color: Color, width: int = 0) -> None:
        ox, oy = self.board_origin()
        cs = self.cell_size
        for r, c in piece.cells_at(row, col):
            if 0 <= r < SIZE and 0 <= c < SIZE:
                rect = pygame.Rect(ox + c * cs + 2, oy + r * cs + 2, cs - 4, cs - 4)
                pygame.draw.rect(screen, color, rect, width)

    def draw_hint(self, screen: pygame.Surface, tray: Sequence[Optional[Shape]], moves: Sequence[HintMove],
                  font: pygame.font.Font) -> None:
        for step, move in enumerate(moves):
            piece = tray[move.slot]
            if piece is None:
                continue
            color = HINT_COLORS[min(step, len(HINT_COLORS) - 1)]
            self.draw_cells(screen, piece, move.row, move.col, color, width=3)
            ox, oy = self.board_origin()
            label = font.render(str(step + 1), True, darken(color))
            screen.blit(label, (ox + move.col * self.cell_size + 6, oy + move.row * self.cell_size + 4))

    def draw_tray(self, screen: pygame.Surface, tray: Sequence[Optional[Shape]], dragging: int,
                  moves: Sequence[HintMove], font: pygame.font.Font) -> None:
        order = {m.slot: i for i, m in enumerate(moves)}
        for slot, piece in enumerate(tray):
            rect = self.tray_slot_rect(slot, len(tray))
            if slot in order:
                pygame.draw.rect(screen, HINT_COLORS[min(order[slot], len(HINT_COLORS) - 1)], rect, 2)
                label = font.render(str(order[slot] + 1), True, LABEL)
                screen.blit(label, (rect.x + 4, rect.y + 2))
            if piece is None:
                continue
            x0, y0 = self._piece_origin(slot, piece, len(tray))
            color = LABEL if slot == dragging else piece_color(piece.color)
            for r, c in piece.cells:
                cell = pygame.Rect(x0 + c * self.tray_cell, y0 + r * self.tray_cell, self.tray_cell - 1, self.tray_cell - 1)
                pygame.draw.rect(screen, color, cell)

    def draw_dragged(self, screen: pygame.Surface, piece: Shape, mouse: Tuple[int, int], pick: Tuple[int, int]) -> None:
        cs = self.cell_size
        x0 = mouse[0] - pick[1] * cs - cs // 2
        y0 = mouse[1] - pick[0] * cs - cs // 2
        for r, c in piece.cells:
            pygame.draw.rect(screen, piece_color(piece.color), pygame.Rect(x0 + c * cs + 2, y0 + r * cs + 2, cs - 4, cs - 4))

    def draw_status(self, screen: pygame.Surface, score: int, high_score: int, message: str,
                    font: pygame.font.Font) -> None:
        screen.blit(font.render(f"Score: {score}", True, TEXT), (self.margin, 6))
        best = font.render(f"Best: {high_score}", True, LABEL)
        screen.blit(best, (self.margin + self.board_px - best.get_width(), 6))
        if message:
            info = font.render(message, True, TEXT)
            screen.blit(info, (self.margin, self.window_size[1] - self.margin - 4))
