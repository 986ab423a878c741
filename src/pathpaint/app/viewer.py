#!/usr/bin/env python3
"""
pathpaint viewer: paint walls, drop spawn/target, watch A* search.

- Mouse:
    left click/drag    -> act on current mode (paint wall / place spawn / place target)
    right click/drag   -> erase walls
- Keyboard:
    [1]/[2]/[3]  -> walls / spawn / target mode
    [ENTER]      -> next mode
    [SPACE]      -> start / pause / resume animated search
    [N]          -> single step
    [F]          -> solve instantly
    [R]          -> reset search (keep grid)
    [E]          -> back to editing
    [C]          -> clear grid
    [O]          -> toggle cost overlay
    [S]          -> save map
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit
"""

import logging
import sys
import time
from typing import List, Optional, Sequence, Tuple

import pygame

from pathpaint.app import layout
from pathpaint.app.config import Settings, clamp_speed, load_settings
from pathpaint.app.editor import EditMode, Editor
from pathpaint.app.maps import load_map, save_map
from pathpaint.core.grid import Grid
from pathpaint.core.types import Cell, Found, SearchStatus

logger = logging.getLogger(__name__)

PANEL_W = 300
FPS = 60
FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
WALL_GRAY   = ( 60, 64, 72)
SPAWN_BLUE  = ( 70,130,180)
TARGET_RED  = (220, 50, 47)
CLOSED_MAG  = (255,  0,120, 90)
OPEN_CYAN   = (  0,150,255,110)
PATH_MINT   = (  0,255,200)
TEXT_LIGHT  = (230,235,240)
TEXT_DARK   = ( 40, 44, 52)
ACCENT_GOLD = (255,210,  0)
PANEL_BG    = ( 24, 28, 36)

MODE_LABELS = {
    EditMode.EDITING_WALLS: "Paint walls",
    EditMode.PLACING_SPAWN: "Place spawn",
    EditMode.PLACING_TARGET: "Place target",
    EditMode.READY: "Ready",
    EditMode.SEARCHING: "Searching",
    EditMode.FINISHED: "Finished",
}

STATUS_LABELS = {
    SearchStatus.READY: "Idle",
    SearchStatus.RUNNING: "Running",
    SearchStatus.PATH_FOUND: "Path found",
    SearchStatus.NO_PATH_EXISTS: "No path",
    SearchStatus.INVALID_ENDPOINTS: "Invalid endpoints",
}


def cell_color(cell: Cell) -> Tuple[int, int, int]:
    """Base tile color from the cell flags."""
    if cell.is_wall:
        return WALL_GRAY
    if cell.is_spawn:
        return SPAWN_BLUE
    if cell.is_target:
        return TARGET_RED
    return WHITE


class Viewer:
    def __init__(self, grid: Grid, settings: Settings = Settings()):
        pygame.init()

        self.editor = Editor(grid)
        self.font_small = pygame.font.Font(FONT_NAME, 13)
        self.font = pygame.font.Font(FONT_NAME, 20)
        self.font_big = pygame.font.Font(FONT_NAME, 26)

        board_w, board_h = layout.canvas_size(grid.width, grid.height)
        self.board_rect = pygame.Rect(0, 0, board_w, board_h)
        self.screen = pygame.display.set_mode((board_w + PANEL_W, max(board_h, 480)))
        pygame.display.set_caption("pathpaint")

        self.clock = pygame.time.Clock()
        self.steps_per_sec = settings.steps_per_sec
        self.save_path = settings.save_path
        self.running = False
        self.show_costs = False
        self.open_cells: set = set()
        self._last_step_t = 0.0
        self._drag_button: Optional[int] = None
        self._last_metrics: dict = {}

    @property
    def grid(self) -> Grid:
        return self.editor.grid

    def run(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick_search()
            self._draw()
            self.clock.tick(FPS)

    # ---------- search driving ----------
    def _tick_search(self):
        t0 = time.time()
        if t0 - self._last_step_t >= 1.0 / max(1, self.steps_per_sec):
            self._last_step_t = t0
            self._do_step()

    def _do_step(self):
        res = self.editor.step()
        if res is None:
            self.running = False
            return
        self.open_cells.update(res.opened)
        self.open_cells.difference_update(res.closed)
        if res.current is not None:
            self.open_cells.discard(res.current)
        self._last_metrics = res.metrics
        if res.status.terminal:
            self.running = False

    def _toggle_run(self):
        if self.editor.mode == EditMode.FINISHED:
            return
        if self.editor.mode == EditMode.READY and not self.editor.start_search():
            return
        if self.editor.mode == EditMode.SEARCHING:
            self.running = not self.running

    def _solve(self):
        self.running = False
        if self.editor.solve() is not None:
            self.open_cells = set(self.editor.finder.open_seq)
            self._last_metrics = self.editor.finder.step().metrics

    def _reset_overlays(self):
        self.running = False
        self.open_cells.clear()
        self._last_metrics = {}

    def _save(self):
        try:
            save_map(self.grid, self.save_path)
        except OSError as ex:
            logger.error("Failed to save map to %s: %s", self.save_path, ex)

    # ---------- input ----------
    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                self._handle_key(e.key)
            elif e.type == pygame.MOUSEBUTTONDOWN and e.button in (1, 3):
                self._drag_button = e.button
                self._handle_mouse(e.pos, e.button, first=True)
            elif e.type == pygame.MOUSEBUTTONUP:
                self._drag_button = None
            elif e.type == pygame.MOUSEMOTION and self._drag_button is not None:
                self._handle_mouse(e.pos, self._drag_button, first=False)

    def _handle_key(self, key: int):
        ed = self.editor
        if key in (pygame.K_ESCAPE, pygame.K_q):
            pygame.quit(); sys.exit(0)
        elif key == pygame.K_1:
            self._reset_overlays(); ed.set_mode(EditMode.EDITING_WALLS)
        elif key == pygame.K_2:
            self._reset_overlays(); ed.set_mode(EditMode.PLACING_SPAWN)
        elif key == pygame.K_3:
            self._reset_overlays(); ed.set_mode(EditMode.PLACING_TARGET)
        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            ed.advance()
        elif key == pygame.K_SPACE:
            self._toggle_run()
        elif key == pygame.K_n:
            self.running = False
            self._do_step()
        elif key == pygame.K_f:
            self._solve()
        elif key == pygame.K_r:
            self._reset_overlays(); ed.reset_search()
        elif key == pygame.K_e:
            self._reset_overlays(); ed.edit()
        elif key == pygame.K_c:
            self._reset_overlays(); ed.clear()
        elif key == pygame.K_o:
            self.show_costs = not self.show_costs
        elif key == pygame.K_s:
            self._save()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self.steps_per_sec = clamp_speed(self.steps_per_sec + 5)
        elif key in (pygame.K_MINUS, pygame.K_UNDERSCORE, pygame.K_KP_MINUS):
            self.steps_per_sec = clamp_speed(self.steps_per_sec - 5)

    def _handle_mouse(self, pixel: Tuple[int, int], button: int, first: bool):
        if not self.board_rect.collidepoint(pixel):
            return
        pos = layout.raycast_cell(pixel[0], pixel[1], self.grid.width, self.grid.height)
        if pos is None:
            return
        if button == 3:
            self.editor.paint(pos, wall=False)
        elif first or self.editor.mode == EditMode.EDITING_WALLS:
            self.editor.click(pos)

    # ---------- drawing ----------
    def _draw(self):
        self.screen.fill(BLACK)
        self._draw_grid()
        self._draw_path()
        self._draw_panel()
        pygame.display.flip()

    def _draw_grid(self):
        searched = self.editor.mode in (EditMode.SEARCHING, EditMode.FINISHED)
        cs = layout.BLOCK_SIZE
        overlay_closed = pygame.Surface((cs, cs), pygame.SRCALPHA); overlay_closed.fill(CLOSED_MAG)
        overlay_open = pygame.Surface((cs, cs), pygame.SRCALPHA); overlay_open.fill(OPEN_CYAN)

        for cell in self.grid:
            rect = pygame.Rect(layout.cell_rect(cell.position))
            pygame.draw.rect(self.screen, cell_color(cell), rect)
            if not searched or cell.is_wall:
                continue
            if cell.closed:
                self.screen.blit(overlay_closed, rect.topleft)
            elif cell.position in self.open_cells:
                self.screen.blit(overlay_open, rect.topleft)
            if self.show_costs and (cell.closed or cell.position in self.open_cells):
                self._draw_costs(cell, rect)

    def _draw_costs(self, cell: Cell, rect: pygame.Rect):
        g = self.font_small.render(f"{cell.g_cost:.1f}", True, TEXT_DARK)
        h = self.font_small.render(f"{cell.h_cost:.1f}", True, TEXT_DARK)
        f = self.font_small.render(f"{cell.f_cost:.1f}", True, BLACK)
        self.screen.blit(g, (rect.x + 1, rect.y + 1))
        self.screen.blit(h, h.get_rect(topright=(rect.right - 1, rect.y + 1)))
        self.screen.blit(f, f.get_rect(midbottom=(rect.centerx, rect.bottom - 1)))

    def _draw_path(self):
        result = self.editor.result
        if not isinstance(result, Found):
            return
        pts: List[Tuple[int, int]] = [layout.cell_center(p) for p in result.path]
        pygame.draw.lines(self.screen, PATH_MINT, False, pts, 5)

    def _draw_panel(self):
        x0 = self.board_rect.right + 16
        y0 = 16
        pygame.draw.rect(self.screen, PANEL_BG,
                         pygame.Rect(self.board_rect.right, 0, PANEL_W, self.screen.get_height()))

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            font = self.font_big if big else self.font
            surf = font.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        ed = self.editor
        line("pathpaint", big=True, color=ACCENT_GOLD)
        line(f"Grid: {self.grid.width} x {self.grid.height}")
        line(f"Mode: {MODE_LABELS[ed.mode]}")
        line(f"Status: {STATUS_LABELS[ed.status]}",
             color=TARGET_RED if ed.status == SearchStatus.NO_PATH_EXISTS else TEXT_LIGHT)
        line(f"Speed: {self.steps_per_sec} steps/s")
        line("-" * 24)

        m = self._last_metrics
        line("Metrics", big=True, color=ACCENT_GOLD)
        line(f"Popped: {m.get('popped', 0)}")
        line(f"Open: {m.get('open_size', 0)}")
        line(f"Closed: {m.get('closed_count', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_cost") is not None:
            line(f"Total Cost: {m['total_cost']:.3f}")
        line("-" * 24)

        for hint in ("1/2/3 walls/spawn/target", "ENTER next  SPACE run", "N step  F solve  R reset",
                     "E edit  C clear  O costs", "S save  +/- speed  Q quit"):
            line(hint, color=(160, 168, 180))


# ---------- main ----------
def make_grid(settings: Settings) -> Grid:
    if settings.map_path is not None:
        try:
            return load_map(settings.map_path)
        except (OSError, ValueError, KeyError, TypeError) as ex:
            logger.error("Failed to load map %s: %s", settings.map_path, ex)
            sys.exit(1)
    return Grid(*settings.grid_size)


def main(argv: Optional[Sequence[str]] = None):
    try:
        settings = load_settings(argv)
    except ValueError as ex:
        print(f"pathpaint: {ex}", file=sys.stderr)
        sys.exit(2)
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    Viewer(make_grid(settings), settings).run()


if __name__ == "__main__":
    main()
