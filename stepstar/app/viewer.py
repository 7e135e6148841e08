#!/usr/bin/env python3
"""
Stepwise A* Viewer — grid editor + run/pause/step controls

- Mouse:
    click empty/wall   -> toggle wall
    drag start/end     -> move endpoint
- Keyboard:
    [SPACE]      -> run/pause
    [N]          -> single step (until something visibly changes)
    [R]          -> reset search marks
    [C]          -> clear grid
    [H]          -> cycle heuristic (manhattan / euclidean / octile)
    [D]          -> toggle diagonal moves
    [ [ ]/[ ] ]  -> grid size -/+
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit

Config: see stepstar.core.config (STEPSTAR_* env vars, --key=value flags).
"""

import logging
import sys
import time
from typing import List, Optional, Tuple

import pygame

from stepstar.app.session import SearchSession
from stepstar.core.config import SearchConfig, resolve_config
from stepstar.core.types import CellState, Coord

logger = logging.getLogger(__name__)

# ---------- Layout ----------
PANEL_W = 320            # right band: metrics + buttons
GRID_MARGIN = 16
MIN_CELL_SIZE = 8
LABEL_MIN_CELL = 56      # below this, g/h/f labels do not fit
FONT_NAME = None         # default pygame font

# Colors
WHITE        = (255, 255, 255)
BLACK        = (  0,   0,   0)
IDLE_GRAY    = (200, 200, 200)
WALL_GRAY    = ( 80,  80,  80)
START_GREEN  = (  0, 200,  80)
END_RED      = (220,  50,  47)
OPEN_GREEN   = (  0, 120,   0)
CLOSED_MAG   = (150,  40, 110)
PATH_BLUE    = (  0,   0, 120)

CARD_BG      = (24, 28, 36, 220)
CARD_HI      = (255, 255, 255, 18)
TEXT_LIGHT   = (230, 235, 240)
ACCENT_GOLD  = (255, 210, 0)

CELL_COLORS = {
    CellState.IDLE: IDLE_GRAY,
    CellState.WALL: WALL_GRAY,
    CellState.START: START_GREEN,
    CellState.END: END_RED,
    CellState.OPEN: OPEN_GREEN,
    CellState.CLOSED: CLOSED_MAG,
    CellState.PATH: PATH_BLUE,
}


def pixel_to_cell(pos: Tuple[int, int], origin: Tuple[int, int],
                  cell_size: int, size: int) -> Optional[Coord]:
    """Grid cell under a pixel, or None outside the grid."""
    px, py = pos
    ox, oy = origin
    if px < ox or py < oy or cell_size <= 0:
        return None
    x = (px - ox) // cell_size
    y = (py - oy) // cell_size
    if x >= size or y >= size:
        return None
    return int(x), int(y)


def format_cost(v) -> str:
    if isinstance(v, float) and not v.is_integer():
        return f"{v:.1f}"
    return str(int(v))


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        if self.active and self.togglable:
            bg = (58, 86, 160, 235)
        elif self.hover:
            bg = (46, 50, 60, 230)
        else:
            bg = (36, 40, 48, 220)
        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, (120, 170, 255, 255), self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235, 238, 242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, config: SearchConfig):
        pygame.init()

        self.session = SearchSession(config)
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        win_w, win_h = PANEL_W + 640, 640
        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("Stepwise A*")

        self._buttons: List[UIButton] = []
        self._dragging: Optional[CellState] = None
        self._last_step_t = 0.0
        self.clock = pygame.time.Clock()

        self._layout(win_w, win_h)

    @property
    def grid(self):
        return self.session.grid

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Integer cell_size that fits the window; grid centered left of the panel."""
        size = self.grid.size
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = max(MIN_CELL_SIZE, min(avail_w // size, avail_h // size))

        plate = self.cell_size * size + 2 * GRID_MARGIN
        left_x = max(0, (win_w - PANEL_W - plate) // 2)
        top_y = max(0, (win_h - plate) // 2)
        self.canvas_rect = pygame.Rect(left_x, top_y, plate, plate)
        self._grid_origin = (left_x + GRID_MARGIN, top_y + GRID_MARGIN)
        self._right_band = pygame.Rect(max(self.canvas_rect.right, win_w - PANEL_W), 0,
                                       PANEL_W, win_h)
        self._build_buttons()

    def run(self):
        while True:
            self._handle_events()
            if self.session.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    def _tick_algorithm(self):
        t0 = time.time()
        step_interval = 1.0 / max(1, self.session.config.steps_per_sec)
        if t0 - self._last_step_t >= step_interval:
            self._last_step_t = t0
            self.session.step_until_visible()

    def _do_step(self):
        self.session.running = False
        self.session.step_until_visible()
        self._refresh_active_states()

    # ---------- input ----------
    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                self._handle_key(e.key)
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((e.w, e.h), pygame.RESIZABLE)
                self._layout(e.w, e.h)
            elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                if not any(b.handle_mouse(e) for b in self._buttons):
                    self._mouse_down(e.pos)
            elif e.type == pygame.MOUSEBUTTONUP and e.button == 1:
                self._mouse_up(e.pos)
            elif e.type == pygame.MOUSEMOTION:
                for b in self._buttons:
                    b.handle_mouse(e)

    def _handle_key(self, key: int):
        if key in (pygame.K_ESCAPE, pygame.K_q):
            pygame.quit(); sys.exit(0)
        elif key == pygame.K_SPACE:
            self._toggle_run()
        elif key == pygame.K_n:
            self._do_step()
        elif key == pygame.K_r:
            self._reset()
        elif key == pygame.K_c:
            self._clear()
        elif key == pygame.K_h:
            self._cycle_heuristic()
        elif key == pygame.K_d:
            self._toggle_diagonal()
        elif key == pygame.K_LEFTBRACKET:
            self._resize_grid(-1)
        elif key == pygame.K_RIGHTBRACKET:
            self._resize_grid(+1)
        elif key in (pygame.K_PLUS, pygame.K_EQUALS):
            self.session.bump_speed(+1)
        elif key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
            self.session.bump_speed(-1)

    def _cell_at(self, pos) -> Optional[Coord]:
        return pixel_to_cell(pos, self._grid_origin, self.cell_size, self.grid.size)

    def _mouse_down(self, pos):
        cell = self._cell_at(pos)
        if cell is None:
            return
        state = self.grid.get_state(*cell)
        if state in (CellState.START, CellState.END):
            self._dragging = state
        else:
            self.session.toggle_wall(*cell)

    def _mouse_up(self, pos):
        which, self._dragging = self._dragging, None
        if which is None:
            return
        cell = self._cell_at(pos)
        if cell is not None:
            self.session.move_endpoint(which, *cell)

    # ---------- actions ----------
    def _toggle_run(self):
        self.session.toggle_running()
        self._refresh_active_states()

    def _reset(self):
        self.session.reset_marks()
        self._refresh_active_states()

    def _clear(self):
        self.session.clear()
        self._layout(*self.screen.get_size())

    def _cycle_heuristic(self):
        self.session.cycle_heuristic()
        self._refresh_active_states()

    def _toggle_diagonal(self):
        self.session.set_diagonal(not self.session.config.allow_diagonal)
        self._refresh_active_states()

    def _resize_grid(self, dv: int):
        if self.session.new_grid(self.grid.size + dv):
            self._layout(*self.screen.get_size())
        else:
            logger.warning("grid size locked while a search is running")

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        top = (24, 26, 32); bot = (36, 40, 48)
        for y in range(h):
            t = y / max(1, h - 1)
            c = tuple(int(top[i] + (bot[i] - top[i]) * t) for i in range(3))
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        show_costs = cs >= LABEL_MIN_CELL

        for cell in self.grid.cells:
            rect = pygame.Rect(ox + cell.x * cs, oy + cell.y * cs, cs, cs)
            pygame.draw.rect(self.screen, CELL_COLORS[cell.state], rect)
            if show_costs and cell.state in (CellState.OPEN, CellState.CLOSED):
                for i, (tag, v) in enumerate((("G", cell.g), ("H", cell.h), ("F", cell.f))):
                    txt = self.font_small.render(f"{tag}: {format_cost(v)}", True, WHITE)
                    self.screen.blit(txt, (rect.x + 5, rect.y + 5 + i * 14))
            pygame.draw.rect(self.screen, BLACK, rect, 1)

        # highlight the node under expansion
        engine = self.session.engine
        if engine is not None and engine.current is not None:
            cx, cy = engine.current
            pygame.draw.rect(self.screen, ACCENT_GOLD,
                             pygame.Rect(ox + cx * cs, oy + cy * cs, cs, cs), 3)

        self._draw_badge(self.grid.start, "S")
        self._draw_badge(self.grid.end, "E")

    def _draw_badge(self, cell: Coord, label: str):
        if self.cell_size < 20:
            return
        cs = self.cell_size
        ox, oy = self._grid_origin
        col, row = cell
        txt = self.font.render(label, True, WHITE)
        self.screen.blit(txt, txt.get_rect(center=(ox + col * cs + cs // 2, oy + row * cs + cs // 2)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 250  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 34
        gap = 8

        def add(label, cb, *, togglable=False, store_as: Optional[str] = None):
            nonlocal y
            btn = UIButton(label, pygame.Rect(x, y, w, h), cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)
            y += h + gap

        add("Run / Pause", self._toggle_run, togglable=True, store_as="btn_run")
        add("Step", self._do_step)
        add("Reset", self._reset)
        add("Clear grid", self._clear)
        add("Heuristic", self._cycle_heuristic)
        add("Diagonals", self._toggle_diagonal, togglable=True, store_as="btn_diag")

        half = (w - 8) // 2
        self._buttons.append(UIButton("Size -", pygame.Rect(x, y, half, h), lambda: self._resize_grid(-1)))
        self._buttons.append(UIButton("Size +", pygame.Rect(x + half + 8, y, half, h), lambda: self._resize_grid(+1)))
        y += h + gap
        self._buttons.append(UIButton("Speed -", pygame.Rect(x, y, half, h), lambda: self.session.bump_speed(-1)))
        self._buttons.append(UIButton("Speed +", pygame.Rect(x + half + 8, y, half, h), lambda: self.session.bump_speed(+1)))

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(self.session.running)
        if hasattr(self, "btn_diag"):
            self.btn_diag.set_active(self.session.config.allow_diagonal)

    def _draw_metrics_and_buttons(self):
        rb = self._right_band
        self._refresh_active_states()

        card_h = 230
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0, 0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        cfg = self.session.config
        m = self.session.metrics
        line(self.session.state_label, big=True, color=ACCENT_GOLD)
        line(f"Steps: {m.get('steps', 0)}   Popped: {m.get('popped', 0)}")
        line(f"Open: {m.get('open_size', 0)}   Closed: {m.get('closed_count', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_cost") is not None:
            line(f"Total Cost: {format_cost(m['total_cost'])}")
        line("-" * 26)
        line(f"Heuristic: {cfg.heuristic.value}")
        line(f"Diagonals: {'on' if cfg.allow_diagonal else 'off'}")
        line(f"Grid: {self.grid.size}x{self.grid.size}   Speed: {cfg.steps_per_sec}/s")

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def main(argv=None):
    config = resolve_config(argv)
    logging.basicConfig(level=config.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("starting viewer: %s", config)
    Viewer(config).run()


if __name__ == "__main__":
    main()
