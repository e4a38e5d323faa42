from __future__ import annotations

from pathlib import Path

import pyglet
from pyglet.window import key

from .ui_layout import PanelColumn
from ..rogue.model import GRID_SIZE, STAIRS, TILE_SIZE, WALL, DungeonState, new_dungeon
from ..rogue.rules import generate_floor, heal, load_game, move_player, reset_game, save_game, step_texts


FLOOR_COLOR = (34, 34, 34)
WALL_COLOR = (85, 85, 85)
WALL_SHADE = (60, 60, 60)
PLAYER_COLOR = (0, 255, 0)
MONSTER_COLOR = (255, 0, 0)
STAIRS_COLOR = (255, 255, 0)
HP_BACK = (200, 30, 30)
HP_FRONT = (50, 255, 50)

MOVES = {
    key.UP: (0, -1),
    key.DOWN: (0, 1),
    key.LEFT: (-1, 0),
    key.RIGHT: (1, 0),
}


class RogueGui:
    def __init__(self, state: DungeonState) -> None:
        self.state = state
        self._size = TILE_SIZE * GRID_SIZE
        self._sidebar_width = 260
        self.window = pyglet.window.Window(
            width=self._size + self._sidebar_width,
            height=self._size,
            caption="Dungeon Crawler",
        )
        self.ui_batch = pyglet.graphics.Batch()
        self._build_sidebar_ui()
        self._refresh_hud()

        self.window.push_handlers(on_draw=self.on_draw, on_key_press=self.on_key_press)
        pyglet.clock.schedule_interval(self.update, 1 / 60.0)

    def _to_screen(self, x: float, y: float) -> tuple[float, float]:
        """Bottom-left screen corner of grid tile (x, y)."""
        return x * TILE_SIZE, self._size - (y + 1) * TILE_SIZE

    def update(self, dt: float) -> None:
        step_texts(self.state)

    def on_draw(self) -> None:
        self.window.clear()
        batch = pyglet.graphics.Batch()
        shapes = self._draw_grid(batch)  # noqa: F841  shapes must outlive the draw call
        batch.draw()
        self.ui_batch.draw()

    def _draw_grid(self, batch: pyglet.graphics.Batch) -> list:
        s = self.state
        shapes: list = [
            pyglet.shapes.Rectangle(0, 0, self._size, self._size, color=FLOOR_COLOR, batch=batch),
        ]
        for y, row in enumerate(s.grid):
            for x, tile in enumerate(row):
                sx, sy = self._to_screen(x, y)
                if tile == WALL:
                    shapes.append(pyglet.shapes.Rectangle(sx, sy, TILE_SIZE, TILE_SIZE, color=WALL_COLOR, batch=batch))
                    shapes.append(pyglet.shapes.Rectangle(sx, sy, TILE_SIZE, 5, color=WALL_SHADE, batch=batch))
                elif tile == STAIRS:
                    shapes.append(pyglet.shapes.Rectangle(sx + 8, sy + 8, 16, 16, color=STAIRS_COLOR, batch=batch))

        for monster in s.monsters:
            sx, sy = self._to_screen(monster.x, monster.y)
            shapes.append(pyglet.shapes.Rectangle(sx + 4, sy + 4, 24, 24, color=MONSTER_COLOR, batch=batch))
            frac = max(0.0, monster.hp / monster.max_hp) if monster.max_hp > 0 else 0.0
            shapes.append(pyglet.shapes.Rectangle(sx + 4, sy + TILE_SIZE - 2, 24, 4, color=HP_BACK, batch=batch))
            shapes.append(pyglet.shapes.Rectangle(sx + 4, sy + TILE_SIZE - 2, 24 * frac, 4, color=HP_FRONT, batch=batch))

        player = s.player
        px, py = self._to_screen(player.x, player.y)
        shapes.append(pyglet.shapes.Rectangle(px + 4, py + 4, 24, 24, color=PLAYER_COLOR, batch=batch))
        # hat
        shapes.append(pyglet.shapes.Rectangle(px + 10, py + 18, 12, 6, color=(255, 255, 255), batch=batch))

        for text in s.texts:
            sx, sy = self._to_screen(text.x, text.y)
            shapes.append(pyglet.text.Label(
                text.text, x=sx, y=sy + TILE_SIZE + text.life, font_name="monospace",
                font_size=11, color=(*text.color, 255), batch=batch,
            ))
        return shapes

    def _build_sidebar_ui(self) -> None:
        self._sidebar_bg = pyglet.shapes.Rectangle(
            self._size, 0, self._sidebar_width, self._size, color=(20, 20, 24), batch=self.ui_batch,
        )
        panel = PanelColumn(x=self._size, top=self._size, width=self._sidebar_width, gap=6)
        white = (240, 240, 240, 255)
        self._level_label = panel.label("", font_size=12, color=white, batch=self.ui_batch)
        self._hp_label = panel.label("", font_size=12, color=white, batch=self.ui_batch)
        self._xp_label = panel.label("", font_size=12, color=white, batch=self.ui_batch)
        self._floor_label = panel.label("", font_size=12, color=white, batch=self.ui_batch)
        self._gold_label = panel.label("", font_size=12, color=white, batch=self.ui_batch)
        panel.label("H heal  S save  R reset", font_size=9, color=(160, 160, 160, 255), batch=self.ui_batch)
        panel.skip(4)
        bx, by, bw, bh = panel.rest()
        self._log_label = pyglet.text.Label(
            "", x=bx, y=by + bh, width=int(bw), multiline=True, anchor_y="top",
            font_size=9, color=(170, 170, 170, 255), batch=self.ui_batch,
        )

    def _refresh_hud(self) -> None:
        p = self.state.player
        self._level_label.text = f"Level: {p.level}"
        self._hp_label.text = f"HP: {p.hp} / {p.max_hp}"
        self._xp_label.text = f"XP: {p.xp} / {p.next_level_xp}"
        self._floor_label.text = f"Floor: {p.floor}"
        self._gold_label.text = f"Gold: {p.gold}"
        self._log_label.text = "\n".join(f"> {m.text}" for m in self.state.messages)

    def on_key_press(self, symbol: int, modifiers: int) -> None:
        if symbol in MOVES:
            outcome = move_player(self.state, *MOVES[symbol])
            if outcome == "descended":
                print(f"[gui] floor {self.state.player.floor}")
        elif symbol == key.H:
            heal(self.state)
        elif symbol == key.S:
            save_game(self.state)
        elif symbol == key.R:
            print("[gui] reset")
            reset_game(self.state)
        else:
            return
        self._refresh_hud()


def run(*, seed: int | None = None, save_path: str | Path | None = None) -> None:
    state = new_dungeon(seed=seed, save_path=save_path)
    load_game(state)
    generate_floor(state)
    _app = RogueGui(state)
    pyglet.app.run()
