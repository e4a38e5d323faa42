from __future__ import annotations

import math
from pathlib import Path
import sys

import pyglet
from pyglet.window import key

from .ui_layout import PanelColumn, Rect, point_in_rect, split_ends
from ..core.config import GameConfig
from ..core.engine import Engine
from ..core.model.map import MapData, load_map_json
from ..core.model.state import WavePhase
from ..core.events import subscribe
from ..core.rules.placement import can_place, snap_to_cell


SPEED_OPTIONS: tuple[tuple[str, float], ...] = (
    ("0.5x", 0.5),
    ("1x", 1.0),
    ("2x", 2.0),
    ("4x", 4.0),
)

BACKGROUND = (24, 26, 30)
PATH_COLOR = (92, 78, 60)
ENEMY_COLOR = (220, 60, 60)
HP_BACK = (120, 20, 20)
HP_FRONT = (60, 220, 90)
BUTTON = (60, 60, 64)
BUTTON_BORDER = (110, 110, 115)
BUTTON_ACTIVE = (70, 90, 70)
BUTTON_ACTIVE_BORDER = (120, 180, 120)
BUTTON_DISABLED = (40, 40, 44)
BUTTON_DISABLED_BORDER = (80, 80, 85)


def _next_run_dir(base_dir: Path) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    max_idx = -1
    for child in base_dir.iterdir():
        if not child.is_dir():
            continue
        try:
            idx = int(child.name)
        except ValueError:
            continue
        max_idx = max(max_idx, idx)
    run_dir = base_dir / str(max_idx + 1)
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


class _Tee:
    def __init__(self, *streams) -> None:
        self._streams = streams

    def write(self, data: str) -> int:
        for stream in self._streams:
            stream.write(data)
            stream.flush()
        return len(data)

    def flush(self) -> None:
        for stream in self._streams:
            stream.flush()


class TowerDefenseGui:
    def __init__(self, map_data: MapData, config: GameConfig | None = None, *, seed: int | None = None) -> None:
        self.map_data = map_data
        self.engine = Engine(map_data, config, seed=seed)
        self.config = self.engine.state.config

        self._sidebar_width = 220
        self._sidebar_x = map_data.width
        self._height = max(map_data.height, 480)
        self.window = pyglet.window.Window(
            width=map_data.width + self._sidebar_width,
            height=self._height,
            caption=f"Tower Defense - {map_data.name}",
        )
        self.static_batch = pyglet.graphics.Batch()
        self.ui_batch = pyglet.graphics.Batch()
        self._static_shapes: list = []
        self._build_path_shapes()

        self._kinds = list(self.config.turrets)
        self._selected_kind = self._kinds[0]
        self._mouse: tuple[float, float] | None = None
        self._speed_index = 1
        self._running = True

        self._build_sidebar_ui()
        subscribe(self.engine.state, self._on_state_change)

        self.window.push_handlers(
            on_draw=self.on_draw,
            on_mouse_press=self.on_mouse_press,
            on_mouse_motion=self.on_mouse_motion,
            on_key_press=self.on_key_press,
        )
        pyglet.clock.schedule_interval(self.update, 1 / 60.0)

    # --- coordinates -------------------------------------------------

    def _to_screen(self, x: float, y: float) -> tuple[float, float]:
        return x, self._height - y

    def _to_map(self, x: float, y: float) -> tuple[float, float] | None:
        mx = x
        my = self._height - y
        if mx < 0 or my < 0 or mx >= self.map_data.width or my >= self.map_data.height:
            return None
        return mx, my

    # --- loop ---------------------------------------------------------

    def update(self, dt: float) -> None:
        if not self._running:
            return
        speed = SPEED_OPTIONS[self._speed_index][1]
        outcome = self.engine.step(max(0.0, dt) * speed)
        if outcome is not None:
            self._show_game_over()

    def on_draw(self) -> None:
        self.window.clear()
        self.static_batch.draw()
        frame_batch = pyglet.graphics.Batch()
        shapes = self._draw_frame(frame_batch)  # noqa: F841  shapes must outlive the draw call
        frame_batch.draw()
        self.ui_batch.draw()

    def _draw_frame(self, batch: pyglet.graphics.Batch) -> list:
        s = self.engine.state
        shapes: list = []
        tile = self.map_data.tile

        for turret in s.turrets:
            sx, sy = self._to_screen(turret.x, turret.y)
            shapes.append(pyglet.shapes.Rectangle(
                sx - tile * 0.4, sy - tile * 0.4, tile * 0.8, tile * 0.8, color=(50, 54, 60), batch=batch,
            ))
            shapes.append(pyglet.shapes.Circle(sx, sy, tile * 0.3, color=turret.color, batch=batch))
            # barrel follows the aim angle; screen y is flipped
            bx = sx + math.cos(turret.angle) * tile * 0.35
            by = sy - math.sin(turret.angle) * tile * 0.35
            shapes.append(pyglet.shapes.Circle(bx, by, tile * 0.1, color=(230, 230, 230), batch=batch))

        for enemy in s.enemies:
            sx, sy = self._to_screen(enemy.x, enemy.y)
            shapes.append(pyglet.shapes.Circle(sx, sy, enemy.radius, color=ENEMY_COLOR, batch=batch))
            bar_w = enemy.radius * 2
            frac = max(0.0, enemy.hp / enemy.max_hp) if enemy.max_hp > 0 else 0.0
            top = sy + enemy.radius + 4
            shapes.append(pyglet.shapes.Rectangle(sx - enemy.radius, top, bar_w, 3, color=HP_BACK, batch=batch))
            shapes.append(pyglet.shapes.Rectangle(sx - enemy.radius, top, bar_w * frac, 3, color=HP_FRONT, batch=batch))

        for projectile in s.projectiles:
            sx, sy = self._to_screen(projectile.x, projectile.y)
            shapes.append(pyglet.shapes.Circle(sx, sy, projectile.radius, color=projectile.color, batch=batch))

        for particle in s.particles:
            sx, sy = self._to_screen(particle.x, particle.y)
            dot = pyglet.shapes.Circle(sx, sy, particle.size, color=particle.color, batch=batch)
            dot.opacity = int(255 * particle.life / max(1, particle.max_life))
            shapes.append(dot)

        for text in s.texts:
            sx, sy = self._to_screen(text.x, text.y)
            alpha = int(255 * text.life / max(1, text.max_life))
            shapes.append(pyglet.text.Label(
                text.text, x=sx, y=sy, anchor_x="center", anchor_y="center",
                font_size=10, color=(*text.color, alpha), batch=batch,
            ))

        if self._mouse is not None and not s.game_over:
            preview = self._placement_preview(batch)
            if preview is not None:
                shapes.extend(preview)
        return shapes

    def _placement_preview(self, batch: pyglet.graphics.Batch) -> list | None:
        pos = self._to_map(*self._mouse)
        if pos is None:
            return None
        mx, my = pos
        tile = self.map_data.tile
        cell_x, cell_y = snap_to_cell(self.map_data, mx, my)
        valid = can_place(self.engine.state, self.map_data, mx, my, self._selected_kind)
        sx, sy = self._to_screen(cell_x, cell_y + tile)
        cell = pyglet.shapes.Rectangle(
            sx, sy, tile, tile, color=(60, 200, 90) if valid else (230, 70, 70), batch=batch,
        )
        cell.opacity = 90
        turret_def = self.config.turret_def(self._selected_kind)
        cx, cy = self._to_screen(cell_x + tile / 2, cell_y + tile / 2)
        ring = pyglet.shapes.Circle(cx, cy, turret_def.range, color=(200, 200, 200), batch=batch)
        ring.opacity = 30
        return [cell, ring]

    # --- static layers ------------------------------------------------

    def _build_path_shapes(self) -> None:
        tile = self.map_data.tile
        self._static_shapes.append(pyglet.shapes.Rectangle(
            0, 0, self.map_data.width, self._height, color=BACKGROUND, batch=self.static_batch,
        ))
        half = tile * 0.5
        for x1, y1, x2, y2 in self.map_data.path.segments():
            length = math.hypot(x2 - x1, y2 - y1)
            steps = max(1, int(length // (tile * 0.25)))
            for i in range(steps + 1):
                t = i / steps
                sx, sy = self._to_screen(x1 + (x2 - x1) * t, y1 + (y2 - y1) * t)
                self._static_shapes.append(pyglet.shapes.Rectangle(
                    sx - half, sy - half, tile, tile, color=PATH_COLOR, batch=self.static_batch,
                ))

    def _build_sidebar_ui(self) -> None:
        s = self.engine.state
        self._sidebar_bg = pyglet.shapes.Rectangle(
            self._sidebar_x, 0, self._sidebar_width, self._height, color=(34, 36, 40), batch=self.ui_batch,
        )
        panel = PanelColumn(x=self._sidebar_x, top=self._height, width=self._sidebar_width)
        white = (240, 240, 240, 255)
        self._wave_label = panel.label(f"Wave: {s.wave}", font_size=14, color=white, batch=self.ui_batch)
        self._lives_label = panel.label(f"Lives: {s.lives}", font_size=14, color=white, batch=self.ui_batch)
        self._money_label = panel.label(f"Money: ${s.money}", font_size=14, color=white, batch=self.ui_batch)
        panel.label("Turrets", font_size=12, color=(200, 200, 200, 255), batch=self.ui_batch)

        self._kind_buttons: dict[str, tuple[Rect, object, object]] = {}
        cells = panel.buttons(len(self._kinds), columns=2, height=48)
        for index, (kind, bounds) in enumerate(zip(self._kinds, cells)):
            turret_def = self.config.turret_def(kind)
            bx, by, bw, bh = bounds
            button = pyglet.shapes.BorderedRectangle(
                bx, by, bw, bh, border=2, color=BUTTON, border_color=BUTTON_BORDER, batch=self.ui_batch,
            )
            label = pyglet.text.Label(
                f"{index + 1} {turret_def.title}\n${turret_def.price}",
                x=bx + bw / 2, y=by + bh / 2, width=int(bw - 6), multiline=True, align="center",
                anchor_x="center", anchor_y="center", font_size=9, color=white, batch=self.ui_batch,
            )
            self._kind_buttons[kind] = (bounds, button, label)

        self._wave_button_bounds: Rect = panel.row(36)
        wx, wy, ww, wh = self._wave_button_bounds
        self._wave_button = pyglet.shapes.BorderedRectangle(
            wx, wy, ww, wh, border=2, color=BUTTON, border_color=BUTTON_BORDER, batch=self.ui_batch,
        )
        self._wave_button_label = pyglet.text.Label(
            "Start wave", x=wx + ww / 2, y=wy + wh / 2, anchor_x="center", anchor_y="center",
            font_size=12, color=white, batch=self.ui_batch,
        )

        self._speed_down_bounds, middle, self._speed_up_bounds = split_ends(panel.row(28))
        self._speed_buttons = []
        for bounds, text in ((self._speed_down_bounds, "<<"), (self._speed_up_bounds, ">>")):
            bx, by, bw, bh = bounds
            self._speed_buttons.append(pyglet.shapes.BorderedRectangle(
                bx, by, bw, bh, border=2, color=BUTTON, border_color=BUTTON_BORDER, batch=self.ui_batch,
            ))
            self._speed_buttons.append(pyglet.text.Label(
                text, x=bx + bw / 2, y=by + bh / 2, anchor_x="center", anchor_y="center",
                font_size=12, color=white, batch=self.ui_batch,
            ))
        mx, my, mw, mh = middle
        self._speed_label = pyglet.text.Label(
            SPEED_OPTIONS[self._speed_index][0], x=mx + mw / 2, y=my + mh / 2,
            anchor_x="center", anchor_y="center", font_size=12, color=white, batch=self.ui_batch,
        )

        self._game_over_overlay = pyglet.shapes.Rectangle(
            0, 0, self.map_data.width, self._height, color=(0, 0, 0), batch=self.ui_batch,
        )
        self._game_over_overlay.opacity = 0
        self._game_over_label = pyglet.text.Label(
            "GAME OVER", x=self.map_data.width / 2, y=self._height / 2 + 20,
            anchor_x="center", anchor_y="center", font_size=36, color=(220, 30, 30, 0), batch=self.ui_batch,
        )
        self._final_wave_label = pyglet.text.Label(
            "", x=self.map_data.width / 2, y=self._height / 2 - 24,
            anchor_x="center", anchor_y="center", font_size=16, color=(240, 240, 240, 0), batch=self.ui_batch,
        )
        self._refresh_kind_buttons()
        self._refresh_wave_button()

    # --- HUD bindings ---------------------------------------------------

    def _on_state_change(self, name: str, value) -> None:
        if name == "money":
            self._money_label.text = f"Money: ${value}"
            self._refresh_kind_buttons()
        elif name == "lives":
            self._lives_label.text = f"Lives: {value}"
        elif name == "wave":
            self._wave_label.text = f"Wave: {value}"
        elif name == "phase":
            self._refresh_wave_button()
        elif name == "game_over":
            self._show_game_over()

    def _refresh_kind_buttons(self) -> None:
        money = self.engine.state.money
        for kind, (_, button, label) in self._kind_buttons.items():
            price = self.config.turret_def(kind).price
            if kind == self._selected_kind:
                button.color = BUTTON_ACTIVE
                button.border_color = BUTTON_ACTIVE_BORDER
            elif money < price:
                button.color = BUTTON_DISABLED
                button.border_color = BUTTON_DISABLED_BORDER
            else:
                button.color = BUTTON
                button.border_color = BUTTON_BORDER
            label.color = (240, 240, 240, 255) if money >= price else (150, 150, 150, 255)

    def _refresh_wave_button(self) -> None:
        enabled = self.engine.state.phase == WavePhase.IDLE and not self.engine.state.game_over
        self._wave_button.color = BUTTON if enabled else BUTTON_DISABLED
        self._wave_button.border_color = BUTTON_BORDER if enabled else BUTTON_DISABLED_BORDER
        self._wave_button_label.color = (240, 240, 240, 255 if enabled else 120)

    def _show_game_over(self) -> None:
        if not self._running:
            return
        self._running = False
        pyglet.clock.unschedule(self.update)
        self._game_over_overlay.opacity = 150
        self._game_over_label.color = (220, 30, 30, 255)
        self._final_wave_label.text = f"Reached wave {self.engine.state.wave}"
        self._final_wave_label.color = (240, 240, 240, 255)
        self._refresh_wave_button()
        print(f"[gui] game over wave={self.engine.state.wave}")

    # --- input ------------------------------------------------------------

    def on_mouse_motion(self, x: int, y: int, dx: int, dy: int) -> None:
        self._mouse = (float(x), float(y))

    def on_mouse_press(self, x: int, y: int, button: int, modifiers: int) -> None:
        if not self._running:
            return
        print(f"[gui] click ({x},{y}) button={button}")
        if point_in_rect(x, y, self._wave_button_bounds):
            self.engine.act("START_WAVE")
            return
        if point_in_rect(x, y, self._speed_down_bounds):
            self._set_speed_index(self._speed_index - 1)
            return
        if point_in_rect(x, y, self._speed_up_bounds):
            self._set_speed_index(self._speed_index + 1)
            return
        for kind, (bounds, _, _) in self._kind_buttons.items():
            if point_in_rect(x, y, bounds):
                self._select_kind(kind)
                return
        pos = self._to_map(x, y)
        if pos is None:
            return
        result = self.engine.act("PLACE_TURRET", {"x": pos[0], "y": pos[1], "kind": self._selected_kind})
        if result is not None and not result.accepted:
            print(f"[gui] placement rejected: {result.reason}")

    def on_key_press(self, symbol: int, modifiers: int) -> None:
        if symbol == key.SPACE and self._running:
            self.engine.act("START_WAVE")
        elif symbol == key.P and self._running:
            self.engine.act("PAUSE_TOGGLE")
        elif key._1 <= symbol <= key._9:
            index = symbol - key._1
            if index < len(self._kinds):
                self._select_kind(self._kinds[index])

    def _select_kind(self, kind: str) -> None:
        self._selected_kind = kind
        self._refresh_kind_buttons()

    def _set_speed_index(self, index: int) -> None:
        clamped = max(0, min(index, len(SPEED_OPTIONS) - 1))
        if clamped == self._speed_index:
            return
        self._speed_index = clamped
        label, factor = SPEED_OPTIONS[clamped]
        self._speed_label.text = label
        print(f"[gui] speed set to {label} ({factor}x)")


def run(map_path: str | Path, config: GameConfig | None = None, *, seed: int | None = None) -> None:
    run_dir = _next_run_dir(Path("runs"))
    log_file = (run_dir / "log.txt").open("w", encoding="utf-8")
    sys.stdout = _Tee(sys.stdout, log_file)
    sys.stderr = _Tee(sys.stderr, log_file)
    _app = TowerDefenseGui(load_map_json(map_path), config, seed=seed)
    pyglet.app.run()
