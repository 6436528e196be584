"""Line-follower arena GUI with pygame + pygame_gui."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import pygame
import pygame_gui

from core import (
    ArenaConfig,
    FrameScheduler,
    RobotConfig,
    Simulator,
    check_program,
    get_program_template,
    latest_snapshot,
    load_robot_config,
    load_snapshot,
    load_track,
    next_snapshot_path,
    save_robot_config,
    save_snapshot,
    save_telemetry_csv,
    save_track,
)
from arena_mechanics.diagnostics import TickHistory
from arena_mechanics.track import TrackSurface
from arena_mechanics.visualizer import ArenaRenderer, RenderOptions
from robot_library.presets import LAYOUT_PRESETS, MAX_SENSORS, MIN_SENSORS
from robot_library.sensors import (
    ReadingStats,
    classify_reading,
    has_extreme_readings,
    reading_voltage,
)


ASSET_PATH = Path(__file__).parent / "arena_data"
TARGET_FPS = 60

STATUS_COLORS = {
    "strong_line": (239, 68, 68),
    "weak_line": (234, 179, 8),
    "surface": (34, 197, 94),
}
STATUS_LABELS = {
    "strong_line": "Strong Line",
    "weak_line": "Weak Line",
    "surface": "Surface",
}


class SimpleTextEditor:
    """Very small text editor for the robot program."""

    def __init__(self, rect: pygame.Rect, font: pygame.font.Font, text: str = "") -> None:
        self.rect = rect
        self.font = font
        self.lines = text.splitlines() or [""]
        self.cursor = [0, 0]  # line, col
        self.scroll = 0
        self.has_focus = False

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Return True when the text changed."""
        if event.type == pygame.MOUSEBUTTONDOWN:
            self.has_focus = self.rect.collidepoint(event.pos)
        if event.type == pygame.MOUSEWHEEL and self.has_focus:
            self.scroll = max(0, min(len(self.lines) - 1, self.scroll - event.y))
        if not self.has_focus or event.type != pygame.KEYDOWN:
            return False
        if event.key == pygame.K_BACKSPACE:
            self._backspace()
        elif event.key == pygame.K_RETURN:
            self._newline()
        elif event.key == pygame.K_TAB:
            self._insert("  ")
        elif event.key in (pygame.K_UP, pygame.K_DOWN, pygame.K_LEFT, pygame.K_RIGHT):
            self._move(event.key)
            return False
        elif event.unicode:
            self._insert(event.unicode)
        else:
            return False
        return True

    def set_text(self, text: str) -> None:
        self.lines = text.splitlines() or [""]
        self.cursor = [0, 0]
        self.scroll = 0

    def _insert(self, text: str) -> None:
        line = self.lines[self.cursor[0]]
        before = line[: self.cursor[1]]
        after = line[self.cursor[1] :]
        self.lines[self.cursor[0]] = before + text + after
        self.cursor[1] += len(text)

    def _newline(self) -> None:
        line = self.lines[self.cursor[0]]
        before = line[: self.cursor[1]]
        after = line[self.cursor[1] :]
        self.lines[self.cursor[0]] = before
        self.lines.insert(self.cursor[0] + 1, after)
        self.cursor = [self.cursor[0] + 1, 0]

    def _backspace(self) -> None:
        if self.cursor == [0, 0]:
            return
        line = self.lines[self.cursor[0]]
        if self.cursor[1] > 0:
            self.lines[self.cursor[0]] = line[: self.cursor[1] - 1] + line[self.cursor[1] :]
            self.cursor[1] -= 1
        else:
            prev_line = self.lines[self.cursor[0] - 1]
            self.cursor[1] = len(prev_line)
            self.lines[self.cursor[0] - 1] = prev_line + line
            del self.lines[self.cursor[0]]
            self.cursor[0] -= 1

    def _move(self, key: int) -> None:
        row, col = self.cursor
        if key == pygame.K_UP:
            row = max(0, row - 1)
        elif key == pygame.K_DOWN:
            row = min(len(self.lines) - 1, row + 1)
        elif key == pygame.K_LEFT:
            col -= 1
        elif key == pygame.K_RIGHT:
            col += 1
        col = max(0, min(len(self.lines[row]), col))
        self.cursor = [row, col]

    def text(self) -> str:
        return "\n".join(self.lines)

    def draw(self, surface: pygame.Surface) -> None:
        pygame.draw.rect(surface, (15, 23, 42), self.rect)
        pygame.draw.rect(surface, (71, 85, 105), self.rect, 1)
        x, y = self.rect.topleft
        line_height = self.font.get_height() + 2
        visible = self.lines[self.scroll :]
        for i, line in enumerate(visible):
            if y + (i + 1) * line_height > self.rect.bottom:
                break
            txt_surf = self.font.render(line, True, (74, 222, 128))
            surface.blit(txt_surf, (x + 4, y + i * line_height + 2))
        if self.has_focus and self.cursor[0] >= self.scroll:
            cursor_x = x + 4 + self.font.size(self.lines[self.cursor[0]][: self.cursor[1]])[0]
            cursor_y = y + (self.cursor[0] - self.scroll) * line_height + 2
            if cursor_y + line_height <= self.rect.bottom:
                pygame.draw.line(surface, (240, 200, 120), (cursor_x, cursor_y), (cursor_x, cursor_y + line_height - 4), 2)


class ArenaApp:
    def __init__(self, data_path: Path = ASSET_PATH) -> None:
        pygame.init()
        pygame.display.set_caption("Line Follower Arena")
        self.window_size = (1280, 780)
        self.window_surface = pygame.display.set_mode(self.window_size)
        self.manager = pygame_gui.UIManager(self.window_size)
        self.clock = pygame.time.Clock()
        self.running = True
        self.data_path = data_path

        self.arena_cfg = ArenaConfig()
        self.robot_cfg = RobotConfig.default()
        self.arena = self.arena_cfg.to_arena()
        self.track = TrackSurface(self.arena.width, self.arena.height)
        self.track.draw_sample_track()
        self.scheduler = FrameScheduler()
        self.sim = Simulator(self.arena, self.track, self.scheduler, sensor_mounts=self.robot_cfg.to_mounts())
        self.history = TickHistory(capacity=TARGET_FPS * 10)
        self.sim.pose_listeners.append(self._on_pose)
        self.renderer = ArenaRenderer(
            self.arena,
            RenderOptions(
                show_grid=self.arena_cfg.show_grid,
                grid_step=self.arena_cfg.grid_step,
                robot_size=self.arena_cfg.robot_size,
            ),
        )

        self.viewport_rect = pygame.Rect((20, 90), self.arena.size)
        self.brush_mode = "draw"
        self.selected_sensor = 0
        self.painting = False
        self._last_paint: Optional[Tuple[int, int]] = None
        self.runtime = 0.0
        self.status_text = "Ready"

        self.font = pygame.font.Font(pygame.font.get_default_font(), 14)
        self._build_ui()
        self.code_editor = SimpleTextEditor(
            pygame.Rect(self.viewport_rect.right + 20, 90, self.window_size[0] - self.viewport_rect.right - 40, 300),
            self.font,
            self.sim.program_text,
        )

    def _build_ui(self) -> None:
        def button(x: int, y: int, w: int, text: str) -> pygame_gui.elements.UIButton:
            return pygame_gui.elements.UIButton(
                relative_rect=pygame.Rect((x, y), (w, 28)), text=text, manager=self.manager
            )

        self.btn_start = button(20, 15, 70, "Start")
        self.btn_stop = button(95, 15, 70, "Stop")
        self.btn_reset = button(170, 15, 70, "Reset")
        self.btn_draw = button(270, 15, 70, "Draw")
        self.btn_erase = button(345, 15, 70, "Erase")
        self.btn_clear = button(420, 15, 70, "Clear")
        self.btn_sample = button(495, 15, 110, "Sample track")
        self.btn_grid = button(610, 15, 70, "Grid")
        self.btn_save_track = button(710, 15, 100, "Save track")
        self.btn_load_track = button(815, 15, 100, "Load track")
        self.btn_save_snap = button(945, 15, 110, "Save snapshot")
        self.btn_load_snap = button(1060, 15, 110, "Load snapshot")

        self.btn_basic_layout = button(20, 50, 90, "Basic (3)")
        self.btn_standard_layout = button(115, 50, 110, "Standard (5)")
        self.btn_fewer = button(230, 50, 40, "-")
        self.btn_more = button(275, 50, 40, "+")
        self.btn_save_robot = button(320, 50, 100, "Save robot")
        self.btn_load_robot = button(425, 50, 100, "Load robot")
        self.btn_tpl_basic = button(555, 50, 70, "Basic")
        self.btn_tpl_pid = button(630, 50, 70, "PID")
        self.btn_tpl_advanced = button(705, 50, 90, "Advanced")
        self.btn_verify = button(800, 50, 70, "Verify")
        self.btn_trace = button(900, 50, 130, "Start logging")
        self.btn_export = button(1035, 50, 110, "Export CSV")

        # Mount editor for the selected sensor, below the arena.
        row = self.viewport_rect.bottom + 15
        self.btn_prev_sensor = button(20, row, 40, "<")
        self.btn_next_sensor = button(65, row, 40, ">")
        self.mount_nudges: List[Tuple[pygame_gui.elements.UIButton, str, int]] = []
        x = 130
        for field_name, label in (("x", "X"), ("y", "Y"), ("angle", "Angle")):
            for steps, sign in ((-1, "-"), (1, "+")):
                self.mount_nudges.append((button(x, row, 70, f"{label} {sign}"), field_name, steps))
                x += 75
            x += 15

    def run(self) -> None:
        while self.running:
            dt = self.clock.tick(TARGET_FPS) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    self.running = False
                self._handle_paint_event(event)
                self._handle_ui_event(event)
                if self.code_editor.handle_event(event):
                    self.sim.set_program_text(self.code_editor.text())
                self.manager.process_events(event)
            self.manager.update(dt)
            if self.sim.is_running:
                self.runtime += dt
            self.scheduler.run_pending()
            self._draw()
        self.sim.stop()
        pygame.quit()

    # --- Events ----------------------------------------------------------
    def _handle_paint_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.viewport_rect.collidepoint(event.pos):
                self.painting = True
                local = self._to_arena(event.pos)
                self.track.paint(local[0], local[1], self.brush_mode)
                self._last_paint = local
        elif event.type == pygame.MOUSEMOTION and self.painting:
            local = self._to_arena(event.pos)
            points: List[Tuple[int, int]] = [self._last_paint, local] if self._last_paint else [local]
            self.track.paint_stroke(points, self.brush_mode)
            self._last_paint = local
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.painting = False
            self._last_paint = None

    def _handle_ui_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame_gui.UI_BUTTON_PRESSED:
            return
        element = event.ui_element
        if element == self.btn_start:
            self.sim.start()
            self.status_text = "Running"
        elif element == self.btn_stop:
            self.sim.stop()
            self.status_text = "Stopped"
        elif element == self.btn_reset:
            self.sim.stop()
            self.sim.reset()
            self.history.clear()
            self.runtime = 0.0
            self.status_text = "Reset"
        elif element == self.btn_draw:
            self.brush_mode = "draw"
        elif element == self.btn_erase:
            self.brush_mode = "erase"
        elif element == self.btn_clear:
            self.track.clear()
        elif element == self.btn_sample:
            self.track.draw_sample_track()
        elif element == self.btn_grid:
            self.renderer.options.show_grid = not self.renderer.options.show_grid
        elif element == self.btn_save_track:
            self._save_track()
        elif element == self.btn_load_track:
            self._load_track()
        elif element == self.btn_save_snap:
            self._save_snapshot()
        elif element == self.btn_load_snap:
            self._load_latest_snapshot()
        elif element == self.btn_basic_layout:
            self._apply_sensor_count(LAYOUT_PRESETS["basic"])
        elif element == self.btn_standard_layout:
            self._apply_sensor_count(LAYOUT_PRESETS["standard"])
        elif element == self.btn_fewer:
            self._apply_sensor_count(self.robot_cfg.sensor_count - 1)
        elif element == self.btn_more:
            self._apply_sensor_count(self.robot_cfg.sensor_count + 1)
        elif element == self.btn_save_robot:
            save_robot_config(self.data_path / "robot.json", self.robot_cfg)
            print(f"Saved robot to {self.data_path / 'robot.json'}")
        elif element == self.btn_load_robot:
            self._load_robot()
        elif element == self.btn_tpl_basic:
            self._load_template("basic")
        elif element == self.btn_tpl_pid:
            self._load_template("pid")
        elif element == self.btn_tpl_advanced:
            self._load_template("advanced")
        elif element == self.btn_verify:
            self.status_text = check_program(self.code_editor.text()).message
        elif element == self.btn_trace:
            self._toggle_logging()
        elif element == self.btn_export:
            self._export_logger()
        elif element == self.btn_prev_sensor:
            self._select_sensor(self.selected_sensor - 1)
        elif element == self.btn_next_sensor:
            self._select_sensor(self.selected_sensor + 1)
        else:
            for nudge_button, field_name, steps in self.mount_nudges:
                if element == nudge_button:
                    self._nudge_selected_mount(field_name, steps)
                    break

    def _apply_sensor_count(self, count: int) -> None:
        if not MIN_SENSORS <= count <= MAX_SENSORS:
            self.status_text = f"Sensor count must stay between {MIN_SENSORS} and {MAX_SENSORS}"
            return
        self.robot_cfg.set_sensor_count(count)
        self.sim.set_sensor_array_config(self.robot_cfg.to_mounts())
        self._select_sensor(self.selected_sensor)
        self.status_text = self.sim.last_warning or f"{count} sensors mounted"

    def _select_sensor(self, index: int) -> None:
        self.selected_sensor = max(0, min(self.robot_cfg.sensor_count - 1, index))

    def _nudge_selected_mount(self, field_name: str, steps: int) -> None:
        value = self.robot_cfg.nudge_mount(self.selected_sensor, field_name, steps)
        # Takes effect on the next tick, running or not.
        self.sim.set_sensor_array_config(self.robot_cfg.to_mounts())
        self.status_text = f"A{self.selected_sensor} {field_name} = {value:g}"

    def _load_template(self, name: str) -> None:
        text = get_program_template(name)
        self.code_editor.set_text(text)
        self.sim.set_program_text(text)
        self.status_text = f"Loaded {name} example"

    def _load_robot(self) -> None:
        try:
            self.robot_cfg = load_robot_config(self.data_path / "robot.json")
        except (FileNotFoundError, ValueError) as exc:
            self.status_text = str(exc)
            return
        self.sim.set_sensor_array_config(self.robot_cfg.to_mounts())
        self._select_sensor(self.selected_sensor)
        self.status_text = "Loaded robot.json"

    def _save_track(self) -> None:
        path = self.data_path / "track.png"
        save_track(path, self.track)
        print(f"Saved track to {path}")

    def _load_track(self) -> None:
        try:
            load_track(self.data_path / "track.png", self.track)
        except (FileNotFoundError, pygame.error) as exc:
            self.status_text = str(exc)
            return
        self.status_text = "Loaded track.png"

    def _save_snapshot(self) -> None:
        snap = self.sim.snapshot()
        snap_path = next_snapshot_path(self.data_path / "snapshots", self.sim.step_index)
        save_snapshot(snap_path, snap)
        print(f"Saved snapshot to {snap_path}")

    def _load_latest_snapshot(self) -> None:
        snap_path = latest_snapshot(self.data_path / "snapshots")
        if snap_path is None:
            self.status_text = "No snapshots found"
            return
        self.sim.stop()
        self.sim.apply_snapshot(load_snapshot(snap_path))
        self.code_editor.set_text(self.sim.program_text)
        print(f"Loaded snapshot {snap_path.name}")

    def _toggle_logging(self) -> None:
        enabled = not self.sim.trace_enabled
        self.sim.enable_trace_logging(enabled, clear_existing=enabled)
        self.btn_trace.set_text("Stop logging" if enabled else "Start logging")

    def _export_logger(self) -> None:
        trace = self.sim.export_trace_log()
        if not trace:
            self.status_text = "Nothing logged yet"
            return
        path = self.data_path / "logs" / f"log_{self.sim.step_index:06d}.csv"
        rows = save_telemetry_csv(path, trace)
        self.status_text = f"Exported {rows} rows to {path.name}"

    def _on_pose(self, pose) -> None:
        if self.sim.is_running:
            self.history.record(self.sim)

    def _to_arena(self, pos: Tuple[int, int]) -> Tuple[int, int]:
        return (pos[0] - self.viewport_rect.x, pos[1] - self.viewport_rect.y)

    # --- Drawing ---------------------------------------------------------
    def _draw(self) -> None:
        self.window_surface.fill((15, 23, 42))
        self.renderer.draw(
            self.window_surface,
            self.track,
            self.sim.pose,
            self.sim.sensor_points(),
            self.sim.sensor_readings,
            offset=self.viewport_rect.topleft,
        )
        pygame.draw.rect(self.window_surface, (148, 163, 184), self.viewport_rect, 1)
        self.code_editor.draw(self.window_surface)
        self._draw_telemetry()
        self.manager.draw_ui(self.window_surface)
        pygame.display.update()

    def _draw_telemetry(self) -> None:
        x = self.code_editor.rect.x
        y = self.code_editor.rect.bottom + 12
        pose = self.sim.pose
        readings = self.sim.sensor_readings
        effort = self.sim.last_motor_effort
        lines: List[Tuple[str, Tuple[int, int, int]]] = [
            (f"Status: {'Running' if self.sim.is_running else 'Stopped'}   Runtime: {self.runtime:.1f}s", (226, 232, 240)),
            (f"Position: ({pose.x:.1f}, {pose.y:.1f})   Heading: {pose.angle_deg:.1f} deg", (226, 232, 240)),
            (
                f"Motors: L(pin {self.robot_cfg.left_motor_pin})={effort.left}  "
                f"R(pin {self.robot_cfg.right_motor_pin})={effort.right}  [{self.sim.last_decision or '-'}]",
                (226, 232, 240),
            ),
            (f"Program lines: {len(self.code_editor.lines)}", (148, 163, 184)),
        ]
        for idx, value in enumerate(readings):
            status = classify_reading(value)
            mount = self.sim.sensor_mounts[idx] if idx < len(self.sim.sensor_mounts) else None
            where = f"({mount.offset_x:g}, {mount.offset_y:g}) @ {mount.mount_angle_deg:g} deg" if mount else ""
            lines.append(
                (
                    f"{'>' if idx == self.selected_sensor else ' '} A{idx}: {value:4d}  {reading_voltage(value):.2f}V  {STATUS_LABELS[status]:<11} {where}",
                    STATUS_COLORS[status],
                )
            )
        stats = ReadingStats.from_readings(readings)
        if stats is not None:
            lines.append(
                (
                    f"Min {stats.minimum}  Max {stats.maximum}  Avg {stats.mean:.0f}  Range {stats.span}",
                    (196, 181, 253),
                )
            )
        if has_extreme_readings(readings):
            lines.append(("Sensor alert: extreme values, check positioning/lighting", (250, 204, 21)))
        if len(self.history):
            counts = self.history.decision_counts()
            lines.append(
                (
                    f"Last {len(self.history)} ticks: line seen {self.history.line_coverage():.0%}  "
                    f"travelled {self.history.distance_travelled():.0f}px  "
                    + " ".join(f"{k}={v}" for k, v in sorted(counts.items())),
                    (148, 163, 184),
                )
            )
        if self.sim.last_warning:
            lines.append((f"Warning: {self.sim.last_warning}", (250, 204, 21)))
        lines.append((self.status_text, (148, 163, 184)))
        line_height = self.font.get_height() + 4
        for i, (text, color) in enumerate(lines):
            self.window_surface.blit(self.font.render(text, True, color), (x, y + i * line_height))


def main():
    app = ArenaApp()
    app.run()


if __name__ == "__main__":
    main()
