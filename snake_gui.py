# Tkinter host for the tile-snake core: settings menu, key bindings, timer, rendering.
from __future__ import annotations

import tkinter as tk
from tkinter import messagebox

# Support both package imports and running this file directly.
try:
    from .game_logic import (
        MAX_TICK_MS,
        MIN_TICK_MS,
        InvalidUsageError,
        SessionConfig,
        SnakeSession,
    )
    from .utils import body_curve
except ImportError:
    from game_logic import (
        MAX_TICK_MS,
        MIN_TICK_MS,
        InvalidUsageError,
        SessionConfig,
        SnakeSession,
    )
    from utils import body_curve


MIN_CELL_SIZE = 16
MAX_CELL_SIZE = 64

KEY_DIRECTIONS = {
    "<Up>": "up",
    "<Down>": "down",
    "<Left>": "left",
    "<Right>": "right",
    "w": "up",
    "s": "down",
    "a": "left",
    "d": "right",
}


class SnakeApp:
    """Tkinter presentation layer for SnakeSession."""
    BG = "#101418"
    BOARD_BG = "#1c2229"
    SIDEBAR_BG = "#0f1720"
    GRID_COLOR = "#293340"
    SNAKE_HEAD = "#45d483"
    SNAKE_BODY = "#1fb86b"
    FOOD_COLOR = "#ff5c74"
    TEXT_PRIMARY = "#e6eef7"
    TEXT_MUTED = "#95a4b8"
    ACCENT = "#42c4ff"
    BORDER_COLOR = "#7f8b99"

    MODE_PRESETS = {"Easy (key press)": "easy", "Hard (timer)": "hard"}
    SIZE_PRESETS = {"Small (8x9)": "small", "Medium (12x14)": "medium", "Large (16x16)": "large"}

    def __init__(self, root: tk.Tk) -> None:
        self.root = root
        self.root.title("Tile Snake")
        self.root.configure(bg=self.BG)

        self.config = SessionConfig()
        self.cell_size = 40
        self.session: SnakeSession | None = None
        self.previous_score = 0                  # carried across sessions by the host
        self.after_id: str | None = None         # Tkinter timer id for automatic mode

        self._build_layout()
        self._bind_keys()
        self.draw()

    def _build_layout(self) -> None:
        """Create board canvas + right sidebar."""
        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)

        container = tk.Frame(self.root, bg=self.BG)
        container.grid(row=0, column=0, sticky="nsew", padx=16, pady=16)
        container.columnconfigure(0, weight=1)
        container.rowconfigure(0, weight=1)

        self.canvas = tk.Canvas(container, bg=self.BOARD_BG, highlightthickness=0, bd=0)
        self.canvas.grid(row=0, column=0, sticky="nsew", padx=(0, 16))

        self.sidebar = tk.Frame(container, bg=self.SIDEBAR_BG, width=320)
        self.sidebar.grid(row=0, column=1, sticky="ns")
        self.sidebar.grid_propagate(False)

        tk.Label(
            self.sidebar,
            text="Snake Game",
            fg=self.TEXT_PRIMARY,
            bg=self.SIDEBAR_BG,
            font=("Helvetica", 18, "bold"),
        ).pack(anchor="w", padx=16, pady=(16, 12))

        self._build_status()
        self._build_controls()
        self._build_buttons()

    def _build_status(self) -> None:
        frame = tk.LabelFrame(
            self.sidebar,
            text="Status",
            fg=self.TEXT_PRIMARY,
            bg=self.SIDEBAR_BG,
            bd=1,
            font=("Helvetica", 11, "bold"),
            labelanchor="n",
        )
        frame.pack(fill="x", padx=16, pady=(0, 14))

        self.score_var = tk.StringVar(value="Your score: 0")
        self.previous_var = tk.StringVar(value="Your previous score: 0")
        self.state_var = tk.StringVar(value="State: Ready")

        for var in (self.score_var, self.previous_var, self.state_var):
            tk.Label(
                frame,
                textvariable=var,
                fg=self.TEXT_PRIMARY,
                bg=self.SIDEBAR_BG,
                font=("Helvetica", 12),
                anchor="w",
            ).pack(fill="x", padx=10, pady=4)

    def _build_controls(self) -> None:
        frame = tk.LabelFrame(
            self.sidebar,
            text="Settings",
            fg=self.TEXT_PRIMARY,
            bg=self.SIDEBAR_BG,
            bd=1,
            font=("Helvetica", 11, "bold"),
            labelanchor="n",
        )
        frame.pack(fill="x", padx=16, pady=(0, 14))

        self.mode_var = tk.StringVar(value="Easy (key press)")
        self.size_var = tk.StringVar(value="Small (8x9)")
        self.tick_var = tk.StringVar(value=str(self.config.tick_ms))
        self.cell_size_var = tk.StringVar(value=str(self.cell_size))

        self._add_labeled_dropdown(frame, "Game mode", self.mode_var, list(self.MODE_PRESETS))
        self._add_labeled_dropdown(frame, "Map size", self.size_var, list(self.SIZE_PRESETS))
        self._add_labeled_spinbox(frame, "Tick (ms)", self.tick_var)
        self._add_labeled_spinbox(frame, "Cell size", self.cell_size_var)

    def _add_labeled_spinbox(self, parent: tk.Widget, label: str, var: tk.StringVar) -> None:
        row = tk.Frame(parent, bg=self.SIDEBAR_BG)
        row.pack(fill="x", padx=10, pady=4)
        tk.Label(row, text=label, fg=self.TEXT_PRIMARY, bg=self.SIDEBAR_BG, font=("Helvetica", 11)).pack(side="left")
        tk.Spinbox(
            row,
            from_=0,
            to=9999,
            textvariable=var,
            width=8,
            justify="center",
            bd=0,
            relief="flat",
            bg="#e8eef5",
            fg="#1a2734",
            font=("Helvetica", 11),
        ).pack(side="right")

    def _add_labeled_dropdown(self, parent: tk.Widget, label: str, var: tk.StringVar, options: list[str]) -> None:
        row = tk.Frame(parent, bg=self.SIDEBAR_BG)
        row.pack(fill="x", padx=10, pady=4)
        tk.Label(row, text=label, fg=self.TEXT_PRIMARY, bg=self.SIDEBAR_BG, font=("Helvetica", 11)).pack(side="left")
        dropdown = tk.OptionMenu(row, var, *options)
        dropdown.config(
            width=14,
            bg="#e8eef5",
            fg="#1a2734",
            activebackground="#dce7f1",
            bd=0,
            highlightthickness=0,
            font=("Helvetica", 11),
        )
        dropdown.pack(side="right")

    def _build_buttons(self) -> None:
        frame = tk.Frame(self.sidebar, bg=self.SIDEBAR_BG)
        frame.pack(fill="x", padx=16, pady=(0, 10))

        self._button(frame, "Play", self.start_game).pack(fill="x", pady=4)
        self._button(frame, "Go to menu", self.quit_game).pack(fill="x", pady=4)

        tk.Label(
            self.sidebar,
            text="Move: Arrow keys / WASD",
            fg=self.TEXT_MUTED,
            bg=self.SIDEBAR_BG,
            font=("Helvetica", 11),
        ).pack(anchor="w", padx=16, pady=(4, 10))

    def _button(self, parent: tk.Widget, text: str, command) -> tk.Button:
        return tk.Button(
            parent,
            text=text,
            command=command,
            fg="#09141f",
            bg=self.ACCENT,
            activebackground="#74d8ff",
            activeforeground="#09141f",
            bd=0,
            relief="flat",
            font=("Helvetica", 12, "bold"),
            padx=12,
            pady=9,
            cursor="hand2",
        )

    def _bind_keys(self) -> None:
        for key, direction in KEY_DIRECTIONS.items():
            self.root.bind(key, lambda _e, d=direction: self.on_direction(d))

    def _parse_int(self, raw: str, low: int, high: int, label: str) -> int:
        try:
            value = int(raw)
        except ValueError:
            raise ValueError(f"{label} must be an integer.")
        if not (low <= value <= high):
            raise ValueError(f"{label} must be between {low} and {high}.")
        return value

    def _read_settings(self) -> SessionConfig:
        """Validate sidebar values into a SessionConfig; raises ValueError."""
        tick_ms = self._parse_int(self.tick_var.get(), MIN_TICK_MS, MAX_TICK_MS, "Tick")
        self.cell_size = self._parse_int(self.cell_size_var.get(), MIN_CELL_SIZE, MAX_CELL_SIZE, "Cell size")
        config = SessionConfig(
            size=self.SIZE_PRESETS[self.size_var.get()],
            mode=self.MODE_PRESETS[self.mode_var.get()],
            tick_ms=tick_ms,
        )
        config.validate()
        return config

    def _cancel_loop(self) -> None:
        if self.after_id is not None:
            self.root.after_cancel(self.after_id)
            self.after_id = None

    def start_game(self) -> None:
        """Start a fresh session from the current settings."""
        try:
            self.config = self._read_settings()
        except (ValueError, KeyError) as exc:
            messagebox.showerror("Invalid Setting", str(exc))
            return

        self._cancel_loop()
        if self.session is not None:
            self.session.close()
        self.session = SnakeSession(self.config)
        self.state_var.set("State: Running")
        self.draw()
        if self.config.automatic:
            self.after_id = self.root.after(self.config.tick_ms, self.tick)

    def quit_game(self) -> None:
        self._cancel_loop()
        if self.session is not None:
            self.session.close()
            self.session = None
        self.state_var.set("State: Ready")
        self.draw()

    def on_direction(self, direction: str) -> None:
        """Key press: manual mode moves now, automatic mode steers the next tick."""
        if self.session is None or self.session.is_over:
            return
        try:
            self.session.set_direction(direction)
        except InvalidUsageError:
            return
        self._after_step()

    def tick(self) -> None:
        """Timer callback for automatic mode; reschedules itself until the game ends."""
        self.after_id = None
        if self.session is None or self.session.is_over:
            return
        self.session.tick()
        self._after_step()
        if self.session is not None and not self.session.is_over:
            self.after_id = self.root.after(self.config.tick_ms, self.tick)

    def _after_step(self) -> None:
        self.draw()
        if self.session is not None and self.session.is_over:
            self._finish()

    def _finish(self) -> None:
        """Freeze the board, report the final score, and return to the menu."""
        self._cancel_loop()
        session = self.session
        text = "You won!" if session.terminal == "won" else "You lost!"
        self.state_var.set(f"State: {text}")
        messagebox.showinfo("Game over", f"{text}\nFinal score: {session.score}")
        self.previous_score = session.score
        self.previous_var.set(f"Your previous score: {self.previous_score}")
        self.quit_game()

    def draw(self) -> None:
        """Render tiles, food, snake, and the live score."""
        self.canvas.delete("all")
        if self.session is None:
            self.score_var.set("Your score: 0")
            return

        tiles = self.session.snapshot()
        row_size = self.session.grid.row_size
        rows = self.session.grid.row_count
        cell = self.cell_size
        self.canvas.configure(width=row_size * cell, height=rows * cell)

        for tile in tiles:
            col = (tile.id - 1) % row_size
            row = tile.row - 1
            x1, y1 = col * cell, row * cell
            x2, y2 = x1 + cell, y1 + cell
            self.canvas.create_rectangle(x1, y1, x2, y2, outline=self.GRID_COLOR)

            if tile.has_food:
                self.canvas.create_oval(x1 + 6, y1 + 6, x2 - 6, y2 - 6, fill=self.FOOD_COLOR, outline="")
            elif tile.occupied_by_snake:
                color = self.SNAKE_HEAD if tile.has_head else self.SNAKE_BODY
                if body_curve(tiles, tile.id):
                    self.canvas.create_oval(x1 + 2, y1 + 2, x2 - 2, y2 - 2, fill=color, outline="")
                else:
                    self.canvas.create_rectangle(x1 + 2, y1 + 2, x2 - 2, y2 - 2, fill=color, outline="")

        self.canvas.create_rectangle(1, 1, row_size * cell - 1, rows * cell - 1, outline=self.BORDER_COLOR, width=2)
        self.score_var.set(f"Your score: {self.session.score}")


def run_player_gui() -> None:
    """Launch the Tkinter snake window."""
    root = tk.Tk()
    SnakeApp(root)
    root.mainloop()


if __name__ == "__main__":
    run_player_gui()
