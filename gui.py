"""
Desktop host window: shows the sparkline strip and lets the user change the
ping target.
"""

import queue
import tkinter as tk

import ttkbootstrap as tb
from PIL import ImageTk

from config import save_config
from constants import CONFIG_FILE, FONT_SIZE, REFRESH_GUI_MS
from log_setup import get_logger

log = get_logger("gui")

ZOOM = 4
FONT_INFOTXT = ("Consolas", 10, "bold")


class MonitorWindow:
    def __init__(self, app, config_path=CONFIG_FILE, themename="darkly"):
        self.app = app
        self.config_path = config_path
        self.data_queue = queue.Queue()
        self.root = tb.Window(themename=themename)
        self.root.title("CRT Sparkline Monitor")
        self.root.resizable(False, False)
        self._photo = None

        self.graph_lbl = tb.Label(self.root)
        self.graph_lbl.grid(row=0, column=0, columnspan=3, padx=6, pady=6)

        tb.Label(self.root, text="Ping target:", font=FONT_INFOTXT).grid(row=1, column=0, sticky="w", padx=(6, 2))
        self.target_var = tk.StringVar(value=app.config.ping_target)
        entry = tb.Entry(self.root, textvariable=self.target_var, width=24)
        entry.grid(row=1, column=1, sticky="ew", pady=4)
        entry.bind("<Return>", lambda _e: self.apply_target())
        tb.Button(self.root, text="Apply", bootstyle="success-outline",
                  command=self.apply_target).grid(row=1, column=2, padx=6)

        self.status_lbl = tb.Label(self.root, text="", font=("Consolas", FONT_SIZE + 1))
        self.status_lbl.grid(row=2, column=0, columnspan=2, sticky="w", padx=6, pady=(0, 6))
        tb.Button(self.root, text="Quit", bootstyle="danger-outline",
                  command=self.on_close).grid(row=2, column=2, padx=6, pady=(0, 6))

        self.root.protocol("WM_DELETE_WINDOW", self.on_close)
        # Scheduler thread -> queue -> Tk main loop
        app.add_refresh_listener(self.data_queue.put)

    def apply_target(self):
        before = self.app.config
        config = self.app.change_ping_target(self.target_var.get())
        self.target_var.set(config.ping_target)
        if config is not before:
            save_config(config, self.config_path)
            self.status_lbl.config(text=f"Pinging {config.ping_target}")

    def poll_queue(self):
        snapshot = None
        try:
            while True:
                snapshot = self.data_queue.get_nowait()
        except queue.Empty:
            pass
        if snapshot is not None:
            self.redraw(snapshot)
        self.root.after(REFRESH_GUI_MS, self.poll_queue)

    def redraw(self, snapshot):
        image = self.app.render(snapshot)
        image = image.resize((image.width * ZOOM, image.height * ZOOM))
        self._photo = ImageTk.PhotoImage(image)
        self.graph_lbl.configure(image=self._photo)
        if not self.app.probe.is_running:
            self.status_lbl.config(text=f"Ping to {self.app.config.ping_target} is not running")

    def on_close(self):
        """Clean shutdown of all components."""
        self.app.stop()
        self.root.destroy()

    def run(self):
        self.app.start()
        self.redraw(self.app.store.snapshot_all())
        self.root.after(REFRESH_GUI_MS, self.poll_queue)
        log.debug("Entering Tk main loop")
        self.root.mainloop()
