#!/usr/bin/env python3
"""
Time Compass - workday, workweek, semester and life progress at a glance,
plus a focus countdown with sound and desktop notifications.
"""

import logging
import tkinter as tk
from datetime import datetime
from tkinter import messagebox

from time_compass.alerts import DesktopAlerts
from time_compass.config import APP_NAME, AppConfig, ConfigManager
from time_compass.focus_timer import FocusTimerLogic, Phase, format_mmss
from time_compass.logger import setup_logger
from time_compass.progress import calculate_all, clamp_percentage
from time_compass.quotes import random_quote
from time_compass.settings import SettingsError, SettingsStore
from time_compass.ticker import Ticker

logger = logging.getLogger('time_compass.app')

FONT = 'Arial'

THEME = {
    "bg": "#0f172a",
    "card": "#1e293b",
    "border": "#334155",
    "track": "#0b1120",
    "fg": "#f1f5f9",
    "muted": "#94a3b8",
    "dim": "#64748b",
    "accent": "#60a5fa",
    "start": "#059669",
    "pause": "#d97706",
    "button": "#334155",
}

# color_class hint -> bar color
COLOR_CLASSES = {
    "emerald": "#10b981",
    "blue": "#3b82f6",
    "purple": "#8b5cf6",
    "red": "#ef4444",
    "slate": "#334155",
}

WEEKDAYS = [(1, "Mon"), (2, "Tue"), (3, "Wed"), (4, "Thu"), (5, "Fri"), (6, "Sat"), (0, "Sun")]


# ===================== PROGRESS CARD =====================

class ProgressBarView:
    """Card rendering one TimeProgress"""
    BAR_WIDTH = 460
    BAR_HEIGHT = 14

    def __init__(self, parent):
        card = THEME["card"]
        self.frame = tk.Frame(parent, bg=card, padx=14, pady=10,
                              highlightthickness=1, highlightbackground=THEME["border"])

        head = tk.Frame(self.frame, bg=card)
        head.pack(fill=tk.X)
        self.title_lbl = tk.Label(head, font=(FONT, 12, 'bold'), bg=card, fg=THEME["fg"])
        self.title_lbl.pack(side=tk.LEFT)
        self.pct_lbl = tk.Label(head, font=(FONT, 16, 'bold'), bg=card, fg=THEME["fg"])
        self.pct_lbl.pack(side=tk.RIGHT)

        self.canvas = tk.Canvas(self.frame, width=self.BAR_WIDTH, height=self.BAR_HEIGHT,
                                bg=THEME["track"], highlightthickness=0)
        self.canvas.pack(pady=6)
        self.fill = self.canvas.create_rectangle(0, 0, 0, self.BAR_HEIGHT, width=0)

        self.sub_lbl = tk.Label(self.frame, font=(FONT, 9), bg=card, fg=THEME["muted"],
                                wraplength=self.BAR_WIDTH, justify='left', anchor='w')
        self.sub_lbl.pack(fill=tk.X)

    def pack(self, **kwargs):
        self.frame.pack(**kwargs)

    def render(self, progress):
        shown = clamp_percentage(progress.percentage)
        if progress.is_active:
            color = COLOR_CLASSES.get(progress.color_class, THEME["accent"])
            fg, muted = THEME["fg"], THEME["muted"]
        else:
            color = THEME["dim"]
            fg = muted = THEME["dim"]

        self.title_lbl.config(text=progress.label, fg=fg)
        self.pct_lbl.config(text=f"{shown:.1f}%", fg=fg)
        self.sub_lbl.config(text=progress.subtext, fg=muted)
        self.canvas.coords(self.fill, 0, 0, self.BAR_WIDTH * shown / 100, self.BAR_HEIGHT)
        self.canvas.itemconfig(self.fill, fill=color)


# ===================== SETTINGS DIALOG =====================

class SettingsDialog:
    """Modal editor for UserSettings; cannot be dismissed before onboarding"""

    def __init__(self, app):
        self.app = app
        self.store = app.store
        s = self.store.settings

        self.win = tk.Toplevel(app.root)
        self.win.title("Settings")
        self.win.configure(bg=THEME["card"], padx=18, pady=14)
        self.win.resizable(False, False)
        self.win.transient(app.root)
        self.win.protocol("WM_DELETE_WINDOW", self._on_close)

        self.vars = {}
        row = self._section("Daily work", 0)
        row = self._field("work_start_time", "Start (HH:MM)", s.work_start_time, row)
        row = self._field("work_end_time", "End (HH:MM)", s.work_end_time, row)

        row = self._section("Work days", row)
        days_f = tk.Frame(self.win, bg=THEME["card"])
        days_f.grid(row=row, column=0, columnspan=2, sticky='w')
        self.day_vars = {}
        for value, name in WEEKDAYS:
            var = tk.BooleanVar(value=value in s.work_days)
            tk.Checkbutton(days_f, text=name, variable=var, bg=THEME["card"], fg=THEME["fg"],
                           selectcolor=THEME["track"], activebackground=THEME["card"],
                           font=(FONT, 9)).pack(side=tk.LEFT)
            self.day_vars[value] = var
        row += 1

        row = self._section("Semesters", row)
        row = self._field("semester1_start", "Semester 1 start (MM-DD)", s.semester1_start, row)
        row = self._field("semester1_end", "Semester 1 end (MM-DD)", s.semester1_end, row)
        row = self._field("semester2_start", "Semester 2 start (MM-DD)", s.semester2_start, row)
        row = self._field("semester2_end", "Semester 2 end (MM-DD)", s.semester2_end, row)

        row = self._section("Life", row)
        row = self._field("birth_date", "Birth date (YYYY-MM-DD)", s.birth_date, row)
        row = self._field("life_expectancy", "Life expectancy (years)", s.life_expectancy, row)

        row = self._section("Focus", row)
        row = self._field("focus_duration", "Focus duration (min)", s.focus_duration, row)

        btn_f = tk.Frame(self.win, bg=THEME["card"])
        btn_f.grid(row=row, column=0, columnspan=2, pady=(12, 0), sticky='e')
        if s.has_onboarded:
            tk.Button(btn_f, text="Cancel", command=self.close, font=(FONT, 10),
                      relief='flat', padx=12, pady=3, bg=THEME["button"], fg=THEME["fg"], takefocus=0).pack(side=tk.LEFT, padx=4)
        tk.Button(btn_f, text="Save", command=self._save, font=(FONT, 10, 'bold'),
                  relief='flat', padx=12, pady=3, bg=THEME["accent"], fg=THEME["bg"]).pack(side=tk.LEFT)

        self.win.bind('<Return>', lambda e: self._save())
        self.win.grab_set()

    def _section(self, title, row):
        tk.Label(self.win, text=title, font=(FONT, 11, 'bold'), bg=THEME["card"],
                 fg=THEME["accent"]).grid(row=row, column=0, columnspan=2, sticky='w', pady=(8, 2))
        return row + 1

    def _field(self, name, label, value, row):
        tk.Label(self.win, text=label, font=(FONT, 9), bg=THEME["card"],
                 fg=THEME["muted"]).grid(row=row, column=0, sticky='w', padx=(0, 10))
        var = tk.StringVar(value=str(value))
        tk.Entry(self.win, textvariable=var, width=12, font=(FONT, 10), bg=THEME["track"],
                 fg=THEME["fg"], insertbackground=THEME["fg"], relief='flat').grid(row=row, column=1, sticky='w', pady=1)
        self.vars[name] = var
        return row + 1

    def _save(self):
        changes = {name: var.get().strip() for name, var in self.vars.items()}
        changes["work_days"] = [day for day, var in self.day_vars.items() if var.get()]
        changes["has_onboarded"] = True
        try:
            self.store.update(**changes)
        except SettingsError as e:
            messagebox.showerror("Invalid settings", str(e), parent=self.win)
            return
        self.close()

    def _on_close(self):
        if self.store.settings.has_onboarded:
            self.close()

    def close(self):
        self.win.grab_release()
        self.win.destroy()
        self.app.settings_dialog = None


# ===================== MAIN APP =====================

class TimeCompass:
    def __init__(self, root, app_config=None, store=None, alerts=None, quote=None):
        self.root = root
        self.root.title(APP_NAME)
        self.app_config = app_config or AppConfig.from_env()

        # Managers
        if store is None:
            store = SettingsStore(ConfigManager(config_dir=self.app_config.data_dir))
        self.store = store
        self.alerts = alerts or DesktopAlerts()
        self.quote = quote or random_quote()

        self.clock_ticker = Ticker(root, self._on_clock_tick, self.app_config.tick_ms, name="clock")
        self.focus_ticker = Ticker(root, self._on_focus_tick, self.app_config.tick_ms, name="focus")
        self.settings_dialog = None
        self._closed = False

        # Setup
        self.root.configure(bg=THEME["bg"])
        self.root.resizable(False, False)
        self._setup_ui()

        # The timer reports into the focus widgets, so it comes after them
        self.timer = FocusTimerLogic(
            self.store.settings.focus_duration,
            alerts=self.alerts,
            on_update=self.on_timer_update,
            on_finish=self.on_timer_finish,
        )
        self.store.subscribe(self._on_settings_changed)
        self._setup_keybindings()
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)

        self._refresh()
        self._update_focus_ui()
        self.clock_ticker.start()

        if not self.store.settings.has_onboarded:
            self.root.after_idle(self.open_settings)

    def _setup_ui(self):
        main = tk.Frame(self.root, bg=THEME["bg"])
        main.pack(fill=tk.BOTH, expand=True, padx=16, pady=14)

        # Header
        top = tk.Frame(main, bg=THEME["bg"])
        top.pack(fill=tk.X, pady=(0, 10))
        title_f = tk.Frame(top, bg=THEME["bg"])
        title_f.pack(side=tk.LEFT)
        tk.Label(title_f, text=f"🧭 {APP_NAME}", font=(FONT, 18, 'bold'),
                 bg=THEME["bg"], fg=THEME["fg"]).pack(anchor='w')
        self.clock_lbl = tk.Label(title_f, font=('Courier', 10), bg=THEME["bg"], fg=THEME["muted"])
        self.clock_lbl.pack(anchor='w')
        tk.Button(top, text="⚙", command=self.open_settings, font=(FONT, 14), relief='flat',
                  bg=THEME["bg"], fg=THEME["muted"], activebackground=THEME["card"],
                  bd=0).pack(side=tk.RIGHT)

        # Day / week / semester
        self.day_view = ProgressBarView(main)
        self.week_view = ProgressBarView(main)
        self.semester_view = ProgressBarView(main)
        for view in (self.day_view, self.week_view, self.semester_view):
            view.pack(fill=tk.X, pady=4)

        self._create_focus_view(main)

        # Life comes last
        self.life_view = ProgressBarView(main)
        self.life_view.pack(fill=tk.X, pady=4)

        # Footer
        footer = tk.Frame(main, bg=THEME["bg"])
        footer.pack(fill=tk.X, pady=(12, 0))
        tk.Label(footer, text=f"“{self.quote.text}”", font=(FONT, 10, 'italic'),
                 bg=THEME["bg"], fg=THEME["muted"], wraplength=460).pack()
        tk.Label(footer, text=f"— {self.quote.author}", font=(FONT, 8),
                 bg=THEME["bg"], fg=THEME["dim"]).pack()

    def _create_focus_view(self, parent):
        card = THEME["card"]
        f = tk.Frame(parent, bg=card, padx=14, pady=10,
                     highlightthickness=1, highlightbackground=THEME["border"])
        f.pack(fill=tk.X, pady=10)

        self.focus_strip = tk.Canvas(f, width=ProgressBarView.BAR_WIDTH, height=4,
                                     bg=THEME["border"], highlightthickness=0)
        self.focus_strip.pack(fill=tk.X)
        self.focus_fill = self.focus_strip.create_rectangle(0, 0, 0, 4, width=0, fill=COLOR_CLASSES["emerald"])

        tk.Label(f, text="Focus Timer", font=(FONT, 13, 'bold'), bg=card,
                 fg=THEME["fg"]).pack(pady=(8, 0))
        self.focus_lbl = tk.Label(f, text="00:00", font=('Courier', 40, 'bold'), bg=card, fg=THEME["fg"])
        self.focus_lbl.pack()
        self.focus_status = tk.Label(f, font=(FONT, 10), bg=card, fg=THEME["muted"])
        self.focus_status.pack(pady=(0, 6))

        btn_f = tk.Frame(f, bg=card)
        btn_f.pack()
        self.focus_start_btn = tk.Button(btn_f, command=self.toggle_focus, font=(FONT, 10, 'bold'),
                                         relief='flat', padx=14, pady=4, fg=THEME["fg"], takefocus=0)
        self.focus_start_btn.pack(side=tk.LEFT, padx=4)
        tk.Button(btn_f, text="⟲ Reset", command=self.reset_focus, font=(FONT, 10, 'bold'),
                  relief='flat', padx=14, pady=4, bg=THEME["button"],
                  fg=THEME["fg"], takefocus=0).pack(side=tk.LEFT, padx=4)

    def _setup_keybindings(self):
        """Keyboard shortcuts"""
        self.root.bind('<space>', lambda e: self.toggle_focus())
        self.root.bind('r', lambda e: self.reset_focus())
        self.root.bind('R', lambda e: self.reset_focus())
        self.root.bind('s', lambda e: self.open_settings())
        self.root.bind('S', lambda e: self.open_settings())

    # ----- clock source -----

    def _on_clock_tick(self):
        self._refresh()

    def _refresh(self):
        now = datetime.now()
        self.clock_lbl.config(text=now.strftime('%A, %B %d, %Y  %H:%M:%S'))

        day, week, semester, life = calculate_all(self.store.settings, now)
        self.day_view.render(day)
        self.week_view.render(week)
        self.semester_view.render(semester)
        self.life_view.render(life)

    # ----- focus timer -----

    def toggle_focus(self):
        self.timer.toggle()
        self._sync_focus_ticker()

    def reset_focus(self):
        self.timer.reset()
        self._sync_focus_ticker()

    def _on_focus_tick(self):
        self.timer.tick()
        self._sync_focus_ticker()

    def _sync_focus_ticker(self):
        if self.timer.running:
            self.focus_ticker.start()
        else:
            self.focus_ticker.cancel()

    def on_timer_update(self, remaining):
        self._update_focus_ui()

    def on_timer_finish(self):
        logger.info("Focus session complete")
        self.root.deiconify()
        self.root.lift()
        self._flash_focus_label(6)

    def _flash_focus_label(self, times):
        if times <= 0 or self.timer.phase != Phase.FINISHED:
            self.focus_lbl.config(fg=THEME["fg"])
            return
        color = COLOR_CLASSES["emerald"] if times % 2 else THEME["fg"]
        self.focus_lbl.config(fg=color)
        self.root.after(400, lambda: self._flash_focus_label(times - 1))

    def _update_focus_ui(self):
        self.focus_lbl.config(text=format_mmss(self.timer.remaining))
        self.focus_status.config(text=self.timer.status_text())
        width = ProgressBarView.BAR_WIDTH * clamp_percentage(self.timer.progress()) / 100
        self.focus_strip.coords(self.focus_fill, 0, 0, width, 4)

        if self.timer.running:
            self.focus_start_btn.config(text="⏸ Pause", bg=THEME["pause"], state='normal')
        else:
            state = 'disabled' if self.timer.remaining == 0 else 'normal'
            self.focus_start_btn.config(text="▶ Start focus", bg=THEME["start"], state=state)

    # ----- settings -----

    def open_settings(self):
        if self.settings_dialog is None:
            self.settings_dialog = SettingsDialog(self)
        else:
            self.settings_dialog.win.lift()

    def _on_settings_changed(self, settings):
        self.timer.set_duration(settings.focus_duration)
        self._refresh()
        self._update_focus_ui()

    # ----- teardown -----

    def shutdown(self):
        """Cancel both tickers and release audio; safe to call twice"""
        if self._closed:
            return
        self._closed = True
        self.clock_ticker.cancel()
        self.focus_ticker.cancel()
        close = getattr(self.alerts, 'close', None)
        if close:
            close()

    def on_close(self):
        self.shutdown()
        self.root.destroy()


def main():
    app_config = AppConfig.from_env()
    setup_logger(
        level=app_config.log_level.value,
        log_file=app_config.log_file if app_config.log_to_file else None,
    )
    logger.info(f"Starting {APP_NAME}, data in {app_config.data_dir}")

    root = tk.Tk()
    app = TimeCompass(root, app_config)
    try:
        root.mainloop()
    finally:
        app.shutdown()


if __name__ == "__main__":
    main()
