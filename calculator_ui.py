"""
Interfaz gráfica de la calculadora.

Usa tkinter. La ventana solo traduce botones y teclas a objetos Key,
los entrega al motor y vuelve a pintar a partir de su estado.
"""

import logging
import tkinter as tk
from tkinter import font as tkfont

from calculator_engine import CalculatorEngine, Key, KeyCategory
from keypads import key_for_keysym, keys_for_mode

logger = logging.getLogger(__name__)


# ═════════════════════════════════════════════════════════════════
#  Aplicación principal
# ═════════════════════════════════════════════════════════════════

class CalculatorApp:
    """Ventana principal de la calculadora."""

    # ── Paleta de colores ────────────────────────────────────────
    C = {
        "bg":         "#1E1E2E",
        "display_bg": "#181825",
        "num":        "#313244",
        "num_fg":     "#CDD6F4",
        "op":         "#F38BA8",
        "op_fg":      "#1E1E2E",
        "func":       "#45475A",
        "func_fg":    "#CDD6F4",
        "special":    "#585B70",
        "special_fg": "#CDD6F4",
        "equals":     "#89B4FA",
        "equals_fg":  "#1E1E2E",
        "toggle_on":  "#A6E3A1",
        "result_fg":  "#A6E3A1",
        "error_fg":   "#F38BA8",
    }

    # tipo de color por categoría de tecla
    KIND = {
        KeyCategory.NUMBER: "num",
        KeyCategory.BINARY_OPERATION: "op",
        KeyCategory.UNARY_OPERATION: "func",
        KeyCategory.EQUALS: "equals",
        KeyCategory.CLEAR: "special",
        KeyCategory.FUNCTION: "special",
    }

    def __init__(self, root: tk.Tk, engine: CalculatorEngine | None = None):
        self.root = root
        self.root.title("Calculadora")
        self.root.configure(bg=self.C["bg"])
        self.root.resizable(False, False)

        self.engine = engine if engine is not None else CalculatorEngine()
        self._op_buttons: dict[str, tk.Button] = {}
        self._keypad_frame: tk.Frame | None = None
        self._rendered_mode: str | None = None

        self._init_fonts()
        self._create_display()
        self._bind_keyboard()
        self._render()

    # ── Fuentes ──────────────────────────────────────────────────

    def _init_fonts(self):
        self._f_result = tkfont.Font(family="Consolas", size=22, weight="bold")
        self._f_btn    = tkfont.Font(family="Segoe UI", size=15)
        self._f_func   = tkfont.Font(family="Segoe UI", size=12)
        self._f_small  = tkfont.Font(family="Segoe UI", size=11)

    # ── Pantalla ─────────────────────────────────────────────────

    def _create_display(self):
        frame = tk.Frame(self.root, bg=self.C["display_bg"], padx=12, pady=8)
        frame.pack(fill="x", padx=6, pady=(6, 2))

        self.unit_label = tk.Label(
            frame, font=self._f_small, bg=self.C["display_bg"],
            fg=self.C["toggle_on"], anchor="w",
        )
        self.unit_label.pack(fill="x")

        self.result_var = tk.StringVar(value="0")
        self.result_label = tk.Label(
            frame, textvariable=self.result_var, font=self._f_result,
            bg=self.C["display_bg"], fg=self.C["result_fg"], anchor="e",
        )
        self.result_label.pack(fill="x", pady=(2, 4))

    # ── Teclado ──────────────────────────────────────────────────

    def _create_keypad(self, mode: str):
        if self._keypad_frame is not None:
            self._keypad_frame.destroy()
        self._op_buttons.clear()

        frame = tk.Frame(self.root, bg=self.C["bg"])
        frame.pack(fill="both", expand=True, padx=6, pady=(2, 6))
        self._keypad_frame = frame

        rows = keys_for_mode(mode)
        max_cols = max(len(row) for row in rows)
        for c in range(max_cols):
            frame.columnconfigure(c, weight=1, uniform="key")

        for r, row_def in enumerate(rows):
            # Repartir columnas con colspan para filas cortas
            spans = self._compute_spans(len(row_def), max_cols)
            col_pos = 0
            for idx, key in enumerate(row_def):
                kind = self.KIND[key.category]
                font = self._f_func if kind == "func" else self._f_btn
                btn = tk.Button(
                    frame, text=key.text, font=font,
                    bg=self.C[kind], fg=self.C[f"{kind}_fg"],
                    activebackground=self.C["special"], relief="flat",
                    command=lambda k=key: self._on_key(k),
                )
                btn.grid(row=r, column=col_pos, columnspan=spans[idx],
                         sticky="nsew", padx=2, pady=2, ipady=8)
                if key.category is KeyCategory.BINARY_OPERATION:
                    self._op_buttons[key.id] = btn
                col_pos += spans[idx]

        for r in range(len(rows)):
            frame.rowconfigure(r, weight=1)

        self._rendered_mode = mode

    @staticmethod
    def _compute_spans(cols_in_row: int, max_cols: int) -> list[int]:
        """Reparte max_cols entre cols_in_row botones."""
        base, extra = divmod(max_cols, cols_in_row)
        spans = [base] * cols_in_row
        # Asignar columnas extra al último botón (generalmente '=')
        spans[-1] += extra
        return spans

    # ── Atajos de teclado ────────────────────────────────────────

    def _bind_keyboard(self):
        self.root.bind("<Key>", self._on_keyboard)

    def _on_keyboard(self, event):
        key = key_for_keysym(event.keysym) or key_for_keysym(event.char)
        if key is not None:
            self._on_key(key)

    # ── Acciones ─────────────────────────────────────────────────

    def _on_key(self, key: Key):
        self.engine.press(key)
        self._render()

    def _render(self):
        engine = self.engine
        if engine.mode != self._rendered_mode:
            self._create_keypad(engine.mode)

        self.result_var.set(engine.display_text)
        self.result_label.config(
            fg=self.C["error_fg"] if engine.error else self.C["result_fg"]
        )
        self.unit_label.config(text=engine.trig_unit.upper())

        # Resaltar la operación pendiente
        for op_id, btn in self._op_buttons.items():
            if op_id == engine.current_operation:
                btn.config(bg=self.C["toggle_on"])
            else:
                btn.config(bg=self.C["op"])
