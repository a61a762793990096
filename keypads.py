"""Teclados de la calculadora para cada modo y atajos de teclado."""

from __future__ import annotations

from calculator_engine import Key, KeyCategory, MODES

_N = KeyCategory.NUMBER
_B = KeyCategory.BINARY_OPERATION
_U = KeyCategory.UNARY_OPERATION


def _digit(d: str) -> Key:
    return Key(d, _N)


DECIMAL = Key("decimal", _N, ".")
ADD = Key("add", _B, "+")
SUBTRACT = Key("subtract", _B, "−")
MULTIPLY = Key("multiply", _B, "×")
DIVIDE = Key("divide", _B, "÷")
EQUALS = Key("equals", KeyCategory.EQUALS, "=")
CLEAR = Key("clear", KeyCategory.CLEAR, "C")
PERCENT = Key("percent", _U, "%")
NEGATE = Key("negate", _U, "±")
TRIG_UNIT = Key("trigUnit", KeyCategory.FUNCTION, "DEG/RAD")
MODE = Key("mode", KeyCategory.FUNCTION, "MODO")

# ── Definiciones del teclado ─────────────────────────────────────
#  Cada modo es una lista de filas; cada fila una lista de Key

_BASIC_ROWS = [
    [CLEAR, NEGATE, PERCENT, DIVIDE],
    [_digit("7"), _digit("8"), _digit("9"), MULTIPLY],
    [_digit("4"), _digit("5"), _digit("6"), SUBTRACT],
    [_digit("1"), _digit("2"), _digit("3"), ADD],
    [_digit("0"), DECIMAL, EQUALS],
]

_SCIENCE_ROWS = [
    [MODE, TRIG_UNIT, Key("factorial", _U, "x!"), Key("reciprocal", _U, "1/x"),
     Key("abs", _U, "|x|")],
    [Key("sin", _U, "sin"), Key("cos", _U, "cos"), Key("tan", _U, "tan"),
     Key("ln", _U, "ln"), Key("log", _U, "log")],
    [Key("asin", _U, "sin⁻¹"), Key("acos", _U, "cos⁻¹"),
     Key("atan", _U, "tan⁻¹"), Key("exp", _U, "eˣ"),
     Key("tenPower", _U, "10ˣ")],
    [Key("sqrt", _U, "√"), Key("cbrt", _U, "∛"),
     Key("square", _U, "x²"), Key("cube", _U, "x³")],
]

KEYPADS = {
    "basic": [[MODE]] + _BASIC_ROWS,
    "scientific": _SCIENCE_ROWS + _BASIC_ROWS,
}

# ── Atajos de teclado (keysym de tkinter -> tecla) ──────────────

KEYBOARD_SHORTCUTS = {
    **{d: _digit(d) for d in "0123456789"},
    "period": DECIMAL,
    "comma": DECIMAL,
    "plus": ADD,
    "minus": SUBTRACT,
    "asterisk": MULTIPLY,
    "slash": DIVIDE,
    "percent": PERCENT,
    "equal": EQUALS,
    "Return": EQUALS,
    "KP_Enter": EQUALS,
    "Escape": CLEAR,
    "Delete": CLEAR,
    **{f"KP_{d}": _digit(d) for d in "0123456789"},
    "KP_Decimal": DECIMAL,
    "KP_Add": ADD,
    "KP_Subtract": SUBTRACT,
    "KP_Multiply": MULTIPLY,
    "KP_Divide": DIVIDE,
}


def keys_for_mode(mode: str) -> list[list[Key]]:
    if mode not in MODES:
        raise ValueError(f"Modo desconocido: {mode}")
    return KEYPADS[mode]


def key_for_keysym(keysym: str) -> Key | None:
    return KEYBOARD_SHORTCUTS.get(keysym)
