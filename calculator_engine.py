"""
Motor de la calculadora: máquina de estados dirigida por teclas.

Este módulo interpreta pulsaciones de tecla (dígitos, operaciones
binarias y unarias, igual, borrar y funciones) y produce el nuevo
estado de la sesión. La lógica vive en `apply_key`, una transición
pura; `CalculatorEngine` solo conserva el estado entre pulsaciones.

Contrato de interfaz:
    - CalculatorEngine.press(key: Key) -> None
    - display_value, current_operation, mode, trig_unit: solo lectura
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from enum import Enum

from decimal_arithmetic import BINARY_OPERATIONS, DEFAULT_DIGITS, DecimalArithmetic
from errors import ArithmeticDomainError, ProgrammingError

logger = logging.getLogger(__name__)

DECIMAL_KEY_ID = "decimal"
DIGIT_KEY_IDS = tuple("0123456789")
ERROR_TEXT = "Error"

MODES = ("basic", "scientific")
TRIG_UNITS = ("deg", "rad")

_LEADING_ZEROES_RE = re.compile(r"^0+(?!\.)")
# Texto al que se le pueden seguir añadiendo dígitos
_ENTRY_RE = re.compile(r"^-?\d*\.?\d*$")


class KeyCategory(str, Enum):
    NUMBER = "number"
    BINARY_OPERATION = "binaryOperation"
    UNARY_OPERATION = "unaryOperation"
    EQUALS = "equals"
    CLEAR = "clear"
    FUNCTION = "function"


@dataclass(frozen=True)
class Key:
    """Pulsación de tecla. `label` es el texto que muestra la interfaz."""

    id: str
    category: KeyCategory
    label: str | None = None

    def __post_init__(self):
        try:
            object.__setattr__(self, "category", KeyCategory(self.category))
        except ValueError as exc:
            raise ProgrammingError(f"Categoría de tecla desconocida: {self.category!r}") from exc

    @property
    def text(self) -> str:
        return self.label if self.label is not None else self.id


@dataclass(frozen=True)
class SessionState:
    display_value: str = "0"
    current_output: str | None = None
    current_operation: str | None = None
    reset_on_next_digit: bool = True
    mode: str = "scientific"
    trig_unit: str = "deg"
    error: str | None = None

    @property
    def pending(self) -> bool:
        return self.current_operation is not None


# ── Manejadores por categoría ────────────────────────────────────


def handle_number(state: SessionState, key: Key, digits: int) -> SessionState:
    """Añade un dígito o el punto decimal al valor mostrado."""
    display = state.display_value
    # Un resultado en notación exponencial ("1e-8") no admite más dígitos:
    # "1e-8." no es un literal válido, así que se empieza un número nuevo
    if state.reset_on_next_digit or not _ENTRY_RE.fullmatch(display):
        display = ""

    if key.id == DECIMAL_KEY_ID:
        # Un segundo punto no tiene efecto
        if "." not in display:
            display = display + "." if display else "0."
    elif key.id in DIGIT_KEY_IDS:
        display += key.id
    else:
        raise ProgrammingError(f"Tecla numérica desconocida: {key.id!r}")

    display = _LEADING_ZEROES_RE.sub("", display, count=1) or "0"
    return replace(state, display_value=display, reset_on_next_digit=False)


def resolve_pending(state: SessionState, digits: int) -> SessionState:
    """Resuelve la operación binaria pendiente, si la hay.

    El primer operando almacenado es siempre el lado izquierdo.

    Raises:
        ArithmeticDomainError: división entre cero.
    """
    if not state.pending:
        return state

    arithmetic = DecimalArithmetic(digits=digits, angle_mode=state.trig_unit)
    first = arithmetic.parse(state.current_output)
    output = arithmetic.binary(state.current_operation, first, state.display_value)
    text = arithmetic.to_string(output)
    return replace(
        state,
        current_operation=None,
        current_output=text,
        display_value=text,
        reset_on_next_digit=True,
    )


def resolve_then_arm(state: SessionState, operation: str, digits: int) -> SessionState:
    """Resuelve lo pendiente y deja `operation` armada como una sola transición."""
    if operation not in BINARY_OPERATIONS:
        raise ProgrammingError(f"Operación binaria desconocida: {operation!r}")

    resolved = resolve_pending(state, digits)
    return replace(
        resolved,
        current_operation=operation,
        current_output=resolved.display_value,
        reset_on_next_digit=True,
    )


def handle_binary_operation(state: SessionState, key: Key, digits: int) -> SessionState:
    return resolve_then_arm(state, key.id, digits)


def handle_unary_operation(state: SessionState, key: Key, digits: int) -> SessionState:
    """Aplica la operación al valor mostrado sin tocar lo pendiente."""
    arithmetic = DecimalArithmetic(digits=digits, angle_mode=state.trig_unit)
    operand = arithmetic.parse(state.display_value)

    if key.id == "percent":
        output = arithmetic.binary("divide", operand, "100")
    elif arithmetic.supports_unary(key.id):
        output = arithmetic.unary(key.id, operand)
    else:
        raise ProgrammingError(f"Operación unaria desconocida: {key.id!r}")

    return replace(state, display_value=arithmetic.to_string(output))


def handle_equals(state: SessionState, key: Key, digits: int) -> SessionState:
    return resolve_pending(state, digits)


def handle_clear(state: SessionState, key: Key, digits: int) -> SessionState:
    return replace(
        state,
        display_value="0",
        current_output=None,
        current_operation=None,
        reset_on_next_digit=True,
        error=None,
    )


def handle_function(state: SessionState, key: Key, digits: int) -> SessionState:
    if key.id == "trigUnit":
        return replace(state, trig_unit="rad" if state.trig_unit == "deg" else "deg")
    if key.id == "mode":
        return replace(state, mode="basic" if state.mode == "scientific" else "scientific")

    logger.debug("Función sin manejador: %s", key.id)
    return state


HANDLERS = {
    KeyCategory.NUMBER: handle_number,
    KeyCategory.BINARY_OPERATION: handle_binary_operation,
    KeyCategory.UNARY_OPERATION: handle_unary_operation,
    KeyCategory.EQUALS: handle_equals,
    KeyCategory.CLEAR: handle_clear,
    KeyCategory.FUNCTION: handle_function,
}


def apply_key(state: SessionState, key: Key, digits: int = DEFAULT_DIGITS) -> SessionState:
    """Transición pura: devuelve el estado que resulta de pulsar `key`.

    `state` no se modifica; ante un error el llamador conserva el anterior.

    Raises:
        ArithmeticDomainError: operando fuera de dominio.
        ProgrammingError: categoría o identificador desconocido.
    """
    handler = HANDLERS.get(key.category)
    if handler is None:
        raise ProgrammingError(f"Sin manejador para la categoría {key.category!r}")
    return handler(state, key, digits)


class CalculatorEngine:
    """Conserva el estado de la sesión y aplica cada pulsación en orden.

    Tras un ArithmeticDomainError el error queda fijo: toda tecla
    salvo C se ignora hasta borrar.
    """

    def __init__(self, digits: int = DEFAULT_DIGITS, mode: str = "scientific",
                 trig_unit: str = "deg"):
        if mode not in MODES:
            raise ValueError(f"Modo desconocido: {mode}")
        if trig_unit not in TRIG_UNITS:
            raise ValueError("La unidad debe ser 'deg' o 'rad'")
        self._digits = digits
        self._initial = SessionState(mode=mode, trig_unit=trig_unit)
        self._state = self._initial

    # ── Lectura de estado ────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def display_value(self) -> str:
        return self._state.display_value

    @property
    def display_text(self) -> str:
        return ERROR_TEXT if self._state.error else self._state.display_value

    @property
    def current_operation(self) -> str | None:
        return self._state.current_operation

    @property
    def mode(self) -> str:
        return self._state.mode

    @property
    def trig_unit(self) -> str:
        return self._state.trig_unit

    @property
    def error(self) -> str | None:
        return self._state.error

    # ── Entrada ──────────────────────────────────────────────────

    def press(self, key: Key) -> None:
        if self._state.error and key.category is not KeyCategory.CLEAR:
            logger.debug("Tecla ignorada en estado de error: %s", key.id)
            return

        logger.debug("Tecla %s (%s)", key.id, key.category.value)
        try:
            self._state = apply_key(self._state, key, self._digits)
        except ArithmeticDomainError as exc:
            logger.warning("Error aritmético con %s: %s", key.id, exc)
            self._state = replace(self._state, error=str(exc) or type(exc).__name__)

    def press_all(self, keys) -> None:
        for key in keys:
            self.press(key)

    def reset(self) -> None:
        self._state = self._initial
