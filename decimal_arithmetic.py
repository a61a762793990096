"""Aritmética decimal de precisión arbitraria basada en mpmath.

Contrato de interfaz:
    - parse(text: str) -> mpf
    - to_string(value: mpf) -> str
    - binary(operation: str, first, second) -> mpf
    - unary(operation: str, operand) -> mpf
    - angle_mode: propiedad 'rad' | 'deg'
"""

from __future__ import annotations

import re

from mpmath import mp

from errors import ArithmeticDomainError


DEFAULT_DIGITS = 20

BINARY_OPERATIONS = ("add", "subtract", "multiply", "divide")


class DecimalArithmetic:
    """Proveedor de operaciones decimales con dígitos de guarda."""

    # Notación fija solo para exponentes en [-7, 21)
    MIN_FIXED_EXPONENT = -7
    MAX_FIXED_EXPONENT = 21
    # Rango admitido: |exponente decimal| <= MAX_DECIMAL_EXPONENT
    MAX_DECIMAL_EXPONENT = 100000
    FACTORIAL_EXACT_LIMIT = 5000
    FACTORIAL_ARGUMENT_LIMIT = 10**15

    _LITERAL_RE = re.compile(
        r"^[+-]?(?P<mantissa>\d+\.?\d*|\.\d+)(?:[eE](?P<exp>[+-]?\d+))?$"
    )

    def __init__(self, digits: int = DEFAULT_DIGITS, angle_mode: str = "deg"):
        if digits < 1:
            raise ValueError("Se requiere al menos un dígito de precisión")
        self._digits = digits
        self._internal_dps = max(40, digits * 2 + 10)
        # log2(10) ~ 3.33: magnitud binaria máxima
        self._max_magnitude = self.MAX_DECIMAL_EXPONENT * 10 // 3 + 4
        self.angle_mode = angle_mode
        self._namespace = self.build_namespace()

    # ── Propiedades ──────────────────────────────────────────────

    @property
    def digits(self) -> int:
        return self._digits

    @property
    def angle_mode(self) -> str:
        return self._angle_mode

    @angle_mode.setter
    def angle_mode(self, mode: str):
        if mode not in ("rad", "deg"):
            raise ValueError("El modo debe ser 'rad' o 'deg'")
        self._angle_mode = mode

    # ── Conversión de cadenas ────────────────────────────────────

    def parse(self, text):
        """Convierte un literal decimal en mpf con la precisión interna.

        Raises:
            ValueError: el texto no es un literal decimal finito.
            ArithmeticDomainError: el número excede el rango admitido.
        """
        if not isinstance(text, str):
            with mp.workdps(self._internal_dps):
                return self._checked(mp.mpf(text))

        literal = text.strip()
        match = self._LITERAL_RE.fullmatch(literal)
        if not match:
            raise ValueError(f"Literal decimal inválido: {text!r}")
        # Evita que mpmath construya potencias de diez enormes
        exp = int(match.group("exp") or 0)
        if abs(exp) > self.MAX_DECIMAL_EXPONENT + len(match.group("mantissa")):
            raise ArithmeticDomainError("Número fuera de rango")

        literal = re.sub(r"\.(?=[eE]|$)", "", literal)
        with mp.workdps(self._internal_dps):
            return self._checked(mp.mpf(literal))

    def to_string(self, value) -> str:
        """Forma canónica: sin ceros sobrantes y redondeada a `digits`."""
        if not mp.isfinite(value):
            raise ArithmeticDomainError("Resultado no finito")
        if value == 0:
            return "0"

        with mp.workdps(self._digits):
            rounded = +value
            if mp.floor(rounded) == rounded and abs(rounded) < mp.mpf(10) ** self._digits:
                return str(int(rounded))

        text = mp.nstr(
            rounded,
            n=self._digits,
            min_fixed=self.MIN_FIXED_EXPONENT,
            max_fixed=self.MAX_FIXED_EXPONENT,
        )
        text = re.sub(r"\.0(?=e|$)", "", text)
        return text

    # ── Operaciones ──────────────────────────────────────────────

    def supports_binary(self, operation: str) -> bool:
        return operation in BINARY_OPERATIONS

    def supports_unary(self, operation: str) -> bool:
        return operation in self._namespace

    def binary(self, operation: str, first, second):
        """Aplica `first <operation> second`; `second` puede ser una cadena."""
        if not self.supports_binary(operation):
            raise ValueError(f"Operación binaria desconocida: {operation}")

        with mp.workdps(self._internal_dps):
            a = self.parse(first)
            b = self.parse(second)
            try:
                if operation == "add":
                    result = a + b
                elif operation == "subtract":
                    result = a - b
                elif operation == "multiply":
                    result = a * b
                else:
                    if b == 0:
                        raise ArithmeticDomainError("División entre cero")
                    result = a / b
            except (OverflowError, MemoryError) as exc:
                raise ArithmeticDomainError("Resultado fuera de rango") from exc
            return self._checked(result)

    def unary(self, operation: str, operand):
        fn = self._namespace.get(operation)
        if fn is None:
            raise ValueError(f"Operación unaria desconocida: {operation}")

        with mp.workdps(self._internal_dps):
            x = self.parse(operand)
            try:
                result = fn(x)
            except ZeroDivisionError as exc:
                raise ArithmeticDomainError("División entre cero") from exc
            except ValueError as exc:
                raise ArithmeticDomainError(str(exc)) from exc
            except (OverflowError, MemoryError) as exc:
                raise ArithmeticDomainError("Resultado fuera de rango") from exc
            return self._checked(result)

    def build_namespace(self) -> dict:
        return {
            "sqrt": self._sqrt,
            "cbrt": self._cbrt,
            "square": lambda x: x * x,
            "cube": lambda x: x * x * x,
            "reciprocal": self._reciprocal,
            "negate": lambda x: -x,
            "abs": abs,
            "sin": self._trig("sin"),
            "cos": self._trig("cos"),
            "tan": self._trig("tan"),
            "asin": self._inv_trig(mp.asin),
            "acos": self._inv_trig(mp.acos),
            "atan": self._inv_trig(mp.atan, bounded=False),
            "ln": self._log(mp.log),
            "log": self._log(mp.log10),
            "exp": self._exp,
            "tenPower": self._ten_power,
            "factorial": self._factorial,
        }

    # ── Funciones con dominio restringido ────────────────────────

    def _checked(self, result):
        if isinstance(result, mp.mpc):
            if result.imag != 0:
                raise ArithmeticDomainError("Resultado complejo")
            result = result.real
        if not mp.isfinite(result):
            raise ArithmeticDomainError("Resultado no finito")
        if result != 0 and abs(mp.mag(result)) > self._max_magnitude:
            raise ArithmeticDomainError("Resultado fuera de rango")
        return result

    @staticmethod
    def _sqrt(x):
        if x < 0:
            raise ValueError("Raíz cuadrada de un número negativo")
        return mp.sqrt(x)

    @staticmethod
    def _cbrt(x):
        if x < 0:
            return -mp.cbrt(-x)
        return mp.cbrt(x)

    @staticmethod
    def _reciprocal(x):
        if x == 0:
            raise ZeroDivisionError("División entre cero")
        return 1 / x

    @staticmethod
    def _log(fn):
        def wrapped(x):
            if x <= 0:
                raise ValueError("Logaritmo de un número no positivo")
            return fn(x)

        return wrapped

    def _exp(self, x):
        if abs(x) > self.MAX_DECIMAL_EXPONENT * mp.ln10:
            raise ValueError("Resultado fuera de rango")
        return mp.exp(x)

    def _ten_power(self, x):
        if abs(x) > self.MAX_DECIMAL_EXPONENT:
            raise ValueError("Resultado fuera de rango")
        return mp.power(10, x)

    # Valores exactos en múltiplos de 90° para (sin, cos, tan)
    _QUADRANT_VALUES = {
        "sin": (0, 1, 0, -1),
        "cos": (1, 0, -1, 0),
        "tan": (0, None, 0, None),
    }

    def _trig(self, name: str):
        fn = getattr(mp, name)
        exact = self._QUADRANT_VALUES[name]

        def wrapped(x):
            # Más allá de la precisión interna el ángulo ya no tiene fracción útil
            if abs(x) >= mp.mpf(10) ** self._internal_dps:
                raise ValueError("Ángulo fuera de rango")
            if self._angle_mode == "deg":
                if mp.fmod(x, 90) == 0:
                    value = exact[int(mp.floor(x / 90)) % 4]
                    if value is None:
                        raise ValueError(f"{name} no está definida en {mp.nstr(x, 15)}°")
                    return mp.mpf(value)
                x = mp.radians(x)
            return fn(x)

        return wrapped

    def _inv_trig(self, fn, bounded: bool = True):
        def wrapped(x):
            if bounded and abs(x) > 1:
                raise ValueError("Argumento fuera de [-1, 1]")
            result = fn(x)
            return mp.degrees(result) if self._angle_mode == "deg" else result

        return wrapped

    @classmethod
    def _factorial(cls, x):
        if mp.floor(x) != x or x < 0:
            raise ValueError("factorial requiere entero no negativo")
        if x > cls.FACTORIAL_ARGUMENT_LIMIT:
            raise ValueError("factorial fuera de rango")

        n = int(x)
        if n <= cls.FACTORIAL_EXACT_LIMIT:
            return mp.factorial(n)

        return mp.exp(mp.loggamma(n + 1))
