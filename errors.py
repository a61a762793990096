"""Excepciones de la calculadora."""


class CalculatorError(Exception):
    """Raíz de los errores de la calculadora."""


class ArithmeticDomainError(CalculatorError, ArithmeticError):
    """Operando fuera del dominio de la operación (p. ej. división entre cero).

    Es una condición del usuario: el motor la convierte en un estado de
    error visible que solo se abandona con la tecla C.
    """


class ProgrammingError(CalculatorError):
    """Categoría o identificador de tecla desconocido.

    Indica un desajuste entre la interfaz y el motor; nunca se recupera.
    """
