import logging

import pytest

from calculator_engine import (
    ERROR_TEXT,
    CalculatorEngine,
    Key,
    KeyCategory,
    SessionState,
    apply_key,
    resolve_then_arm,
)
from errors import ArithmeticDomainError, ProgrammingError


def digit(d):
    return Key(d, KeyCategory.NUMBER)


DECIMAL = Key("decimal", KeyCategory.NUMBER)
ADD = Key("add", KeyCategory.BINARY_OPERATION)
SUBTRACT = Key("subtract", KeyCategory.BINARY_OPERATION)
MULTIPLY = Key("multiply", KeyCategory.BINARY_OPERATION)
DIVIDE = Key("divide", KeyCategory.BINARY_OPERATION)
EQUALS = Key("equals", KeyCategory.EQUALS)
CLEAR = Key("clear", KeyCategory.CLEAR)
SQRT = Key("sqrt", KeyCategory.UNARY_OPERATION)
PERCENT = Key("percent", KeyCategory.UNARY_OPERATION)
NEGATE = Key("negate", KeyCategory.UNARY_OPERATION)
TAN = Key("tan", KeyCategory.UNARY_OPERATION)
TRIG_UNIT = Key("trigUnit", KeyCategory.FUNCTION)
MODE = Key("mode", KeyCategory.FUNCTION)


def keys(text):
    """'5+3=' -> secuencia de Key; letras para operaciones unarias."""
    mapping = {
        ".": DECIMAL, "+": ADD, "-": SUBTRACT, "*": MULTIPLY, "/": DIVIDE,
        "=": EQUALS, "C": CLEAR, "r": SQRT, "%": PERCENT, "n": NEGATE,
    }
    return [digit(ch) if ch.isdigit() else mapping[ch] for ch in text]


def run(text, state=None):
    state = state or SessionState()
    for key in keys(text):
        state = apply_key(state, key)
    return state


# ── Estado inicial ───────────────────────────────────────────────

def test_initial_state():
    state = SessionState()
    assert state.display_value == "0"
    assert state.current_output is None
    assert state.current_operation is None
    assert state.reset_on_next_digit is True
    assert state.mode == "scientific"
    assert state.trig_unit == "deg"
    assert state.error is None


# ── Dígitos y punto decimal ──────────────────────────────────────

def test_digits_append():
    state = run("123")
    assert state.display_value == "123"
    assert state.reset_on_next_digit is False


def test_leading_zeroes_are_stripped():
    assert run("005").display_value == "5"
    assert run("0.5").display_value == "0.5"
    assert run("00").display_value == "0"


def test_decimal_key_is_idempotent():
    assert run("..").display_value == "0."
    assert run("1.2.3").display_value == "1.23"


def test_first_digit_replaces_initial_zero():
    assert run("7").display_value == "7"


def test_unknown_number_key():
    with pytest.raises(ProgrammingError):
        apply_key(SessionState(), Key("eleven", KeyCategory.NUMBER))


# ── Operaciones binarias ─────────────────────────────────────────

def test_basic_addition():
    state = run("5+3=")
    assert state.display_value == "8"
    assert state.current_operation is None
    assert state.current_output == "8"
    assert state.reset_on_next_digit is True


def test_operand_order_for_subtract_and_divide():
    assert run("9-4=").display_value == "5"
    assert run("4-9=").display_value == "-5"
    assert run("8/2=").display_value == "4"
    assert run("1/4=").display_value == "0.25"


def test_operator_arms_pending_operation():
    state = run("3+")
    assert state.current_operation == "add"
    assert state.current_output == "3"
    assert state.display_value == "3"
    assert state.reset_on_next_digit is True


def test_next_digit_starts_second_operand():
    state = run("3+4")
    assert state.display_value == "4"
    assert state.current_output == "3"


def test_chained_operators_resolve_pending_first():
    state = run("3+4*")
    assert state.display_value == "7"
    assert state.current_output == "7"
    assert state.current_operation == "multiply"

    assert run("3+4*5=").display_value == "35"


def test_resolve_then_arm_rejects_unknown_operator():
    with pytest.raises(ProgrammingError):
        resolve_then_arm(SessionState(), "modulo", 20)


def test_equals_without_pending_operation_is_a_noop():
    state = run("42")
    assert apply_key(state, EQUALS) is state


def test_repeated_equals_does_not_repeat_operation():
    assert run("2+3==").display_value == "5"


def test_new_number_after_equals():
    state = run("2+3=7")
    assert state.display_value == "7"
    assert run("2+3=7+1=").display_value == "8"


def test_decimal_arithmetic_through_keys():
    assert run("0.1+0.2=").display_value == "0.3"
    assert run("1/3=").display_value == "0." + "3" * 20


def test_division_by_zero_raises():
    with pytest.raises(ArithmeticDomainError):
        run("5/0=")


def test_division_by_zero_does_not_mutate_input_state():
    state = run("5/0")
    with pytest.raises(ArithmeticDomainError):
        apply_key(state, EQUALS)
    assert state.display_value == "0"
    assert state.current_operation == "divide"


# ── Operaciones unarias ──────────────────────────────────────────

def test_unary_keeps_pending_operation():
    state = run("9+1r")
    assert state.display_value == "1"
    assert state.current_operation == "add"
    assert state.current_output == "9"
    assert run("9+1r=").display_value == "10"
    assert run("5+9r=").display_value == "8"


def test_percent_divides_by_hundred():
    assert run("50%").display_value == "0.5"
    assert run("5%").display_value == "0.05"


def test_unary_result_can_be_extended_with_digits():
    # sqrt no reinicia la entrada
    assert run("4r5").display_value == "25"


def test_digit_after_exponent_result_starts_new_number():
    state = run("1%%%%")
    assert state.display_value == "1e-8"
    assert apply_key(state, DECIMAL).display_value == "0."


def test_negative_numbers():
    assert run("5n").display_value == "-5"
    assert run("5n3").display_value == "-53"
    with pytest.raises(ArithmeticDomainError):
        run("5nr")


def test_trig_follows_trig_unit():
    state = run("45")
    assert apply_key(state, TAN).display_value == "1"

    state = apply_key(state, TRIG_UNIT)
    assert state.trig_unit == "rad"
    assert apply_key(state, TAN).display_value != "1"


def test_unknown_unary_operation():
    with pytest.raises(ProgrammingError):
        apply_key(SessionState(), Key("frobnicate", KeyCategory.UNARY_OPERATION))


# ── Borrar y funciones ───────────────────────────────────────────

def test_clear_restores_initial_values():
    state = replace_mode_and_unit(run("12+34"))
    cleared = apply_key(state, CLEAR)
    assert cleared.display_value == "0"
    assert cleared.current_output is None
    assert cleared.current_operation is None
    assert cleared.reset_on_next_digit is True
    assert cleared.mode == "basic"
    assert cleared.trig_unit == "rad"


def replace_mode_and_unit(state):
    return apply_key(apply_key(state, MODE), TRIG_UNIT)


def test_function_keys_toggle():
    state = SessionState()
    state = apply_key(state, TRIG_UNIT)
    assert state.trig_unit == "rad"
    state = apply_key(state, TRIG_UNIT)
    assert state.trig_unit == "deg"

    state = apply_key(state, MODE)
    assert state.mode == "basic"
    state = apply_key(state, MODE)
    assert state.mode == "scientific"


def test_unknown_function_is_a_noop():
    state = run("12")
    assert apply_key(state, Key("memoryRecall", KeyCategory.FUNCTION)) is state


def test_unknown_category_is_a_programming_error():
    with pytest.raises(ProgrammingError):
        Key("5", "keypress")


def test_category_strings_are_accepted():
    assert Key("5", "number").category is KeyCategory.NUMBER


# ── CalculatorEngine ─────────────────────────────────────────────

def test_engine_press():
    engine = CalculatorEngine()
    engine.press_all(keys("5+3"))
    assert engine.current_operation == "add"
    engine.press(EQUALS)
    assert engine.display_value == "8"
    assert engine.display_text == "8"
    assert engine.current_operation is None
    assert engine.mode == "scientific"
    assert engine.trig_unit == "deg"


def test_engine_error_is_sticky_until_clear(caplog):
    engine = CalculatorEngine()
    with caplog.at_level(logging.WARNING, logger="calculator_engine"):
        engine.press_all(keys("5/0="))

    assert engine.error
    assert engine.display_text == ERROR_TEXT
    assert engine.display_value == "0"
    assert "Error aritmético" in caplog.text

    engine.press_all(keys("7+1="))
    engine.press(TRIG_UNIT)
    assert engine.display_text == ERROR_TEXT
    assert engine.trig_unit == "deg"

    engine.press(CLEAR)
    assert engine.error is None
    assert engine.display_text == "0"
    engine.press_all(keys("7+1="))
    assert engine.display_value == "8"


def test_engine_unary_domain_error():
    engine = CalculatorEngine()
    engine.press_all(keys("4nr"))
    assert engine.display_text == ERROR_TEXT
    assert engine.display_value == "-4"


@pytest.mark.parametrize("last", ["factorial", "sin"])
def test_engine_huge_values_show_error(last):
    engine = CalculatorEngine()
    engine.press_all(keys("100000000000000000000"))
    engine.press(Key("tenPower", KeyCategory.UNARY_OPERATION))
    engine.press(Key(last, KeyCategory.UNARY_OPERATION))
    assert engine.error
    assert engine.display_text == ERROR_TEXT
    assert engine.display_value == "100000000000000000000"


def test_engine_huge_factorial_shows_error():
    engine = CalculatorEngine()
    engine.press_all(keys("99999999999999999999"))
    engine.press(Key("factorial", KeyCategory.UNARY_OPERATION))
    assert engine.display_text == ERROR_TEXT


def test_engine_propagates_programming_errors():
    engine = CalculatorEngine()
    with pytest.raises(ProgrammingError):
        engine.press(Key("modulo", KeyCategory.BINARY_OPERATION))


def test_engine_configuration():
    engine = CalculatorEngine(digits=5, mode="basic", trig_unit="rad")
    assert engine.mode == "basic"
    assert engine.trig_unit == "rad"
    engine.press_all(keys("1/3="))
    assert engine.display_value == "0.33333"

    engine.press(MODE)
    engine.reset()
    assert engine.state == SessionState(mode="basic", trig_unit="rad")


@pytest.mark.parametrize("kwargs", [{"mode": "graphing"}, {"trig_unit": "grad"}])
def test_engine_rejects_bad_configuration(kwargs):
    with pytest.raises(ValueError):
        CalculatorEngine(**kwargs)
