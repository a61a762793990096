"""Punto de entrada de la calculadora."""

import argparse
import logging
import tkinter as tk

from calculator_engine import MODES, TRIG_UNITS, CalculatorEngine
from calculator_ui import CalculatorApp


DISPLAY_DIGITS = 20
START_MODE = "scientific"
START_TRIG_UNIT = "deg"
LOG_LEVEL = "WARNING"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Calculadora de teclado")
    parser.add_argument("--digits", type=int, default=DISPLAY_DIGITS,
                        help="dígitos significativos mostrados")
    parser.add_argument("--mode", choices=MODES, default=START_MODE)
    parser.add_argument("--trig-unit", choices=TRIG_UNITS, default=START_TRIG_UNIT)
    parser.add_argument("--log-level", default=LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def build_engine(args: argparse.Namespace) -> CalculatorEngine:
    return CalculatorEngine(
        digits=args.digits,
        mode=args.mode,
        trig_unit=args.trig_unit,
    )


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    root = tk.Tk()
    root.minsize(380, 520)
    CalculatorApp(root, engine=build_engine(args))
    root.mainloop()


if __name__ == "__main__":
    main()
