"""Command line entry point: boots the simulated machine and its system."""

from __future__ import annotations

import argparse
import sys

from simso.contr import Controller
from simso.escalonador import (
    RoundRobinScheduler,
    ShortestJobScheduler,
    SimpleScheduler,
)
from simso.so import OperatingSystem, load_program
from simso.tela import Screen

__all__ = ["DEFAULT_PROGRAMS", "SCHEDULERS", "main"]

DEFAULT_PROGRAMS = (
    "init.maq",
    "grande_cpu.maq",
    "grande_es.maq",
    "peq_cpu.maq",
    "peq_es.maq",
)

SCHEDULERS = {
    "simples": SimpleScheduler,
    "circular": RoundRobinScheduler,
    "curto": ShortestJobScheduler,
}


def main(argv: list[str] | None = None) -> int:
    """Load the programs, start the screen and run until the system stops."""
    parser = argparse.ArgumentParser(
        prog="simso", description="Run programs on the simulated machine."
    )
    parser.add_argument(
        "programs",
        nargs="*",
        default=list(DEFAULT_PROGRAMS),
        help="program files; the first one is started",
    )
    parser.add_argument(
        "-e",
        "--escalonador",
        choices=sorted(SCHEDULERS),
        default="circular",
        help="scheduling policy",
    )
    args = parser.parse_args(argv)

    try:
        programs = [load_program(path) for path in args.programs]
    except (OSError, ValueError) as exc:
        print(f"Não foi possível carregar os programas: {exc}", file=sys.stderr)
        return 1

    screen = Screen()
    screen.start()
    try:
        controller = Controller(screen)
        system = OperatingSystem(controller, programs, SCHEDULERS[args.escalonador])
        controller.attach_os(system)
        controller.run()
    finally:
        screen.finish()
    return 0


if __name__ == "__main__":
    sys.exit(main())