"""Assembler for the simulated CPU's instruction set."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import Iterable

from simso.instr import Opcode, arg_count, opcode_for

__all__ = [
    "AssemblyError",
    "Assembler",
    "assemble",
    "format_memory",
    "main",
    "MEM_SIZE",
    "SYMBOL_LIMIT",
    "REFERENCE_LIMIT",
]

MEM_SIZE = 1000
SYMBOL_LIMIT = 1000
REFERENCE_LIMIT = 1000

_NUMBER = re.compile(r"-?[0-9]+")
_COMMENT = re.compile(r"[;\n\r]")
_FIELDS = re.compile(r"([^ \t]*)[ \t]*([^ \t]*)[ \t]*([^ \t]*)[ \t]*(.*)", re.S)


class AssemblyError(Exception):
    """A fatal assembly problem: a table or the program memory overflowed."""


def _number(text: str | None) -> int | None:
    if text is None:
        return None
    match = _NUMBER.match(text)
    return int(match.group()) if match else None


@dataclass(frozen=True)
class _Reference:
    name: str
    line: int
    address: int


class Assembler:
    """Assembles lines of ``[label][ instruction[ argument]]``.

    Text from ';' onwards is a comment.  Non-fatal problems are recorded
    in ``messages`` and assembly goes on; fatal ones raise AssemblyError.
    """

    def __init__(self) -> None:
        self.words: list[int] = []
        self.symbols: dict[str, int] = {}
        self.references: list[_Reference] = []
        self.messages: list[str] = []

    # memory

    def _insert(self, value: int) -> None:
        if len(self.words) >= MEM_SIZE - 1:
            raise AssemblyError("programa muito grande! Aumente MEM_TAM no montador.")
        self.words.append(value)

    def _alter(self, position: int, value: int) -> None:
        if not 0 <= position < len(self.words):
            raise AssemblyError("erro interno, alteração de região não inicializada")
        self.words[position] = value

    # symbols and references

    def _symbol_value(self, name: str | None) -> int:
        return self.symbols.get(name, -1) if name is not None else -1

    def _new_symbol(self, name: str | None, value: int) -> None:
        if name is None:
            return
        if self._symbol_value(name) != -1:
            self.messages.append(f"ERRO: redefinicao do simbolo '{name}'")
            return
        if len(self.symbols) >= SYMBOL_LIMIT:
            raise AssemblyError("Excesso de símbolos. Aumente SIMB_TAM no montador.")
        self.symbols[name] = value

    def _new_reference(self, name: str, line: int, address: int) -> None:
        if len(self.references) >= REFERENCE_LIMIT:
            raise AssemblyError("excesso de referências. Aumente REF_TAM no montador.")
        self.references.append(_Reference(name, line, address))

    def resolve(self) -> None:
        """Put each referenced symbol's value where it is referenced."""
        for ref in self.references:
            value = self._symbol_value(ref.name)
            if value == -1:
                self.messages.append(
                    f"ERRO: simbolo '{ref.name}' referenciado na linha "
                    f"{ref.line} não foi definido"
                )
            self._alter(ref.address, value)

    # assembly

    def _assemble_instruction(self, line: int, opcode: Opcode, arg: str | None) -> None:
        if opcode is Opcode.ESPACO:
            count = _number(arg)
            if count is None:
                count = self._symbol_value(arg)
            if count < 1:
                self.messages.append(f"ERRO: linha {line} 'ESPACO' deve ter valor positivo")
                return
            for _ in range(count):
                self._insert(0)
            return
        if opcode is not Opcode.VALOR:
            self._insert(opcode)
        if arg_count(opcode) == 0 or arg is None:
            return
        value = _number(arg)
        if value is not None:
            self._insert(value)
        else:
            self._new_reference(arg, line, len(self.words))
            self._insert(0)

    def _assemble_fields(
        self, line: int, label: str | None, instruction: str | None, arg: str | None
    ) -> None:
        opcode = opcode_for(instruction)
        if opcode is Opcode.DEFINE:
            value = _number(arg)
            if label is None:
                self.messages.append(f"ERRO: linha {line}: 'DEFINE' exige um label")
            elif value is None:
                self.messages.append(f"ERRO: linha {line} 'DEFINE' exige valor numérico")
            else:
                self._new_symbol(label, value)
            return

        if label is not None:
            self._new_symbol(label, len(self.words))

        if instruction is None:
            return
        if opcode is None:
            self.messages.append(f"ERRO: linha {line}: instrucao '{instruction}' desconhecida")
            return
        count = arg_count(opcode)
        if count == 0 and arg is not None:
            self.messages.append(
                f"ERRO: linha {line}: instrucao '{instruction}' não tem argumento"
            )
            return
        if count == 1 and arg is None:
            self.messages.append(
                f"ERRO: linha {line}: instrucao '{instruction}' necessita argumento"
            )
            return
        self._assemble_instruction(line, opcode, arg)

    def assemble_line(self, line_number: int, text: str) -> None:
        """Assemble one source line."""
        text = _COMMENT.split(text, maxsplit=1)[0]
        if not text:
            return
        match = _FIELDS.fullmatch(text)
        assert match is not None
        label, instruction, arg, rest = (group or None for group in match.groups())
        if rest is not None:
            self.messages.append(f"linha {line_number}: ignorando '{rest}'")
        if label is not None or instruction is not None:
            self._assemble_fields(line_number, label, instruction, arg)

    def assemble_lines(self, lines: Iterable[str]) -> None:
        """Assemble source lines, numbering them from 1."""
        for line_number, text in enumerate(lines, start=1):
            self.assemble_line(line_number, text)


def assemble(text: str) -> list[int]:
    """Assemble a whole program and return its memory words."""
    assembler = Assembler()
    assembler.assemble_lines(text.split("\n"))
    assembler.resolve()
    return assembler.words


def format_memory(words: list[int]) -> str:
    """Format memory words as initialiser lines, ten words per line."""
    lines = []
    for start in range(0, len(words), 10):
        chunk = "".join(f" {word}," for word in words[start:start + 10])
        lines.append(f"    /*{start:4d} */{chunk}\n")
    return "".join(lines)


def main(argv: list[str] | None = None) -> int:
    """Assemble the file named in ``argv`` and print the resulting memory."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("ERRO: chame como 'montador nome_do_arquivo'", file=sys.stderr)
        return 1
    name = args[0]
    try:
        with open(name, encoding="utf-8", errors="replace") as source:
            text = source.read()
    except OSError:
        print(f"Não foi possível abrir o arquivo '{name}'", file=sys.stderr)
        return 0
    assembler = Assembler()
    try:
        assembler.assemble_lines(text.split("\n"))
        assembler.resolve()
    except AssemblyError as exc:
        for message in assembler.messages:
            print(message, file=sys.stderr)
        print(f"ERRO FATAL: {exc}", file=sys.stderr)
        return 1
    for message in assembler.messages:
        print(message, file=sys.stderr)
    sys.stdout.write(format_memory(assembler.words))
    return 0


if __name__ == "__main__":
    sys.exit(main())