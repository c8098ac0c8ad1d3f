# simso

`simso` is a small simulated computer together with a teaching operating
system that runs on it:

- a CPU with two registers (`A` and `X`), a program counter and three
  modes (supervisor, user and zombie);
- 2000 words of main memory, an MMU and a page table;
- an I/O controller with eight numeric terminals and a clock;
- an assembler for the machine's instruction set;
- processes with timing metrics and three schedulers (simple, round robin
  and shortest expected job);
- an operating system that handles system calls, blocks processes waiting
  for devices and switches between processes.

The screen is drawn with the standard `curses` module, so the package
runs on POSIX systems.

## Installing

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Commands

### `simso-asm`

```
simso-asm program.asm
```

Assembles a source file and prints the resulting memory words, ten per
line, each line starting with a `/* address */` comment. Problems such as
unknown instructions, redefined or undefined symbols are reported on
standard error; overflowing the assembler's tables (1000 words, 1000
symbols, 1000 references) is fatal and exits with status 1.

### `simso`

```
simso [-e {circular,curto,simples}] [program ...]
```

Loads the program files, starts the first one as the first process and
runs the simulation in the terminal. A program file holds comma-separated
words and may contain `/* ... */` comments, which is exactly what
`simso-asm` prints, so its output can be saved straight into a file:

```
simso-asm init.asm > init.maq
```

Without arguments the files `init.maq`, `grande_cpu.maq`, `grande_es.maq`,
`peq_cpu.maq` and `peq_es.maq` are read from the current directory.
Program number `n` in the list is the one started by the `create` system
call with `n` in `A`.

`-e`/`--escalonador` chooses the scheduler:

| Value      | Scheduler                                                    |
|------------|--------------------------------------------------------------|
| `circular` | round robin (default): a process that has run for more than 5 clock units is put back as ready, and the process ready for the longest time is chosen |
| `curto`    | the same time slice, choosing the process with the shortest expected burst (mean running time per stop so far, 5 for a new process) |
| `simples`  | a process runs until it blocks or ends; then the last ready process in the table is chosen |

The screen shows the output (`S`) and input (`E`) queues of the eight
terminals `a` to `h` (at most nine numbers each), a status line with the
registers and the instruction at the PC, and a console with messages from
the system. When a process ends, its metrics are written to the console:
time running, time blocked and number of blocks, time ready and number of
preemptions, and total lifetime.

The simulation starts paused. Type a command and press Enter:

| Command | Effect                                                      |
|---------|-------------------------------------------------------------|
| `etn`   | put the number `n` in the input of terminal `t` (e.g. `eb30`) |
| `lt`    | take one number from the output of terminal `t` (e.g. `lc`)   |
| `zt`    | empty the output of terminal `t` (e.g. `za`)                |
| `p`     | pause execution                                             |
| `s`     | execute a single instruction                                |
| `c`     | continue execution                                          |

The system stops when no process is left or when it meets an interrupt it
cannot handle. Then press Enter to leave.

## Assembly language

Each line has the form

```
[label] [instruction [argument]]
```

A label starts at the first column; an instruction must be preceded by
spaces or tabs. Everything from `;` to the end of the line is a comment.
Instruction names are case-insensitive. Arguments are numbers or symbols;
symbols may be used before they are defined.

Instructions: `NOP`, `PARA`, `CARGI`, `CARGM`, `CARGX`, `ARMM`, `ARMX`,
`MVAX`, `MVXA`, `INCX`, `SOMA`, `SUB`, `MULT`, `DIV`, `RESTO`, `NEG`,
`DESV`, `DESVZ`, `DESVNZ`, `DESVN`, `DESVP`, `CHAMA`, `RET`, `LE`, `ESCR`,
`SISOP`.

Pseudo-instructions:

- `VALOR n` places the value `n` in the next memory word;
- `ESPACO n` reserves `n` words initialised to zero;
- `DEFINE n` gives the line's label the value `n`.

Processes run in user mode, where `PARA`, `LE` and `ESCR` are privileged:
they cause an interrupt that the system does not handle, and the system
stops. User programs do their input and output through system calls.

## System calls

A program calls the operating system with `SISOP n`:

| `n` | Call   | Meaning                                                 |
|-----|--------|---------------------------------------------------------|
| 1   | read   | read from the device in `A`; the value is returned in `X` and the error code in `A` |
| 2   | write  | write the value in `X` to the device in `A`; the error code is returned in `A` |
| 3   | end    | end the calling process                                 |
| 4   | create | create a new process running program number `A`; the error code is returned in `A` |

A process that reads from or writes to a device that is not ready is
blocked until the device becomes ready. An unknown call stops the system.

Example, reading a number from terminal `a` and writing it back plus one:

```
inicio  CARGI 0      ; device: terminal a
        SISOP 1      ; X = number read
        MVXA
        SOMA um
        MVAX
        CARGI 0
        SISOP 2      ; write X to terminal a
        SISOP 3      ; end
um      VALOR 1
```

## Devices

| Number   | Device                                               |
|----------|------------------------------------------------------|
| 0 – 7    | terminals `a` to `h` (read and write)                |
| 11, 99   | the clock: instructions executed so far              |
| 12, 98   | the clock: processor time used by the simulator, in ms |
| 100 + n  | reads 1 if device `n` is ready to be read, else 0    |
| 200 + n  | reads 1 if device `n` is ready to be written, else 0 |

## Using it as a library

```python
from simso.assembler import assemble, format_memory

words = assemble("""
inicio  CARGI 7
        NEG
""")
print(format_memory(words))
```

A `Screen` that has not been started keeps all its state without drawing
anything, so a whole system can be run without a terminal:

```python
from simso.assembler import assemble
from simso.contr import Controller
from simso.processo import Program
from simso.so import OperatingSystem

controller = Controller()
controller.screen.insert(0, 41)
system = OperatingSystem(controller, [Program(assemble(source))])
controller.attach_os(system)
controller.run()
print(list(controller.screen.outputs[0]))   # [42] for the example above
```

`OperatingSystem` takes the scheduler class as its third argument
(`simso.escalonador.SimpleScheduler`, `RoundRobinScheduler` or
`ShortestJobScheduler`); metrics of ended processes are kept in
`system.finished`.

Other building blocks: `simso.mem.Memory`, `simso.mmu.Mmu`,
`simso.tab_pag.PageTable`, `simso.es.IOController`,
`simso.executor.Executor`, `simso.cpu_estado.CpuState`,
`simso.rel.Clock`, `simso.term.Terminal`, `simso.aleatorio.RandomDevice`,
`simso.processo.Process` and `simso.processo.ProcessTable`. Hardware
faults are raised as `simso.err.MachineError`, whose `err` is an
`simso.err.Err` code.

## What it does not do

- The operating system never installs a page table: each process gets a
  full copy of the 2000-word memory, copied in and out on every switch.
  `PageTable` and `Mmu.use_page_table` can be used on their own.
- The clock is created without a period, so no timer interrupts happen;
  time slices are only checked when a process makes a system call.
- `RandomDevice` is not attached to the I/O controller by `Controller`.