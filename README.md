# veryl-css

Turns the intermediate representation (IR) of a single hardware module into
CSS.

- Combinational logic becomes custom property assignments.
- Flip-flops become a `hoist`/`capture` keyframe pair. Registers therefore
  update once per animation cycle.
- Comparisons and bitwise operators become CSS `@function` rules. Only the
  rules that the design uses are emitted.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Usage

Build the module's IR with the classes in `veryl_css.ir`, then pass it to
`veryl_css.codegen.emit`. The function returns an `Output`, and the generated
stylesheet is in its `css` attribute.

```python
from veryl_css.ir import (
    Ir, Module, Variable, VarKind, CombDeclaration,
    AssignStatement, AssignDestination, Binary, Term, VariableFactor, Op,
)
from veryl_css.codegen import emit

a, b, y = 0, 1, 2
module = Module(
    name="adder",
    variables={
        a: Variable(path="adder.a", kind=VarKind.INPUT, type="bit<8>"),
        b: Variable(path="adder.b", kind=VarKind.INPUT, type="bit<8>"),
        y: Variable(path="adder.y", kind=VarKind.OUTPUT, type="bit<8>"),
    },
    declarations=[
        CombDeclaration(statements=[
            AssignStatement(
                dst=[AssignDestination(id=y)],
                expr=Binary(Term(VariableFactor(a)), Op.ADD, Term(VariableFactor(b))),
            ),
        ]),
    ],
)

print(emit(Ir(components=[module])).css)
```

`emit` requires exactly one `Module` among `Ir.components`.

### Naming

- Ports (`INPUT`, `OUTPUT`, `INOUT`) become `--<signal>`.
- Internal signals (`VARIABLE`, `LET`) become `--<module>-<signal>`.
- Parameters and constants get no property.
- The signal name is the last dotted segment of the variable's path.

### Output layout

- A design with only `comb` blocks puts its assignments in a `:root` block.
- A design with `ff` blocks puts them in a `body` block.
- Each register assigned in an `ff` block also gets the helper properties
  `--<module>-<signal>-next`, `-captured` and `-hoist`.
- Each `if` adds a `--veryl-cond-<n>` property that holds its condition.
- Every property used is registered with an `@property` rule as an inherited
  `<integer>` with initial value `0`.

## Supported constructs

- **Types:** the type strings `signed bit<8>`, `signed bit<16>`,
  `signed bit<32>`, `bit<8>` and `bit<16>`, which correspond to i8, i16, i32,
  u8 and u16.
- **Arithmetic:** `+`, `-`, `*`, `/` (rounds toward zero), `%`, and unary
  `+`/`-`.
- **Bitwise:** `&`, `|`, `^`, `~`, `<<`, `>>`. These work on unsigned 8- and
  16-bit values only.
- **Conditions:** `<`, `<=`, `>`, `>=`, `==`, `!=`, combined with `&&`, `||`
  and `!`. The wildcard forms `==?` and `!=?` compare as plain equality and
  inequality.
- **Bit selects:** single-bit selects such as `x[0]`, with a literal or a
  computed index.
- **`if`/`else`:** allowed in comb and ff blocks. Both branches must assign the
  same signals.
- **`if_reset`:** allowed in ff blocks. It selects on the `--rst` property.

Anything else raises `veryl_css.ir.CodegenError`, with a message that names
the unsupported construct.

## Lower-level helpers

- `veryl_css.literals.literal_to_css_int` converts a sized literal such as
  `8'shff` to a decimal CSS integer, in this case `-1`. It accepts a plain
  decimal unchanged.
- `veryl_css.literals.last_path_segment` returns the part of a dotted path
  after its last dot.
- `veryl_css.cssfmt` holds the CSS builders, which work with the `CompFn` and
  `BitFn` enums:
  - `comp_functions`
  - `bit_functions`
  - `bit_function_body`
  - `property_rule`
  - `block`
  - `keyframes`

## What this package does not do

This package has no parser or analyser for hardware description source text.
You must build the IR yourself with `veryl_css.ir`.

There is no command-line tool either. The package does not read input files or
write the stylesheet to disk. `emit` returns the CSS as a string.