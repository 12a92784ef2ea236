"""Generation of a standalone Python tokenization function from a bin list.

The generated module has no dependencies beyond the standard library and
reproduces the bins' interval semantics: half-open clauses, the last one
closed. Bounds are written with ``repr`` so they round-trip exactly.
"""

import re
from typing import Optional, Sequence

from ..binning.labels import sanitize_name
from ..types import TokenBin, VariableConfig


def _plain(text: Optional[str]) -> str:
    """Single-line text safe inside comments and docstrings."""
    text = re.sub(r"[\r\n\t]+", " ", text or "")
    return text.replace("\\", "/").replace('"', "'")


def function_name(config: VariableConfig) -> str:
    return f"tokenize_{sanitize_name(config.name)}"


def _clause(b: TokenBin, last: bool, unit: str) -> str:
    op = "<=" if last else "<"
    return (
        f"    if {b.lower!r} <= value {op} {b.upper!r}:\n"
        f"        return {b.id!r}  # {b.lower:.2f} - {b.upper:.2f} {unit} ({b.severity.value})\n"
    )


def generate_source(
    bins: Sequence[TokenBin],
    config: VariableConfig,
    generated_at: Optional[str] = None,
) -> str:
    """Render Python source for ``tokenize_<name>(value)``.

    Parameters
    ----------
    bins : sequence of TokenBin
        Finished bins, in order.
    config : VariableConfig
        Supplies name, unit and direction for the header.
    generated_at : str, optional
        Timestamp written into the header; omitted when None.

    Returns
    -------
    str
        Module source defining ``BIN_DEFINITIONS``, the tokenize function
        and a ``_batch`` variant.

    Raises
    ------
    ValueError
        If ``bins`` is empty.
    """
    if len(bins) == 0:
        raise ValueError("Cannot generate tokenization source: no bins provided")

    name = _plain(config.name or "variable")
    unit = _plain(config.unit or "")
    direction = config.direction.value if config.direction is not None else "not specified"
    fn = function_name(config)

    lines = ['"""', "Generated tokenization function", f"Variable: {name}",
             f"Unit: {unit or 'dimensionless'}", f"Clinical direction: {direction}"]
    if generated_at:
        lines.append(f"Generated: {_plain(generated_at)}")
    lines += [
        "",
        f"Converts continuous {name} values into bin tokens. Clinical anchors",
        "are exact bin boundaries.",
        '"""',
        "",
        "import math",
        "",
        "BIN_DEFINITIONS = {",
    ]
    for b in bins:
        lines.append(
            f"    {b.id!r}: {{'lower': {b.lower!r}, 'upper': {b.upper!r}, "
            f"'zone': {b.zone_category.value!r}, 'severity': {b.severity.value!r}, "
            f"'data_percentage': {b.data_percentage!r}}},"
        )
    lines += ["}", "", ""]
    header = "\n".join(lines) + "\n"

    clauses = "".join(_clause(b, i == len(bins) - 1, unit) for i, b in enumerate(bins))
    lo, hi = bins[0].lower, bins[-1].upper

    body = (
        f"def {fn}(value):\n"
        f'    """Tokenize a {name} value ({unit or "units"}) into its bin id.\n'
        "\n"
        '    Returns "missing" for None or NaN.\n'
        "\n"
        "    Raises\n"
        "    ------\n"
        "    ValueError\n"
        "        If value is outside the defined range.\n"
        '    """\n'
        "    if value is None or math.isnan(value):\n"
        '        return "missing"\n'
        "\n"
        f"{clauses}"
        "\n"
        f'    raise ValueError(f"Value {{value}} outside bin range [{lo!r}, {hi!r}]")\n'
        "\n"
        "\n"
        f"def {fn}_batch(values):\n"
        f'    """Tokenize a batch of {name} values."""\n'
        f"    return [{fn}(v) for v in values]\n"
    )
    return header + body
