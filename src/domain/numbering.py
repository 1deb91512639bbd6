"""Sequential document numbers (invoices, contracts)

Numbers are a fixed prefix followed by a zero-padded counter:
OFC00000219 for invoices, VO-SA-2025-0001 for contracts.
"""

from typing import Optional


class DuplicateNumberError(Exception):
    """Raised by persistence when a document number is already taken"""

    def __init__(self, number: str):
        super().__init__(f"Number {number} is already in use")
        self.number = number


def format_number(prefix: str, sequence: int, width: int) -> str:
    return f"{prefix}{sequence:0{width}d}"


def parse_sequence(number: str, prefix: str) -> int:
    """Extract the counter from a number carrying the given prefix"""
    if not number.startswith(prefix):
        raise ValueError(f"{number!r} does not start with {prefix!r}")
    suffix = number[len(prefix):]
    if not suffix.isdigit():
        raise ValueError(f"{number!r} has a non-numeric suffix")
    return int(suffix)


def next_sequence_number(
    current_max: Optional[str],
    prefix: str,
    width: int,
    seed: int = 1,
) -> str:
    """
    Number following current_max, or the seed when nothing exists yet

    Args:
        current_max: Highest existing number with this prefix (or None)
        prefix: Fixed prefix, e.g. "OFC" or "VO-SA-2025-"
        width: Zero-padded counter width
        seed: First number handed out

    Returns:
        e.g. next_sequence_number("OFC00000219", "OFC", 8) == "OFC00000220"
    """
    if not current_max:
        return format_number(prefix, seed, width)

    sequence = parse_sequence(current_max, prefix) + 1
    return format_number(prefix, max(sequence, seed), width)


def contract_number_prefix(prefix: str, year: int) -> str:
    return f"{prefix}-{year}-"
