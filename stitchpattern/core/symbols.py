from __future__ import annotations

from typing import Tuple

PRIMARY_SYMBOLS = tuple("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
SECONDARY_SYMBOLS = tuple("0123456789!@#$%^&*()[]{}<>+-=;:,")
GLYPH_SYMBOLS = tuple(chr(0x25A0 + i) for i in range(16))

# Position N in usedColors always maps to SYMBOL_TABLE[N % len(SYMBOL_TABLE)].
SYMBOL_TABLE: Tuple[str, ...] = PRIMARY_SYMBOLS + SECONDARY_SYMBOLS + GLYPH_SYMBOLS


def symbol_for_index(index: int) -> str:
    if index < 0:
        raise ValueError(f"colour index must be non-negative, got {index}")
    return SYMBOL_TABLE[index % len(SYMBOL_TABLE)]


__all__ = ["SYMBOL_TABLE", "symbol_for_index"]
