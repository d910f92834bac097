# engine/text_console.py
"""In-memory console used as the presentation sink.

Stores one glyph, one foreground color and one background color per cell in
numpy arrays.  ``to_text`` flattens the glyph layer for terminal output.
"""
from typing import Self

import numpy as np

from game.constants import BLACK, WHITE, Color


class TextConsole:
    def __init__(self: Self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError("Console width and height must be positive integers.")
        self.width = width
        self.height = height
        self.chars: np.ndarray = np.full((height, width), " ", dtype="<U1")
        self.fg: np.ndarray = np.zeros((height, width, 3), dtype=np.uint8)
        self.bg: np.ndarray = np.zeros((height, width, 3), dtype=np.uint8)
        self.clear()

    def clear(self: Self) -> None:
        self.chars.fill(" ")
        self.fg[:] = WHITE
        self.bg[:] = BLACK

    def set_char_background(self: Self, x: int, y: int, color: Color) -> None:
        self.bg[y, x] = color

    def put_char(self: Self, x: int, y: int, char: str, color: Color) -> None:
        self.chars[y, x] = char
        self.fg[y, x] = color

    def print_text(self: Self, x: int, y: int, text: str, color: Color = WHITE) -> None:
        """Write ``text`` from ``(x, y)``, clipped at the right edge."""
        if not 0 <= y < self.height:
            return
        for offset, char in enumerate(text):
            cx = x + offset
            if cx >= self.width:
                break
            if cx >= 0:
                self.put_char(cx, y, char, color)

    def to_text(self: Self) -> str:
        return "\n".join("".join(row).rstrip() for row in self.chars)
