"""
Group colors a reflection prompt can take
"""
from typing import List, NamedTuple


class PaletteColor(NamedTuple):
    name: str
    hex: str


PALETTE_OPTIONS: List[PaletteColor] = [
    PaletteColor("Tomato", "#E55C5C"),
    PaletteColor("Tangerine", "#F08A43"),
    PaletteColor("Sun", "#F5C741"),
    PaletteColor("Lime", "#9ED144"),
    PaletteColor("Grass", "#52C46B"),
    PaletteColor("Teal", "#3FC1B4"),
    PaletteColor("Aqua", "#45BBEE"),
    PaletteColor("Sky", "#5C8DEF"),
    PaletteColor("Lilac", "#9579E4"),
    PaletteColor("Grape", "#BD63D9"),
    PaletteColor("Rose", "#E066A7"),
    PaletteColor("Slate", "#7E8797"),
]

PALETTE_HEXES = {color.hex for color in PALETTE_OPTIONS}


def normalize_hex(value: str) -> str:
    return value.strip().upper()


def is_palette_color(value: str) -> bool:
    return normalize_hex(value) in PALETTE_HEXES
