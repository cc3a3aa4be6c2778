"""
===============================================================================
ARCHIVO: normalize.py
===============================================================================

CRC CARD (Module)
-------------------------------------------------------------------------------
Nombre:
    Normalización de texto para matching (con mapa de offsets)

Responsabilidades:
    - Canonicalizar whitespace, comillas, guiones y espaciado de tablas
      para que textos "iguales salvo formato" comparen igual.
    - Recordar, para cada carácter normalizado, de qué rango del texto
      original proviene. Así los matches se devuelven como offsets sobre el
      documento ORIGINAL y no sobre la versión limpia.

Colaboradores:
    - application/matching_strategies.py
    - application/fuzzy_citation.py

Reglas (en orden):
    1. \\s+         -> " "
    2. “ ” „ ‟ ″   -> "
    3. ‘ ’ ‚ ‛ ′   -> '
    4. — –         -> -
    5. |\\s+        -> "| "
    6. \\s+|        -> " |"
    7. -{2,}       -> "--"
    8. strip()
===============================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Final

_RULES: Final[list[tuple[re.Pattern, str]]] = [
    (re.compile(r"\s+"), " "),
    (re.compile("[“”„‟″]"), '"'),
    (re.compile("[‘’‚‛′]"), "'"),
    (re.compile("[—–]"), "-"),
    (re.compile(r"\|\s+"), "| "),
    (re.compile(r"\s+\|"), " |"),
    (re.compile(r"-{2,}"), "--"),
]


@dataclass(frozen=True)
class NormalizedText:
    """
    Texto normalizado + mapa a posiciones del original.

    starts[i] / ends[i]:
      rango [starts[i], ends[i]) del original que produjo el carácter i.
      Un carácter que reemplaza una corrida (p.ej. "\\n\\n  " -> " ")
      cubre la corrida completa.
    """

    text: str
    starts: list[int] = field(default_factory=list, repr=False)
    ends: list[int] = field(default_factory=list, repr=False)
    original_length: int = 0

    def __len__(self) -> int:
        return len(self.text)

    def to_original_span(self, start: int, end: int) -> tuple[int, int]:
        """
        Traduce [start, end) normalizado a [start, end) del original.

        Los índices se clampean a [0, len(text)] y el resultado a
        [0, original_length]; nunca se emiten rangos fuera del documento.
        """
        n = len(self.text)
        start = min(max(start, 0), n)
        end = min(max(end, start), n)

        if start == end:
            pos = self.starts[start] if start < n else self.original_length
            return pos, pos

        orig_start = self.starts[start]
        orig_end = self.ends[end - 1]
        orig_start = min(max(orig_start, 0), self.original_length)
        orig_end = min(max(orig_end, orig_start), self.original_length)
        return orig_start, orig_end


def _sub_tracked(
    pattern: re.Pattern,
    repl: str,
    text: str,
    starts: list[int],
    ends: list[int],
) -> tuple[str, list[int], list[int]]:
    """re.sub con reemplazo fijo que mantiene alineado el mapa de offsets."""
    parts: list[str] = []
    new_starts: list[int] = []
    new_ends: list[int] = []
    last = 0

    for m in pattern.finditer(text):
        s, e = m.span()
        if m.group(0) == repl:
            # No-op: se conserva el mapeo original carácter a carácter.
            continue

        parts.append(text[last:s])
        new_starts.extend(starts[last:s])
        new_ends.extend(ends[last:s])

        parts.append(repl)
        new_starts.extend([starts[s]] * len(repl))
        new_ends.extend([ends[e - 1]] * len(repl))
        last = e

    if last == 0 and not parts:
        return text, starts, ends

    parts.append(text[last:])
    new_starts.extend(starts[last:])
    new_ends.extend(ends[last:])
    return "".join(parts), new_starts, new_ends


def normalize_for_matching(text: str) -> NormalizedText:
    """
    Normaliza texto para matching y devuelve el mapa de offsets.

    Se aplica idéntico al texto buscado y al documento: si no, los scores
    de similitud no son comparables.
    """
    if not text:
        return NormalizedText(text="", original_length=0)

    current = text
    starts = list(range(len(text)))
    ends = list(range(1, len(text) + 1))

    for pattern, repl in _RULES:
        current, starts, ends = _sub_tracked(pattern, repl, current, starts, ends)

    stripped = current.strip()
    if not stripped:
        return NormalizedText(text="", original_length=len(text))

    lead = len(current) - len(current.lstrip())
    tail = lead + len(stripped)
    return NormalizedText(
        text=stripped,
        starts=starts[lead:tail],
        ends=ends[lead:tail],
        original_length=len(text),
    )


def clean_text(text: str) -> str:
    """Sólo el texto normalizado (sin mapa)."""
    return normalize_for_matching(text).text
