from __future__ import annotations

from dataclasses import dataclass

__all__ = ["ParserConfig", "DEFAULT_CONFIG"]


@dataclass(frozen=True)
class ParserConfig:
    # Deepest block nesting accepted before NestingTooDeep is raised.
    max_depth: int = 64
    # `@import url(a.css);` style at-rules end at `;` with no block.
    blockless_at_rules: bool = False
    # Accept `a { color: red }` where the last declaration has no `;`.
    lenient_final_semicolon: bool = False


DEFAULT_CONFIG = ParserConfig()
