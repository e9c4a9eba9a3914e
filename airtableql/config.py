from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from strawberry.schema.config import StrawberryConfig


@dataclass(frozen=True)
class GeneratorConfig:
    """Knobs shared by the schema assembler and the resolver synthesizer.

    Attributes:
        line_length: Target width when formatting generated resolver source.
        format_source: Run generated source through black. When False the
            output is plain ``ast.unparse`` text (still deterministic).
        page_size: Default ``limit`` of the generated list resolvers.
    """

    line_length: int = 88
    format_source: bool = True
    page_size: int = 100

    def __post_init__(self):
        if self.page_size <= 0:
            raise ValueError("page_size must be positive")
        if self.line_length <= 0:
            raise ValueError("line_length must be positive")

    def strawberry_config(self) -> StrawberryConfig:
        """Strawberry settings for the assembled schema.

        Camel casing stays off: names are already normalized by
        :mod:`airtableql.core.naming`, and argument names such as
        ``filter_by_formula`` must match the generated resolvers verbatim.
        """
        from strawberry.schema.config import StrawberryConfig
        return StrawberryConfig(auto_camel_case=False)


DEFAULT_CONFIG = GeneratorConfig()
