from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .config import GeneratorConfig
from .models import Base, dump_base
from .registry import print_schema
from .resolvers import create_resolvers_source

_logger = logging.getLogger("airtableql")


@dataclass(frozen=True)
class Artifacts:
    """The three texts produced from one base."""

    base_json: str
    schema_sdl: str
    resolvers_source: str

    def files(self, stem: str = 'schema') -> Dict[str, str]:
        """File name -> content, using the loader's conventional suffixes.

        Writing them out is left to the caller.
        """
        return {
            f"{stem}.json": self.base_json,
            f"{stem}.graphql": self.schema_sdl,
            f"{stem}.py": self.resolvers_source,
        }


def generate(base: Base, config: Optional[GeneratorConfig] = None) -> Artifacts:
    """Serialize ``base`` and derive its GraphQL schema and resolver module."""
    _logger.debug("generating artifacts for base %s", base.id)
    return Artifacts(
        base_json=dump_base(base),
        schema_sdl=print_schema(base, config),
        resolvers_source=create_resolvers_source(base, config),
    )
