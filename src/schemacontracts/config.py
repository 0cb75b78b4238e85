"""
Engine configuration for schema contract compilation.

This module defines the ContractsConfig dataclass that captures the
configurable names and limits used by the rewriter and the compiler, so that
callers never pass loose strings around.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from dotenv import load_dotenv

from schemacontracts.constants import (
    DEFAULT_MAX_CASCADE_ITERATIONS,
    DIRECTIVE_INACCESSIBLE,
    DIRECTIVE_TAG,
    FEDERATION_SCAFFOLDING_TYPES,
)

logger = logging.getLogger(__name__)

ENV_MARKER_DIRECTIVE = "SCHEMA_CONTRACTS_MARKER_DIRECTIVE"
ENV_TAG_DIRECTIVE = "SCHEMA_CONTRACTS_TAG_DIRECTIVE"
ENV_PROTECTED_TYPES = "SCHEMA_CONTRACTS_PROTECTED_TYPES"
ENV_MAX_CASCADE_ITERATIONS = "SCHEMA_CONTRACTS_MAX_CASCADE_ITERATIONS"


@dataclass(frozen=True)
class ContractsConfig:
    """
    Configuration for contract compilation.

    Attributes:
        marker_directive_name: Directive added to excluded elements.
        tag_directive_name: Tag directive name used when the document does
            not rename it through a tag-spec @link.
        protected_type_names: Types that are never marked, in any pass.
        max_cascade_iterations: Upper bound on unreachable-type passes.
        ensure_marker_definition: Append a definition of the marker
            directive to the output when the document lacks one.
    """

    marker_directive_name: str = DIRECTIVE_INACCESSIBLE
    tag_directive_name: str = DIRECTIVE_TAG
    protected_type_names: FrozenSet[str] = field(
        default_factory=lambda: frozenset(FEDERATION_SCAFFOLDING_TYPES)
    )
    max_cascade_iterations: int = DEFAULT_MAX_CASCADE_ITERATIONS
    ensure_marker_definition: bool = True

    def __post_init__(self):
        # Accept any iterable for protected names
        if not isinstance(self.protected_type_names, frozenset):
            object.__setattr__(
                self, "protected_type_names", frozenset(self.protected_type_names)
            )
        if self.max_cascade_iterations < 1:
            raise ValueError(
                f"max_cascade_iterations must be >= 1, got {self.max_cascade_iterations}"
            )

    def with_protected(self, names: Iterable[str]) -> "ContractsConfig":
        """Return a copy protecting additional type names."""
        return ContractsConfig(
            marker_directive_name=self.marker_directive_name,
            tag_directive_name=self.tag_directive_name,
            protected_type_names=self.protected_type_names | frozenset(names),
            max_cascade_iterations=self.max_cascade_iterations,
            ensure_marker_definition=self.ensure_marker_definition,
        )

    @classmethod
    def for_supergraph(cls) -> "ContractsConfig":
        """Configuration for federation supergraph targets."""
        return cls()

    @classmethod
    def for_single_schema(cls) -> "ContractsConfig":
        """Configuration for single-SDL targets (no join-spec scaffolding)."""
        return cls(protected_type_names=frozenset())

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "ContractsConfig":
        """
        Build configuration from environment variables.

        A .env file is loaded first (existing variables win). Protected type
        names from the environment extend the federation defaults.

        Args:
            dotenv_path: Explicit .env path. Defaults to dotenv discovery.

        Returns:
            ContractsConfig with environment overrides applied.
        """
        load_dotenv(dotenv_path=dotenv_path, override=False)

        extra_protected = {
            name.strip()
            for name in os.environ.get(ENV_PROTECTED_TYPES, "").split(",")
            if name.strip()
        }
        iterations_raw = os.environ.get(ENV_MAX_CASCADE_ITERATIONS)
        try:
            max_iterations = (
                int(iterations_raw) if iterations_raw else DEFAULT_MAX_CASCADE_ITERATIONS
            )
        except ValueError:
            logger.warning(
                f"Ignoring non-integer {ENV_MAX_CASCADE_ITERATIONS}={iterations_raw!r}"
            )
            max_iterations = DEFAULT_MAX_CASCADE_ITERATIONS

        return cls(
            marker_directive_name=os.environ.get(ENV_MARKER_DIRECTIVE, DIRECTIVE_INACCESSIBLE),
            tag_directive_name=os.environ.get(ENV_TAG_DIRECTIVE, DIRECTIVE_TAG),
            protected_type_names=frozenset(FEDERATION_SCAFFOLDING_TYPES) | extra_protected,
            max_cascade_iterations=max_iterations,
        )
