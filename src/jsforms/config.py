from __future__ import annotations

import os
from dataclasses import dataclass

ENV_JSFORMS_DEDUPE_DECLARATIONS = "JSFORMS_DEDUPE_DECLARATIONS"
ENV_JSFORMS_MAX_EXPANSION_DEPTH = "JSFORMS_MAX_EXPANSION_DEPTH"

_FALSY = {"0", "false", "no", "off"}


@dataclass(slots=True)
class EmitConfig:
	"""
	Configuration for an emission pass.

	Attributes:
	    dedupe_declarations (bool): Collapse repeated `var` names in one scope.
	    max_expansion_depth (int): Maximum nesting of custom-form expansions.
	"""

	dedupe_declarations: bool = True
	"""Declare each hoisted name once per scope, in first-seen order.

	When False, every `var` occurrence is listed, duplicates included."""

	max_expansion_depth: int = 100
	"""Custom forms expanding into custom forms deeper than this raise ExpansionError."""

	@classmethod
	def from_env(cls) -> EmitConfig:
		"""Build a config from JSFORMS_* environment variables, falling back to defaults."""
		cfg = cls()
		raw = os.environ.get(ENV_JSFORMS_DEDUPE_DECLARATIONS)
		if raw is not None and raw.strip():
			cfg.dedupe_declarations = raw.strip().lower() not in _FALSY
		raw = os.environ.get(ENV_JSFORMS_MAX_EXPANSION_DEPTH)
		if raw is not None and raw.strip():
			try:
				cfg.max_expansion_depth = int(raw)
			except ValueError:
				raise ValueError(
					f"{ENV_JSFORMS_MAX_EXPANSION_DEPTH} must be an integer, got {raw!r}"
				) from None
		return cfg
