"""
Shared model bases for schemas.

Layering:
- BaseStrictModel: values built by this package (options, results)
- ApiModel: payloads received from the GitHub API, which carry many more
  fields than we model
"""

from __future__ import annotations

import pydantic


class BaseStrictModel(pydantic.BaseModel):
    """
    Foundation strict model.

    Uses extra='forbid' to reject unknown fields - any field not modeled
    causes immediate validation failure (fail-fast).
    """

    model_config = pydantic.ConfigDict(
        extra='forbid',  # Reject unknown fields (fail-fast)
        strict=True,  # Strict type coercion
        frozen=True,  # Immutable after creation
    )


class ApiModel(pydantic.BaseModel):
    """
    Foundation model for GitHub API payloads.

    Unmodeled fields are dropped (the API adds fields over time), but the
    modeled ones are still immutable.
    """

    model_config = pydantic.ConfigDict(
        extra='ignore',
        frozen=True,
    )
