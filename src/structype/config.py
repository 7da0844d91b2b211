"""
Configuration for the extends engine.

Settings are read from environment variables prefixed with ``STRUCTYPE_`` and
can be overridden by passing an ExtendsSettings instance explicitly.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class ExtendsSettings(BaseSettings):
    """Extends engine configuration."""

    # Answer when a comparison re-enters a pair still being compared
    cycle_result: bool = Field(default=True)

    # Answer for Any on the left of a non-absorbing right side
    any_left_result: bool = Field(default=True)

    # Cache finished comparisons for the duration of one query
    memoize: bool = Field(default=True)

    trace: bool = Field(default=False, description="Log every comparison at debug level")

    model_config = {"env_prefix": "STRUCTYPE_"}
