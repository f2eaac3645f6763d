"""Pydantic configuration for the sample size calculation."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Policy = Literal["allow", "warn", "error"]


class SampleSizeConfig(BaseModel):
    """Controls how permissive the calculator is about degenerate inputs."""

    duplicate_strata: Policy = Field(
        "warn",
        description=(
            "What to do when the stratum key repeats values. Repeated keys "
            "multiply rows during the keyed merges."
        ),
    )
    nonfinite_sizes: Policy = Field(
        "warn",
        description="What to do when nh is infinite or NaN (zero denominators).",
    )
    sort_result: bool = Field(
        True, description="Sort the result by stratum, then by variable order."
    )
