# models/limits.py
"""
Thresholds that drive the card-extraction heuristics.

The module-level constants are the defaults; ``ExtractionLimits`` lets a
target in ``configs/targets.yaml`` override them per page.
"""

from pydantic import BaseModel, Field, model_validator

# ----------------------------------------------------------------------
#  Defaults
# ----------------------------------------------------------------------
MAX_ITEMS = 8                 # hard cap on emitted cards
MAX_CLIMB_DEPTH = 10          # ancestor levels examined above the heading
MIN_SECTION_ANCHORS = 12      # "enough links visible" stop condition

CATEGORY_MIN_LENGTH = 3
CATEGORY_MAX_LENGTH = 45
DESCRIPTION_MIN_LENGTH = 60


class ExtractionLimits(BaseModel):
    """Per-target view of the constants above."""

    max_items: int = Field(default=MAX_ITEMS, ge=1, le=MAX_ITEMS)
    max_climb_depth: int = Field(default=MAX_CLIMB_DEPTH, ge=1)
    min_section_anchors: int = Field(default=MIN_SECTION_ANCHORS, ge=1)
    category_min_length: int = Field(default=CATEGORY_MIN_LENGTH, ge=1)
    category_max_length: int = Field(default=CATEGORY_MAX_LENGTH, ge=1)
    description_min_length: int = Field(default=DESCRIPTION_MIN_LENGTH, ge=1)

    @model_validator(mode="after")
    def _check_category_band(self) -> "ExtractionLimits":
        if self.category_min_length > self.category_max_length:
            raise ValueError(
                "category_min_length must not exceed category_max_length"
            )
        return self


DEFAULT_LIMITS = ExtractionLimits()
