from pixyo.brand_design.derive import derive_profile_fields, parse_px
from pixyo.brand_design.exporters import (
    generate_css_variables,
    generate_llm_context,
    generate_tailwind_config,
)
from pixyo.brand_design.migrate import migrate_from_profile
from pixyo.brand_design.palette import generate_palette, get_contrast_color
from pixyo.brand_design.tokens import DEFAULT_DESIGN_TOKENS, DesignTokens, default_design_tokens

__all__ = [
    "DEFAULT_DESIGN_TOKENS",
    "DesignTokens",
    "default_design_tokens",
    "derive_profile_fields",
    "generate_css_variables",
    "generate_llm_context",
    "generate_palette",
    "generate_tailwind_config",
    "get_contrast_color",
    "migrate_from_profile",
    "parse_px",
]
