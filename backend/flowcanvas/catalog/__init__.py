"""Static step metadata: output schemas, palette and network compatibility."""

from flowcanvas.catalog.network import (
    check_compatibility,
    incompatible_types,
    is_compatible,
    network_warning,
)
from flowcanvas.catalog.step_docs import (
    CATEGORY_INFO,
    STEP_DOCS,
    STEP_OPTIONS,
    category_label,
    default_step_data,
    get_step_doc,
    options_for_category,
    output_fields,
    palette,
)

__all__ = [
    "CATEGORY_INFO",
    "STEP_DOCS",
    "STEP_OPTIONS",
    "category_label",
    "check_compatibility",
    "default_step_data",
    "get_step_doc",
    "incompatible_types",
    "is_compatible",
    "network_warning",
    "options_for_category",
    "output_fields",
    "palette",
]
