"""pagecraft — declarative page composition for static sites."""

from pagecraft.action import (
    RenderAction,
    chain,
    create_manipulation_action,
    create_render_action,
    create_simple_render_action,
)
from pagecraft.renderable import (
    ActionPage,
    CombinedRenderable,
    PagePath,
    Renderable,
    combine_renderables,
    create_page_path,
)
from pagecraft.renderables import (
    combine,
    combine_with_url,
    create_custom_page,
    create_listing,
    create_listing_with,
)
from pagecraft.types import Context, ContextManipulation, Deferred, Literal

__version__ = "0.1.0"

__all__ = [
    "ActionPage",
    "CombinedRenderable",
    "Context",
    "ContextManipulation",
    "Deferred",
    "Literal",
    "PagePath",
    "RenderAction",
    "Renderable",
    "__version__",
    "chain",
    "combine",
    "combine_renderables",
    "combine_with_url",
    "create_custom_page",
    "create_listing",
    "create_listing_with",
    "create_manipulation_action",
    "create_page_path",
    "create_render_action",
    "create_simple_render_action",
]
