__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .collector import MEMBER_ROOT_ALIASED, AliasCollector
from .engine import DEFAULT_PREFIX, InnerComponentTransformer, transform_source
from .loader import create_transformer, register_inner_components
from .patcher import apply_patch_plan, render_declaration

__all__ = [
    "AliasCollector",
    "MEMBER_ROOT_ALIASED",
    "DEFAULT_PREFIX",
    "InnerComponentTransformer",
    "transform_source",
    "create_transformer",
    "register_inner_components",
    "apply_patch_plan",
    "render_declaration",
]
