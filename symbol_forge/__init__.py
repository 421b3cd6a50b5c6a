"""
symbol-forge — 將 Material Symbols 圖稿轉成 Figma 元件

驗證「同名 Vector + Bounding box」群組，重建為元件並收納到 Icons 容器。
"""

__version__ = "0.1.0"

from .scene import (
    NodeType,
    SceneNode,
    SceneHost,
    InMemoryHost,
    SceneError,
    load_document,
    save_document,
    preview_tree,
)
from .naming import format_component_name
from .container import ContainerConfig, ContainerLocator
from .converter import IconConverter
from .selection import RunSummary, SelectionProcessor
from .figma_reader import FigmaAPIClient, FigmaToScene
from .config import load_config, validate_config

__all__ = [
    "__version__",
    "NodeType",
    "SceneNode",
    "SceneHost",
    "InMemoryHost",
    "SceneError",
    "load_document",
    "save_document",
    "preview_tree",
    "format_component_name",
    "ContainerConfig",
    "ContainerLocator",
    "IconConverter",
    "RunSummary",
    "SelectionProcessor",
    "FigmaAPIClient",
    "FigmaToScene",
    "load_config",
    "validate_config",
]
