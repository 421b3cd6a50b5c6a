"""
Icons 容器定位 — 找到或建立收納所有元件的 Auto Layout frame

只搜尋頁面根層，以及 Section 底下的第一層；巢狀 Section 不往下找。
"""

from dataclasses import dataclass
from typing import Optional

from .scene import NodeType, SceneHost, SceneNode


@dataclass
class ContainerConfig:
    """容器外觀設定."""
    name: str = "Icons"
    width: float = 600
    spacing: float = 20
    padding: float = 20

    @classmethod
    def from_config(cls, cfg: dict) -> "ContainerConfig":
        section = cfg.get("container", {}) if cfg else {}
        if not isinstance(section, dict):
            return cls()
        defaults = cls()
        return cls(
            name=section.get("name", defaults.name),
            width=section.get("width", defaults.width),
            spacing=section.get("spacing", defaults.spacing),
            padding=section.get("padding", defaults.padding),
        )


class ContainerLocator:
    """以名稱 / 類型 / 位置尋找容器，找不到時建立；重複呼叫回傳同一節點."""

    def __init__(self, host: SceneHost, config: Optional[ContainerConfig] = None):
        self.host = host
        self.config = config or ContainerConfig()

    def locate_or_create(self) -> SceneNode:
        found = self.locate()
        if found is not None:
            return found
        return self._create()

    def locate(self) -> Optional[SceneNode]:
        for node in self.host.current_page_children():
            if self._is_container(node):
                return node
            if node.is_type(NodeType.SECTION):
                for child in node.children:
                    if self._is_container(child) and child.parent is node:
                        return child
        return None

    def _is_container(self, node: SceneNode) -> bool:
        return node.is_type(NodeType.FRAME) and node.name == self.config.name

    def _create(self) -> SceneNode:
        cfg = self.config
        container = self.host.create_frame()
        container.name = cfg.name
        container.layout_mode = "HORIZONTAL"
        container.layout_wrap = "WRAP"
        container.item_spacing = cfg.spacing
        container.counter_axis_spacing = cfg.spacing
        container.padding_left = cfg.padding
        container.padding_right = cfg.padding
        container.padding_top = cfg.padding
        container.padding_bottom = cfg.padding
        self.host.resize(container, cfg.width, container.height)
        container.primary_axis_sizing_mode = "FIXED"
        container.x = 0
        container.y = 0
        print(f"   📦 Created '{cfg.name}' container")
        return container
