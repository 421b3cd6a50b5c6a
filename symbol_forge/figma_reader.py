"""
Figma REST API 讀取

讀取 Figma 檔案並轉成場景樹，存成可離線轉換的 JSON 文件。
"""

from typing import Optional

import requests

from .scene import NodeType, SceneNode


class FigmaAPIClient:
    """Figma REST API 唯讀封裝."""

    BASE_URL = "https://api.figma.com/v1"

    def __init__(self, token: str):
        self.token = token
        self.session = requests.Session()
        self.session.headers.update({
            "X-Figma-Token": token,
            "Content-Type": "application/json",
        })

    def get_file(self, file_key: str) -> dict:
        url = f"{self.BASE_URL}/files/{file_key}"
        resp = self.session.get(url)
        resp.raise_for_status()
        return resp.json()


class FigmaToScene:
    """將 Figma API 節點樹轉成 SceneNode 樹."""

    def convert(self, figma_node: dict, parent: Optional[SceneNode] = None) -> SceneNode:
        figma_type = figma_node.get("type", "FRAME")
        bbox = figma_node.get("absoluteBoundingBox") or {}
        node = SceneNode(
            NodeType.PAGE if figma_type == "CANVAS" else NodeType.parse(figma_type),
            name=figma_node.get("name", "Unnamed"),
            id=figma_node.get("id", ""),
            x=bbox.get("x", 0),
            y=bbox.get("y", 0),
            width=bbox.get("width", 0),
            height=bbox.get("height", 0),
            fills=[f for f in figma_node.get("fills", []) if f.get("visible", True)],
            parent=parent,
        )
        if node.is_type(NodeType.FRAME, NodeType.COMPONENT):
            self._apply_auto_layout(node, figma_node)
        node.children = [
            self.convert(c, node) for c in figma_node.get("children", [])
            if c.get("visible", True)
        ]
        return node

    def _apply_auto_layout(self, node: SceneNode, figma_node: dict) -> None:
        node.layout_mode = figma_node.get("layoutMode", "NONE")
        node.layout_wrap = figma_node.get("layoutWrap", "NO_WRAP")
        node.item_spacing = figma_node.get("itemSpacing", 0)
        node.counter_axis_spacing = figma_node.get("counterAxisSpacing", 0)
        node.padding_left = figma_node.get("paddingLeft", 0)
        node.padding_right = figma_node.get("paddingRight", 0)
        node.padding_top = figma_node.get("paddingTop", 0)
        node.padding_bottom = figma_node.get("paddingBottom", 0)
        node.primary_axis_sizing_mode = figma_node.get("primaryAxisSizingMode", "AUTO")
        node.constrain_proportions = bool(figma_node.get("preserveRatio", False))


def select_page(figma_data: dict, page_name: Optional[str] = None,
                page_index: Optional[int] = None) -> Optional[dict]:
    """從 get_file 回應挑出一個頁面（canvas）；預設第一頁."""
    pages = figma_data.get("document", {}).get("children", [])
    if not pages:
        return None
    if page_name:
        for page in pages:
            if page.get("name") == page_name:
                return page
        return None
    if page_index is not None:
        if 0 <= page_index < len(pages):
            return pages[page_index]
        return None
    return pages[0]
