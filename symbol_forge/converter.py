"""
Icon 轉換 — 驗證一個 Material Symbol 群組並重建為元件

步驟順序固定：驗證 → 組裝 frame → 提升為元件 → 放入容器 → 最後才刪除原群組。
任何一步失敗時原群組保持不動。
"""

from typing import Optional

from .container import ContainerLocator
from .naming import format_component_name
from .scene import NodeType, SceneHost, SceneNode

SKIP_MESSAGE = "is not a Material Symbol and will be skipped."
BLACK_FILL = {"type": "SOLID", "color": {"r": 0, "g": 0, "b": 0}, "opacity": 1}


class IconConverter:
    """將 Group（同名 Vector + "Bounding box" Rectangle）轉成元件."""

    def __init__(
        self,
        host: SceneHost,
        locator: Optional[ContainerLocator] = None,
        bounding_box_name: str = "Bounding box",
        path_name: str = "Path",
    ):
        self.host = host
        self.locator = locator or ContainerLocator(host)
        self.bounding_box_name = bounding_box_name
        self.path_name = path_name

    def convert(self, group: SceneNode) -> Optional[SceneNode]:
        """成功回傳新元件；失敗時已發出通知並回傳 None."""
        try:
            if not group.is_type(NodeType.GROUP):
                self._skip(group)
                return None

            icon_vector = self.find_icon_vector(group)
            if icon_vector is None:
                self._skip(group)
                return None

            component = self._build_component(group, icon_vector)
            container = self.locator.locate_or_create()
            self.host.append_child(container, component)

            self.host.remove_node(group)
            return component
        except Exception as e:
            self.host.notify(f'Failed to process "{group.name}": {e}')
            return None

    def find_icon_vector(self, group: SceneNode) -> Optional[SceneNode]:
        """單次掃描子節點；同名 vector 有多個時取最後一個。缺任一必要子節點回傳 None."""
        icon_vector = None
        has_bounding_box = False
        for child in group.children:
            if child.is_type(NodeType.VECTOR) and child.name == group.name:
                icon_vector = child
            elif child.is_type(NodeType.RECTANGLE) and child.name == self.bounding_box_name:
                has_bounding_box = True
        if not has_bounding_box:
            return None
        return icon_vector

    def _build_component(self, group: SceneNode, icon_vector: SceneNode) -> SceneNode:
        width, height = group.width, group.height

        frame = self.host.create_frame()
        frame.name = format_component_name(group.name)
        self.host.resize(frame, width, height)
        frame.fills = []
        frame.constrain_proportions = True

        icon_path = self.host.clone_node(icon_vector)
        icon_path.name = self.path_name
        icon_path.fills = [dict(BLACK_FILL, color=dict(BLACK_FILL["color"]))]
        self.host.append_child(frame, icon_path)

        return self.host.promote_to_component(frame)

    def _skip(self, node: SceneNode) -> None:
        self.host.notify(f"{node.name} {SKIP_MESSAGE}")
