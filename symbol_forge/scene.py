"""
場景圖模型 — 宿主文件的節點樹與能力介面

核心邏輯只依賴 SceneHost 的窄介面；InMemoryHost 以記憶體模擬 Figma 的語意，
供 CLI 離線處理匯出的 JSON 文件與單元測試使用。
"""

import copy
import itertools
import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional


class SceneError(Exception):
    """宿主操作失敗（節點已移除、宿主已結束等）."""


class NodeType(str, Enum):
    PAGE = "PAGE"
    GROUP = "GROUP"
    VECTOR = "VECTOR"
    RECTANGLE = "RECTANGLE"
    FRAME = "FRAME"
    COMPONENT = "COMPONENT"
    SECTION = "SECTION"
    TEXT = "TEXT"
    ELLIPSE = "ELLIPSE"
    INSTANCE = "INSTANCE"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: str) -> "NodeType":
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


# Figma createFrame() 的預設外觀
DEFAULT_FRAME_SIZE = 100
DEFAULT_FRAME_FILLS = [{"type": "SOLID", "color": {"r": 1, "g": 1, "b": 1}, "opacity": 1}]


@dataclass(eq=False)
class SceneNode:
    """場景節點；以物件身分比較，parent 只是反向參照."""
    type: NodeType
    name: str = ""
    id: str = ""
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0
    fills: list = field(default_factory=list)
    children: list = field(default_factory=list, repr=False)
    parent: Optional["SceneNode"] = field(default=None, repr=False)
    # Frame / Component 專屬屬性
    layout_mode: str = "NONE"
    layout_wrap: str = "NO_WRAP"
    item_spacing: float = 0
    counter_axis_spacing: float = 0
    padding_left: float = 0
    padding_right: float = 0
    padding_top: float = 0
    padding_bottom: float = 0
    primary_axis_sizing_mode: str = "AUTO"
    constrain_proportions: bool = False

    def is_type(self, *types: NodeType) -> bool:
        return self.type in types

    def index_in_parent(self) -> int:
        if self.parent is None:
            return -1
        for i, child in enumerate(self.parent.children):
            if child is self:
                return i
        return -1

    def walk(self) -> Iterator["SceneNode"]:
        """深度優先（前序）走訪，含自己."""
        yield self
        for child in self.children:
            yield from child.walk()


_FRAME_PROPS = (
    "layout_mode", "layout_wrap", "item_spacing", "counter_axis_spacing",
    "padding_left", "padding_right", "padding_top", "padding_bottom",
    "primary_axis_sizing_mode", "constrain_proportions",
)


class SceneHost:
    """宿主能力介面：讀取選取與頁面、建立 / 複製 / 移除 / 縮放 / 提升節點、通知."""

    def current_selection(self) -> list:
        raise NotImplementedError

    def current_page_children(self) -> list:
        raise NotImplementedError

    def create_frame(self) -> SceneNode:
        raise NotImplementedError

    def clone_node(self, node: SceneNode) -> SceneNode:
        raise NotImplementedError

    def remove_node(self, node: SceneNode) -> None:
        raise NotImplementedError

    def append_child(self, parent: SceneNode, child: SceneNode) -> None:
        raise NotImplementedError

    def resize(self, node: SceneNode, width: float, height: float) -> None:
        raise NotImplementedError

    def promote_to_component(self, frame: SceneNode) -> SceneNode:
        raise NotImplementedError

    def notify(self, message: str) -> None:
        raise NotImplementedError

    def terminate(self) -> None:
        raise NotImplementedError


class InMemoryHost(SceneHost):
    """記憶體內的宿主實作，行為對齊 Figma Plugin API."""

    def __init__(self, page: Optional[SceneNode] = None, selection: Optional[list] = None,
                 echo: bool = True):
        self.page = page or SceneNode(NodeType.PAGE, name="Page 1", id="0:1")
        self.selection = list(selection or [])
        self.notifications: list[str] = []
        self.terminated = False
        self.echo = echo
        # 接續文件中已存在的 I:n，避免重新載入後 id 重複
        used = [int(n.id[2:]) for n in self.page.walk() if n.id.startswith("I:") and n.id[2:].isdigit()]
        self._ids = itertools.count(max(used, default=0) + 1)

    # ─── 讀取 ────────────────────────────────────────────────────────────

    def current_selection(self) -> list:
        return list(self.selection)

    def current_page_children(self) -> list:
        return list(self.page.children)

    # ─── 變更 ────────────────────────────────────────────────────────────

    def create_frame(self) -> SceneNode:
        self._check_alive()
        frame = SceneNode(
            NodeType.FRAME,
            name="Frame",
            id=self._next_id(),
            width=DEFAULT_FRAME_SIZE,
            height=DEFAULT_FRAME_SIZE,
            fills=copy.deepcopy(DEFAULT_FRAME_FILLS),
        )
        self._attach(self.page, frame)
        return frame

    def clone_node(self, node: SceneNode) -> SceneNode:
        self._check_alive()
        clone = SceneNode(node.type, name=node.name, id=self._next_id(),
                          x=node.x, y=node.y, width=node.width, height=node.height,
                          fills=copy.deepcopy(node.fills))
        for prop in _FRAME_PROPS:
            setattr(clone, prop, getattr(node, prop))
        for child in node.children:
            self._attach(clone, self.clone_node(child))
        return clone

    def remove_node(self, node: SceneNode) -> None:
        self._check_alive()
        if node.parent is None:
            raise SceneError(f"node '{node.name}' has already been removed")
        self._detach(node)
        if node in self.selection:
            self.selection.remove(node)

    def append_child(self, parent: SceneNode, child: SceneNode) -> None:
        self._check_alive()
        if child is parent or any(n is parent for n in child.walk()):
            raise SceneError(f"cannot append '{child.name}' into its own subtree")
        self._detach(child)
        self._attach(parent, child)

    def resize(self, node: SceneNode, width: float, height: float) -> None:
        self._check_alive()
        if width <= 0 or height <= 0:
            raise SceneError(f"invalid size {width}x{height} for '{node.name}'")
        node.width = width
        node.height = height

    def promote_to_component(self, frame: SceneNode) -> SceneNode:
        self._check_alive()
        if not frame.is_type(NodeType.FRAME):
            raise SceneError(f"'{frame.name}' is not a frame")
        component = SceneNode(NodeType.COMPONENT, name=frame.name, id=self._next_id(),
                              x=frame.x, y=frame.y, width=frame.width, height=frame.height,
                              fills=copy.deepcopy(frame.fills))
        for prop in _FRAME_PROPS:
            setattr(component, prop, getattr(frame, prop))
        for child in list(frame.children):
            self._detach(child)
            self._attach(component, child)
        parent, index = frame.parent, frame.index_in_parent()
        if parent is not None:
            self._detach(frame)
            self._attach(parent, component, index)
        return component

    def notify(self, message: str) -> None:
        self.notifications.append(message)
        if self.echo:
            print(f"   🔔 {message}")

    def terminate(self) -> None:
        self.terminated = True

    # ─── 內部 ────────────────────────────────────────────────────────────

    def _next_id(self) -> str:
        return f"I:{next(self._ids)}"

    def _check_alive(self) -> None:
        if self.terminated:
            raise SceneError("host has been terminated")

    @staticmethod
    def _attach(parent: SceneNode, child: SceneNode, index: Optional[int] = None) -> None:
        if index is None or index < 0:
            parent.children.append(child)
        else:
            parent.children.insert(index, child)
        child.parent = parent

    @staticmethod
    def _detach(node: SceneNode) -> None:
        if node.parent is None:
            return
        node.parent.children = [c for c in node.parent.children if c is not node]
        node.parent = None


# ─── 序列化 ───────────────────────────────────────────────────────────────

def node_to_dict(node: SceneNode) -> dict:
    data = {
        "id": node.id,
        "type": node.type.value,
        "name": node.name,
        "x": node.x,
        "y": node.y,
        "width": node.width,
        "height": node.height,
    }
    if node.fills:
        data["fills"] = copy.deepcopy(node.fills)
    if node.is_type(NodeType.FRAME, NodeType.COMPONENT):
        data["layoutMode"] = node.layout_mode
        data["layoutWrap"] = node.layout_wrap
        data["itemSpacing"] = node.item_spacing
        data["counterAxisSpacing"] = node.counter_axis_spacing
        data["paddingLeft"] = node.padding_left
        data["paddingRight"] = node.padding_right
        data["paddingTop"] = node.padding_top
        data["paddingBottom"] = node.padding_bottom
        data["primaryAxisSizingMode"] = node.primary_axis_sizing_mode
        data["constrainProportions"] = node.constrain_proportions
    if node.children:
        data["children"] = [node_to_dict(c) for c in node.children]
    return data


def node_from_dict(data: dict, parent: Optional[SceneNode] = None) -> SceneNode:
    node = SceneNode(
        NodeType.parse(data.get("type", "FRAME")),
        name=data.get("name", ""),
        id=data.get("id", ""),
        x=data.get("x", 0),
        y=data.get("y", 0),
        width=data.get("width", 0),
        height=data.get("height", 0),
        fills=copy.deepcopy(data.get("fills", [])),
        parent=parent,
        layout_mode=data.get("layoutMode", "NONE"),
        layout_wrap=data.get("layoutWrap", "NO_WRAP"),
        item_spacing=data.get("itemSpacing", 0),
        counter_axis_spacing=data.get("counterAxisSpacing", 0),
        padding_left=data.get("paddingLeft", 0),
        padding_right=data.get("paddingRight", 0),
        padding_top=data.get("paddingTop", 0),
        padding_bottom=data.get("paddingBottom", 0),
        primary_axis_sizing_mode=data.get("primaryAxisSizingMode", "AUTO"),
        constrain_proportions=data.get("constrainProportions", False),
    )
    node.children = [node_from_dict(c, node) for c in data.get("children", [])]
    return node


def find_nodes(page: SceneNode, keys: list) -> list:
    """依 id 或名稱找節點，依頁面深度優先順序回傳；命中的節點不再往下找（同 Figma 選取）。空字串不比對."""
    wanted = {k for k in keys if k}
    found = []

    def visit(node: SceneNode) -> None:
        for child in node.children:
            if child.id in wanted or child.name in wanted:
                found.append(child)
            else:
                visit(child)

    visit(page)
    return found


def load_document(path: str, echo: bool = True) -> InMemoryHost:
    """載入 JSON 文件，回傳以其頁面與已存選取建立的 InMemoryHost."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise SceneError(f"'{path}' is not a scene document")
    try:
        page = node_from_dict({**data, "type": "PAGE"})
        selection = find_nodes(page, data.get("selection", []))
        return InMemoryHost(page, selection, echo=echo)
    except (AttributeError, TypeError) as e:
        raise SceneError(f"'{path}' is not a valid scene document: {e}") from e


def save_document(host: InMemoryHost, path: str) -> str:
    data = node_to_dict(host.page)
    data.setdefault("children", [])
    data["selection"] = [n.id for n in host.selection]
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return path


def preview_tree(node: SceneNode, indent: int = 0) -> str:
    """除錯用：印出場景樹."""
    lines = [f"{'  ' * indent}├─ {node.name}  [{node.type.value}]"]
    for child in node.children:
        lines.append(preview_tree(child, indent + 1))
    return "\n".join(lines)
