"""
選取處理 — 逐一轉換選取中的群組，統計結果並發出一則摘要通知
"""

from dataclasses import dataclass, field
from typing import Optional

from .converter import IconConverter
from .scene import NodeType, SceneHost

EMPTY_SELECTION_MESSAGE = "Select one or more Material Symbols to convert."
NOTHING_CONVERTED_MESSAGE = "No valid Material Symbols found in selection."


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


@dataclass
class RunSummary:
    converted: int = 0
    skipped: int = 0
    components: list = field(default_factory=list)

    def message(self) -> Optional[str]:
        """三種摘要；兩者皆 0 時（空選取）回傳 None."""
        converted = f"Converted {_plural(self.converted, 'icon component')}."
        if self.converted > 0 and self.skipped == 0:
            return converted
        if self.converted > 0:
            return f"{converted} Skipped {_plural(self.skipped, 'invalid item')}."
        if self.skipped > 0:
            return NOTHING_CONVERTED_MESSAGE
        return None


class SelectionProcessor:
    """整個執行流程的進入點."""

    def __init__(self, host: SceneHost, converter: Optional[IconConverter] = None):
        self.host = host
        self.converter = converter or IconConverter(host)

    def run(self, selection: Optional[list] = None) -> RunSummary:
        if selection is None:
            selection = self.host.current_selection()
        summary = RunSummary()

        if not selection:
            self.host.notify(EMPTY_SELECTION_MESSAGE)
            self.host.terminate()
            return summary

        for node in selection:
            if not node.is_type(NodeType.GROUP):
                summary.skipped += 1
                continue
            component = self.converter.convert(node)
            if component is not None:
                summary.converted += 1
                summary.components.append(component)
            else:
                summary.skipped += 1

        message = summary.message()
        if message:
            self.host.notify(message)
        self.host.terminate()
        return summary
