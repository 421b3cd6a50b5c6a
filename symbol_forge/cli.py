#!/usr/bin/env python3
"""
symbol-forge CLI — Material Symbols → Figma 元件

  python -m symbol_forge.cli convert doc.json [--select home]   # 轉換選取的群組
  python -m symbol_forge.cli preview doc.json                   # 預覽場景樹
  python -m symbol_forge.cli pull --file-key KEY                # 從 Figma 讀取文件
  python -m symbol_forge.cli watch doc.json                     # 文件變更時自動轉換
"""

import argparse
import os
import time
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from . import __version__
from .config import DEFAULT_CONFIG_PATH, load_config
from .container import ContainerConfig, ContainerLocator
from .converter import IconConverter
from .figma_reader import FigmaAPIClient, FigmaToScene, select_page
from .scene import InMemoryHost, SceneError, find_nodes, load_document, preview_tree, save_document
from .selection import SelectionProcessor


def _section(config: dict, name: str) -> dict:
    """取設定區塊；非 JSON 物件（validate_config 已警告）視為空."""
    section = config.get(name, {})
    return section if isinstance(section, dict) else {}


def _output_path(document: str, config: dict, output=None) -> str:
    if output:
        return output
    output_dir = _section(config, "export").get("outputDir") or str(Path(document).parent)
    return os.path.join(output_dir, f"{Path(document).stem}.converted.json")


def build_processor(host: InMemoryHost, config: dict) -> SelectionProcessor:
    """依設定組裝 locator / converter / processor."""
    icon_cfg = _section(config, "icon")
    locator = ContainerLocator(host, ContainerConfig.from_config(config))
    converter = IconConverter(
        host,
        locator,
        bounding_box_name=icon_cfg.get("boundingBoxName", "Bounding box"),
        path_name=icon_cfg.get("pathName", "Path"),
    )
    return SelectionProcessor(host, converter)


def perform_convert(document: str, args, config: dict):
    """Core convert logic, shared by convert and watch commands.

    Returns:
        RunSummary, or None when the document could not be loaded.
    """
    print(f"🧩 Converting Material Symbols in: {document}")
    try:
        host = load_document(document)
    except (OSError, ValueError, SceneError) as e:
        print(f"   ❌ Failed to load document: {e}")
        return None

    if getattr(args, "select", None):
        host.selection = find_nodes(host.page, args.select)
    print(f"   [1/2] {len(host.selection)} selected node(s)")

    summary = build_processor(host, config).run()

    out_path = _output_path(document, config, getattr(args, "output", None))
    print("   [2/2] Saving document...")
    try:
        save_document(host, out_path)
    except OSError as e:
        print(f"   ❌ Failed to save document: {e}")
        return summary
    print(f"   ✅ Saved to {out_path}")
    return summary


def cmd_convert(args, config: dict):
    """Convert: 載入文件 → 轉換選取 → 存檔."""
    perform_convert(args.document, args, config)


def cmd_preview(args, config: dict):
    """預覽場景樹."""
    print(f"👁️  Preview scene tree: {args.document}")
    try:
        host = load_document(args.document, echo=False)
    except (OSError, ValueError, SceneError) as e:
        print(f"❌ Failed to load document: {e}")
        return
    print(preview_tree(host.page))
    print(f"\nTotal nodes: {sum(1 for _ in host.page.walk()) - 1}")
    if host.selection:
        print(f"Selected: {', '.join(n.name for n in host.selection)}")


def cmd_pull(args, config: dict):
    """Pull: 從 Figma 讀取檔案，轉成場景文件."""
    figma_cfg = _section(config, "figma")
    token = figma_cfg.get("personalAccessToken") or os.environ.get("FIGMA_TOKEN")
    file_key = args.file_key or figma_cfg.get("fileKey")

    if not token:
        print("❌ 請設定 FIGMA_TOKEN 環境變數，或在 symbol-forge.config.json 的 figma.personalAccessToken 設定。")
        print("   取得方式：Figma → Settings → Personal access tokens → 新增")
        return
    if not file_key:
        print("❌ 請使用 --file-key 或在 config 的 figma.fileKey 設定 Figma 檔案 key。")
        return

    print(f"📥 Pulling from Figma: {file_key}")

    # Figma API — 友善錯誤訊息
    client = FigmaAPIClient(token)
    try:
        figma_data = client.get_file(file_key)
    except Exception as e:
        status = getattr(getattr(e, "response", None), "status_code", None)
        if status == 403:
            print("❌ Figma API 403：Token 無效或已過期，請重新產生 FIGMA_TOKEN。")
        elif status == 404:
            print(f"❌ Figma API 404：找不到檔案 '{file_key}'，請確認 file key 是否正確。")
        else:
            print(f"❌ Figma API 錯誤：{e}")
        return

    page_data = select_page(figma_data, page_name=args.page, page_index=args.page_index)
    if page_data is None:
        print("❌ 找不到指定頁面（或此 Figma 檔案沒有任何頁面）。")
        return

    page = FigmaToScene().convert(page_data)
    print(f"   ✅ Fetched page '{page.name}' ({sum(1 for _ in page.walk()) - 1} nodes)")

    output_dir = _section(config, "export").get("outputDir", ".symbol-forge")
    out_path = args.output or os.path.join(output_dir, f"{file_key}.json")
    save_document(InMemoryHost(page, echo=False), out_path)
    print(f"   📄 Document saved to {out_path}")
    print(f"   💡 Next: symbol-forge convert {out_path} --select <icon name>")


class ChangeHandler(FileSystemEventHandler):
    """文件變更事件處理器，帶 debounce 防抖。"""

    def __init__(self, document: str, callback, debounce: float = 1.0):
        self.document = os.path.abspath(document)
        self.callback = callback
        self.last_trigger = 0.0
        self.debounce_seconds = debounce

    def on_modified(self, event):
        if event.is_directory:
            return
        if os.path.abspath(event.src_path) != self.document:
            return
        current_time = time.time()
        if current_time - self.last_trigger < self.debounce_seconds:
            return
        self.last_trigger = current_time
        print(f"\n🔄 Document changed: {event.src_path}")
        self.callback()


def cmd_watch(args, config: dict):
    """Watch: 監聽文件變更並自動執行 convert."""
    document = args.document
    watch_dir = str(Path(document).resolve().parent)
    out_path = os.path.abspath(_output_path(document, config, args.output))
    if out_path == os.path.abspath(document):
        print("❌ --output 不可與來源文件相同（會造成無限觸發）。")
        return
    print(f"👀 Watching for changes in '{document}'...")
    print("   Press Ctrl+C to stop.")

    def convert_task():
        return perform_convert(document, args, config)

    # 初始執行一次
    convert_task()

    event_handler = ChangeHandler(document, convert_task)
    observer = Observer()
    observer.schedule(event_handler, path=watch_dir, recursive=False)
    observer.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\n👋 Stopping watch...")
        observer.stop()
    finally:
        observer.join()


def main():
    parser = argparse.ArgumentParser(
        description="symbol-forge: Material Symbols → Figma components",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Config path")
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    convert_p = sub.add_parser("convert", help="Convert selected groups into components",
        epilog="Examples:\n  symbol-forge convert icons.json\n  symbol-forge convert icons.json --select home --select arrow_back",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    convert_p.add_argument("document", help="Scene document (JSON)")
    convert_p.add_argument("--select", action="append", help="Node id or name to select (repeatable)")
    convert_p.add_argument("--output", "-o", help="Output document path")

    preview_p = sub.add_parser("preview", help="Preview scene tree",
        epilog="Examples:\n  symbol-forge preview icons.json",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    preview_p.add_argument("document", help="Scene document (JSON)")

    pull_p = sub.add_parser("pull", help="Figma → scene document",
        epilog="Examples:\n  symbol-forge pull --file-key ABC123\n  symbol-forge pull --file-key ABC123 --page 'Icons'",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    pull_p.add_argument("--file-key", help="Figma file key")
    pull_p.add_argument("--page", help="Page name to pull")
    pull_p.add_argument("--page-index", type=int, help="Page index to pull")
    pull_p.add_argument("--output", "-o", help="Output document path")

    watch_p = sub.add_parser("watch", help="Watch a document and auto-convert",
        epilog="Examples:\n  symbol-forge watch icons.json --output out/icons.json",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    watch_p.add_argument("document", help="Scene document (JSON)")
    watch_p.add_argument("--select", action="append", help="Node id or name to select (repeatable)")
    watch_p.add_argument("--output", "-o", help="Output document path")

    args = parser.parse_args()
    config = load_config(args.config)

    if args.command == "convert":
        cmd_convert(args, config)
    elif args.command == "preview":
        cmd_preview(args, config)
    elif args.command == "pull":
        cmd_pull(args, config)
    elif args.command == "watch":
        cmd_watch(args, config)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
