"""設定檔載入與基本驗證."""

import json
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_PATH = "symbol-forge.config.json"

# 已知有效的頂層欄位
_KNOWN_TOP_KEYS = {"figma", "container", "icon", "export"}

# 各區塊已知欄位（用於拼字提示）
_KNOWN_SECTION_KEYS = {
    "figma": {"personalAccessToken", "fileKey"},
    "container": {"name", "width", "spacing", "padding"},
    "icon": {"boundingBoxName", "pathName"},
    "export": {"outputDir"},
}


def _warn(msg: str) -> None:
    print(f"   ⚠️  [config] {msg}")


def validate_config(cfg: dict) -> None:
    """對 config 做基本欄位驗證，印出警告但不拋例外。"""
    if not cfg:
        return

    # 頂層未知欄位
    for key in cfg:
        if key not in _KNOWN_TOP_KEYS:
            known = ", ".join(sorted(_KNOWN_TOP_KEYS))
            _warn(f"未知頂層欄位 '{key}'（已知欄位：{known}）")

    # 各區塊欄位
    for section, known_keys in _KNOWN_SECTION_KEYS.items():
        section_cfg = cfg.get(section, {})
        if not isinstance(section_cfg, dict):
            _warn(f"'{section}' 應為 JSON 物件，目前是 {type(section_cfg).__name__}")
            continue
        for key in section_cfg:
            if key not in known_keys:
                known = ", ".join(sorted(known_keys))
                _warn(f"[{section}] 未知欄位 '{key}'（已知欄位：{known}）")

    # container 數值欄位
    container = cfg.get("container", {})
    if isinstance(container, dict):
        for dim in ("width", "spacing", "padding"):
            val = container.get(dim)
            if val is None:
                continue
            if isinstance(val, bool) or not isinstance(val, (int, float)):
                _warn(f"container.{dim} 應為數字，目前是 {type(val).__name__}")
            elif val < 0:
                _warn(f"container.{dim} 不應為負數（{val}）")

    # icon 名稱欄位不可為空字串
    icon = cfg.get("icon", {})
    if isinstance(icon, dict):
        for key in ("boundingBoxName", "pathName"):
            if key in icon and not str(icon[key]).strip():
                _warn(f"icon.{key} 為空字串，將無法比對圖層")


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """載入 JSON 設定檔，不存在則回傳空 dict；存在則做基本驗證。"""
    path = Path(config_path)
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg: Any = json.load(f)
    if not isinstance(cfg, dict):
        print(f"   ⚠️  [config] '{config_path}' 格式錯誤，應為 JSON 物件，回傳空設定。")
        return {}
    validate_config(cfg)
    return cfg
