"""
包内路径工具。

定位：
- 运行期只读取包内 `data/` 下的源表（随包分发，不依赖仓库目录结构）。
"""

from __future__ import annotations

from pathlib import Path


def package_root() -> Path:
    return Path(__file__).resolve().parents[1]


def package_data_dir() -> Path:
    return package_root() / "data"


def mung_classes_yaml_path() -> Path:
    return package_data_dir() / "mung_classes.yaml"
