"""
MuNG 类本体注册表（MungClassOntology）。

定位：
- 持有全部 MungClass 描述符，并提供三个只读视图：
  classes（按类名排序的描述符）、class_names（同序的类名）、by_name（按类名精确查找）。
- 源表是随包分发的 `data/mung_classes.yaml`（人工维护）；进程内只构建一次，之后只读。

约束：
- 类名唯一：源表里出现重复类名是数据错误，构建时直接失败。
- 任意一条声明非法即整体失败：系统没有“半个本体”的降级路径。
- by_name 查不到返回 None，不抛异常。
"""

from __future__ import annotations

import threading
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping

import yaml

from .mung_class import MungClass, RawMungClassDefinition, parse_mung_class_definition
from ..utils.paths import mung_classes_yaml_path


ONTOLOGY_SCHEMA = "MungClassOntology"


class MungClassOntology:
    """不可变的 MuNG 类注册表。"""

    __slots__ = ("_classes", "_class_names", "_by_name")

    def __init__(self, definitions: Mapping[str, RawMungClassDefinition | Mapping[str, Any]]) -> None:
        if not isinstance(definitions, Mapping):
            raise ValueError(f"MungClassOntology: definitions 必须是 dict，实际为 {type(definitions).__name__}")
        for name in definitions:
            if not isinstance(name, str) or not name:
                raise ValueError(f"MungClassOntology: 类名必须是非空字符串：{name!r}")
        classes = tuple(parse_mung_class_definition(name, definitions[name]) for name in sorted(definitions))
        self._classes: tuple[MungClass, ...] = classes
        self._class_names: tuple[str, ...] = tuple(mc.class_name for mc in classes)
        self._by_name: Mapping[str, MungClass] = MappingProxyType({mc.class_name: mc for mc in classes})

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "MungClassOntology":
        """从源表格式（[{name: ..., 其他字段...}, ...]）构建。"""

        definitions: dict[str, dict[str, Any]] = {}
        for i, rec in enumerate(records):
            if not isinstance(rec, Mapping):
                raise ValueError(f"MungClassOntology: classes[{i}] 必须是 dict")
            fields = dict(rec)
            name = fields.pop("name", None)
            if not isinstance(name, str) or not name:
                raise ValueError(f"MungClassOntology: classes[{i}].name 必须是非空字符串：{name!r}")
            if name in definitions:
                raise ValueError(f"MungClassOntology: 类名重复：{name!r}（classes[{i}]）")
            definitions[name] = fields
        return cls(definitions)

    @property
    def classes(self) -> tuple[MungClass, ...]:
        return self._classes

    @property
    def class_names(self) -> tuple[str, ...]:
        return self._class_names

    @property
    def classes_by_name(self) -> Mapping[str, MungClass]:
        return self._by_name

    def by_name(self, name: str) -> MungClass | None:
        return self._by_name.get(name)

    def __len__(self) -> int:
        return len(self._classes)

    def __iter__(self) -> Iterator[MungClass]:
        return iter(self._classes)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MungClassOntology):
            return NotImplemented
        return self._classes == other._classes

    def __hash__(self) -> int:
        return hash(self._classes)

    def __repr__(self) -> str:
        return f"MungClassOntology({len(self._classes)} classes)"

    def to_dict(self) -> list[dict[str, Any]]:
        return [mc.to_dict() for mc in self._classes]


def _parse_ontology_document(raw: Any, *, source: str) -> MungClassOntology:
    if not isinstance(raw, dict):
        raise ValueError(f"MungClassOntology: 顶层必须是 dict（{source}）")
    schema = raw.get("schema")
    if schema != ONTOLOGY_SCHEMA:
        raise ValueError(f"MungClassOntology: schema 必须为 {ONTOLOGY_SCHEMA!r}，实际为 {schema!r}（{source}）")
    records = raw.get("classes")
    if not isinstance(records, list):
        raise ValueError(f"MungClassOntology: 缺少 classes list（{source}）")
    return MungClassOntology.from_records(records)


def load_mung_class_ontology(path: Path | str) -> MungClassOntology:
    """从 YAML 源表构建注册表（每次调用都重新构建）。"""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"缺少 MuNG 类源表文件：{path}")
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"MungClassOntology: YAML 解析失败（{path}）：{e}") from e
    return _parse_ontology_document(raw, source=str(path))


_LOAD_LOCK = threading.Lock()


@lru_cache(maxsize=1)
def _load_bundled_ontology() -> MungClassOntology:
    return load_mung_class_ontology(mung_classes_yaml_path())


def load_mung_class_ontology_from_package() -> MungClassOntology:
    """进程级单例：随包分发的源表只构建一次，并发首次访问也只构建一次。"""

    with _LOAD_LOCK:
        return _load_bundled_ontology()


def mung_classes() -> tuple[MungClass, ...]:
    """全部已知 MuNG 类，按类名排序。"""

    return load_mung_class_ontology_from_package().classes


def mung_class_names() -> tuple[str, ...]:
    """全部已知 MuNG 类名，按字母序排序。"""

    return load_mung_class_ontology_from_package().class_names


def mung_class_by_name(name: str) -> MungClass | None:
    return load_mung_class_ontology_from_package().by_name(name)
