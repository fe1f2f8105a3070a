"""
检查：MuNG 类源表的数据质量。

定位：
- 构建注册表（结构非法直接失败），然后报告：
  - 非 SMuFL 类缺少偏离理由（既不是容器、也不可转写、也没有 divergence_justification）；
  - standard_equivalents 指向不存在的类，或指向的类本身不是 SMuFL 类。
- 这些是数据质量信号，默认只提示；`--strict` 时有问题即返回非 0（用于 CI）。

运行：
  python scripts/check_mung_class_ontology.py
  python scripts/check_mung_class_ontology.py --strict
  python scripts/check_mung_class_ontology.py --json
  python scripts/check_mung_class_ontology.py --path some/other/mung_classes.yaml

返回码：
  0 - 源表合法（非 strict 模式下允许有质量问题）
  1 - strict 模式下发现质量问题
  2 - 源表结构非法，无法构建注册表
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path


REPO_ROOT = Path(__file__).resolve().parents[1]


def _ensure_backend_src_on_path(repo_root: Path) -> None:
    src_dir = repo_root / "backend" / "src"
    if not src_dir.exists():
        raise RuntimeError(f"找不到 backend/src：{src_dir}")
    sys.path.insert(0, str(src_dir))


def main(argv: list[str] | None = None) -> int:
    _ensure_backend_src_on_path(REPO_ROOT)

    from mungstudio_backend.domain.mung_classes import load_mung_class_ontology
    from mungstudio_backend.domain.ontology_lint import compute_ontology_report, report_to_dict
    from mungstudio_backend.utils.paths import mung_classes_yaml_path

    parser = argparse.ArgumentParser(add_help=True)
    parser.add_argument("--path", type=Path, default=None, help="MuNG 类源表（默认使用随包分发的 mung_classes.yaml）")
    parser.add_argument("--json", action="store_true", default=False, help="以 JSON 输出报告")
    parser.add_argument("--strict", action="store_true", default=False, help="有任何质量问题即返回 1")
    args = parser.parse_args(argv)

    path = args.path or mung_classes_yaml_path()
    try:
        ontology = load_mung_class_ontology(path)
    except (ValueError, FileNotFoundError) as e:
        print(f"[FAIL] {e}")
        return 2

    report = compute_ontology_report(ontology)

    if args.json:
        print(json.dumps(report_to_dict(report), ensure_ascii=False, indent=2))
    else:
        for i in report.unjustified_divergences:
            print(f"[WARN] {i.class_name} - 非 SMuFL 类缺少偏离理由")
        for i in report.unresolved_equivalents:
            print(f"[WARN] {i.class_name} - smufl 等价类不存在：{i.equivalent!r}")
        for i in report.misaligned_equivalents:
            print(f"[WARN] {i.class_name} - smufl 等价类本身不是 SMuFL 类：{i.equivalent!r}")

        if report.ok:
            print(f"[OK] {report.class_count} 个类，未发现数据质量问题")
        else:
            print(f"\n共 {report.class_count} 个类，发现 {report.issue_count} 处数据质量问题。")

    if args.strict and not report.ok:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
