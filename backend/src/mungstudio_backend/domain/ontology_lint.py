"""
MuNG 类本体的数据质量检查（面向工具/CI）。

定位：
- 注册表构建只拒绝“结构非法”的源表；“合法但有质量问题”的数据在这里报告。
- 报告三类问题：
  - 非 SMuFL 类缺少偏离理由（justified_divergence 为 False）；
  - standard_equivalents 指向本体中不存在的类；
  - standard_equivalents 指向的类本身也不是 SMuFL 类。

约束：
- 该模块只做诊断，不修改注册表，也不抛异常。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .mung_classes import MungClassOntology


@dataclass(frozen=True)
class UnjustifiedDivergence:
    class_name: str
    reason: str = "not_smufl_without_justification"


@dataclass(frozen=True)
class UnresolvedEquivalent:
    class_name: str
    equivalent: str
    reason: str = "smufl_equivalent_unknown_class"


@dataclass(frozen=True)
class MisalignedEquivalent:
    class_name: str
    equivalent: str
    reason: str = "smufl_equivalent_not_smufl"


@dataclass(frozen=True)
class OntologyReport:
    class_count: int
    unjustified_divergences: list[UnjustifiedDivergence]
    unresolved_equivalents: list[UnresolvedEquivalent]
    misaligned_equivalents: list[MisalignedEquivalent]

    @property
    def issue_count(self) -> int:
        return len(self.unjustified_divergences) + len(self.unresolved_equivalents) + len(self.misaligned_equivalents)

    @property
    def ok(self) -> bool:
        return self.issue_count == 0


def compute_ontology_report(ontology: MungClassOntology) -> OntologyReport:
    unjustified: list[UnjustifiedDivergence] = []
    unresolved: list[UnresolvedEquivalent] = []
    misaligned: list[MisalignedEquivalent] = []
    for mc in ontology.classes:
        if mc.justified_divergence is False:
            unjustified.append(UnjustifiedDivergence(class_name=mc.class_name))
        for eq in mc.standard_equivalents or ():
            target = ontology.by_name(eq)
            if target is None:
                unresolved.append(UnresolvedEquivalent(class_name=mc.class_name, equivalent=eq))
            elif not target.is_standard_aligned:
                misaligned.append(MisalignedEquivalent(class_name=mc.class_name, equivalent=eq))

    return OntologyReport(
        class_count=len(ontology),
        unjustified_divergences=unjustified,
        unresolved_equivalents=unresolved,
        misaligned_equivalents=misaligned,
    )


def report_to_dict(report: OntologyReport) -> dict[str, Any]:
    return {
        "ok": report.ok,
        "class_count": report.class_count,
        "issue_count": report.issue_count,
        "unjustified_divergences": [{"class_name": i.class_name, "reason": i.reason} for i in report.unjustified_divergences],
        "unresolved_equivalents": [
            {"class_name": i.class_name, "equivalent": i.equivalent, "reason": i.reason} for i in report.unresolved_equivalents
        ],
        "misaligned_equivalents": [
            {"class_name": i.class_name, "equivalent": i.equivalent, "reason": i.reason} for i in report.misaligned_equivalents
        ],
    }
