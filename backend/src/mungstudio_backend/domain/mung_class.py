"""
MuNG 类（MungClass）的数据结构与派生规则。

定位：
- 源表（data/mung_classes.yaml）里每一条是“原始声明”（RawMungClassDefinition），只写例外字段。
- 本模块把原始声明规整为“类描述符”（MungClass），并派生两个一致性字段：
  is_standard_aligned（是否 SMuFL 类）与 justified_divergence（偏离 SMuFL 是否有理由）。

派生规则：
- SMuFL 类：justified_divergence = None（问题不适用）。
- 非 SMuFL 类：容器节点 / 可转写 / 带 divergence_justification 三者之一即为 True，否则 False。
  False 是数据质量信号（由 ontology_lint 报告），不是运行期错误。

约束：
- 原始声明非法（例如缺 glyph、未知字段）必须显式抛错，不做静默降级。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, Mapping

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError, field_validator


NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]


@dataclass(frozen=True)
class Aligned:
    """与 SMuFL 中同名字形一致。"""

    is_aligned: ClassVar[bool] = True


@dataclass(frozen=True)
class Diverged:
    """不是 SMuFL 类。"""

    is_aligned: ClassVar[bool] = False


@dataclass(frozen=True)
class DivergedWithReason:
    """不是 SMuFL 类，且在 not_standard_aligned 上直接写了一段说明（历史写法）。

    注意：该说明只做记录，不算作偏离理由；理由只认 is_container / is_transcribable /
    divergence_justification。
    """

    reason: str
    is_aligned: ClassVar[bool] = False


SmuflAlignment = Aligned | Diverged | DivergedWithReason


class RawMungClassDefinition(BaseModel):
    """源表中的一条原始声明（缺省字段即默认值）。"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    glyph: NonEmptyStr
    in_reference_dataset: StrictBool = False
    not_standard_aligned: StrictBool | StrictStr = False
    standard_equivalents: tuple[NonEmptyStr, ...] | None = None
    is_container: StrictBool = False
    divergence_justification: NonEmptyStr | None = None
    is_transcribable: StrictBool = False

    @field_validator("not_standard_aligned")
    @classmethod
    def _reject_empty_marker(cls, v: bool | str) -> bool | str:
        if isinstance(v, str) and not v.strip():
            raise ValueError("not_standard_aligned 为字符串时不能为空")
        return v

    @field_validator("standard_equivalents")
    @classmethod
    def _reject_empty_equivalents(cls, v: tuple[str, ...] | None) -> tuple[str, ...] | None:
        if v is not None and not v:
            raise ValueError("standard_equivalents 不能为空列表（不需要时省略该字段）")
        return v

    @property
    def alignment(self) -> SmuflAlignment:
        marker = self.not_standard_aligned
        if isinstance(marker, str):
            return DivergedWithReason(reason=marker)
        return Diverged() if marker else Aligned()


@dataclass(frozen=True)
class MungClass:
    """规整后的 MuNG 类描述符（构造后不可变）。"""

    class_name: str
    glyph: str
    is_standard_aligned: bool
    standard_equivalents: tuple[str, ...] | None
    in_reference_dataset: bool
    is_container: bool
    divergence_justification: str | None
    justified_divergence: bool | None
    is_transcribable: bool
    alignment: SmuflAlignment

    def to_dict(self) -> dict[str, Any]:
        """序列化为前端使用的结构（键名与 MuNG Studio 前端一致）。"""

        return {
            "className": self.class_name,
            "unicode": self.glyph,
            "isSmufl": self.is_standard_aligned,
            "smuflEquivalents": list(self.standard_equivalents) if self.standard_equivalents is not None else None,
            "isMuscimaPP20": self.in_reference_dataset,
            "isContainer": self.is_container,
            "otherSmuflDivergenceJustification": self.divergence_justification,
            "justifiedSmuflDivergence": self.justified_divergence,
            "isTranscribable": self.is_transcribable,
        }


def _format_validation_error(e: ValidationError) -> str:
    parts: list[str] = []
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc or '<root>'}: {err.get('msg')}")
    return "; ".join(parts)


def coerce_raw_definition(
    class_name: str, definition: RawMungClassDefinition | Mapping[str, Any]
) -> RawMungClassDefinition:
    if isinstance(definition, RawMungClassDefinition):
        return definition
    if not isinstance(definition, Mapping):
        raise ValueError(f"MungClass[{class_name!r}]: 定义必须是 dict，实际为 {type(definition).__name__}")
    try:
        return RawMungClassDefinition.model_validate(dict(definition))
    except ValidationError as e:
        raise ValueError(f"MungClass[{class_name!r}]: 定义非法：{_format_validation_error(e)}") from e


def parse_mung_class_definition(
    class_name: str, definition: RawMungClassDefinition | Mapping[str, Any]
) -> MungClass:
    """把一条原始声明规整为 MungClass（纯函数，不修改输入）。"""

    if not isinstance(class_name, str) or not class_name:
        raise ValueError(f"MungClass: 类名必须是非空字符串：{class_name!r}")
    raw = coerce_raw_definition(class_name, definition)

    alignment = raw.alignment
    is_standard_aligned = alignment.is_aligned
    is_container = raw.is_container
    if is_standard_aligned:
        justified_divergence = None
    else:
        justified_divergence = (
            is_container or raw.is_transcribable is True or raw.divergence_justification is not None
        )

    return MungClass(
        class_name=class_name,
        glyph=raw.glyph,
        is_standard_aligned=is_standard_aligned,
        standard_equivalents=raw.standard_equivalents,
        in_reference_dataset=raw.in_reference_dataset,
        is_container=is_container,
        divergence_justification=raw.divergence_justification,
        justified_divergence=justified_divergence,
        is_transcribable=raw.is_transcribable,
        alignment=alignment,
    )
