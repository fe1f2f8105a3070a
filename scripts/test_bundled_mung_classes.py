"""
随包分发的 MuNG 类源表（data/mung_classes.yaml）回归测试。

定位：
- 源表必须能构建注册表；对每个类检查派生字段的一致性；
- 抽查几类典型条目（SMuFL 类、容器、缺理由的非 SMuFL 类、可转写文本类）；
- 进程级单例：多线程并发首次访问只构建一次。

用法：
  python scripts/test_bundled_mung_classes.py
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
import sys


REPO_ROOT = Path(__file__).resolve().parents[1]


def _ensure_backend_src_on_path(repo_root: Path) -> None:
    src_dir = repo_root / "backend" / "src"
    if not src_dir.exists():
        raise RuntimeError(f"找不到 backend/src：{src_dir}")
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


_ensure_backend_src_on_path(REPO_ROOT)

from mungstudio_backend.domain import mung_classes as mung_classes_module  # noqa: E402
from mungstudio_backend.domain.mung_class import DivergedWithReason  # noqa: E402
from mungstudio_backend.domain.mung_classes import (  # noqa: E402
    load_mung_class_ontology,
    load_mung_class_ontology_from_package,
    mung_class_by_name,
    mung_class_names,
    mung_classes,
)
from mungstudio_backend.utils.paths import mung_classes_yaml_path, package_data_dir, package_root  # noqa: E402


def test_bundled_table_builds() -> None:
    onto = load_mung_class_ontology_from_package()
    assert len(onto) == 378
    assert sum(1 for mc in onto if mc.is_standard_aligned) == 184
    assert sum(1 for mc in onto if mc.in_reference_dataset) == 164
    assert {mc.class_name for mc in onto if mc.is_container} == {
        "dynamicsText",
        "keySignature",
        "measureSeparator",
        "timeSignature",
        "tuplet",
        "volta",
    }


def test_module_level_views() -> None:
    names = mung_class_names()
    assert list(names) == sorted(names)
    assert len(set(names)) == len(names)
    assert names[:2] == ("4stringTabClef", "6stringTabClef")
    assert tuple(mc.class_name for mc in mung_classes()) == names
    for name in names:
        mc = mung_class_by_name(name)
        assert mc is not None and mc.class_name == name
    assert mung_class_by_name("doesNotExist") is None


def test_derivation_holds_for_every_class() -> None:
    for mc in mung_classes():
        assert mc.glyph
        if mc.is_standard_aligned:
            assert mc.justified_divergence is None, mc.class_name
        else:
            expected = mc.is_container or mc.is_transcribable or mc.divergence_justification is not None
            assert mc.justified_divergence is expected, mc.class_name
        # 源表中没有使用 not_standard_aligned 的字符串写法
        assert not isinstance(mc.alignment, DivergedWithReason), mc.class_name


def test_known_entries() -> None:
    single = mung_class_by_name("barlineSingle")
    assert single is not None
    assert single.glyph == "\uE030"
    assert single.is_standard_aligned is True
    assert single.is_container is False
    assert single.justified_divergence is None
    assert single.is_transcribable is False

    sep = mung_class_by_name("measureSeparator")
    assert sep is not None
    assert sep.in_reference_dataset is True
    assert sep.is_standard_aligned is False
    assert sep.justified_divergence is True

    unc = mung_class_by_name("unclassified")
    assert unc is not None
    assert unc.glyph == "?"
    assert unc.is_standard_aligned is False
    assert unc.justified_divergence is False

    staff_line = mung_class_by_name("staffLine")
    assert staff_line is not None
    assert staff_line.divergence_justification == (
        "Cannot be rendered using a font. The staff1Line class is a different thing semantically."
    )
    assert staff_line.justified_divergence is True

    grouping = mung_class_by_name("staffGrouping")
    assert grouping is not None
    assert grouping.standard_equivalents == ("brace", "bracket")

    lyrics = mung_class_by_name("lyricsText")
    assert lyrics is not None
    assert lyrics.is_transcribable is True and lyrics.justified_divergence is True

    rest = mung_class_by_name("restLonga")
    assert rest is not None
    assert rest.glyph == "\uE01A\u00A0\u00A0\uE4E1"

    turn = mung_class_by_name("ornamentTurnUp")
    assert turn is not None
    assert turn.glyph == "\uE56A"


def test_singleton_is_built_once() -> None:
    # 清空缓存，让并发访问真正触发首次构建
    builds: list[Path] = []
    original = mung_classes_module.load_mung_class_ontology

    def counting_load(path):
        builds.append(path)
        return original(path)

    mung_classes_module._load_bundled_ontology.cache_clear()
    mung_classes_module.load_mung_class_ontology = counting_load
    try:
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: load_mung_class_ontology_from_package(), range(32)))
    finally:
        mung_classes_module.load_mung_class_ontology = original
    first = results[0]
    assert all(r is first for r in results)
    assert builds == [mung_classes_yaml_path()]
    assert load_mung_class_ontology_from_package() is first


def test_bundled_table_is_package_data() -> None:
    path = mung_classes_yaml_path()
    assert path.is_file()
    assert path.parent == package_data_dir()
    assert package_data_dir().parent == package_root()


def test_rebuild_from_file_is_equal() -> None:
    fresh = load_mung_class_ontology(mung_classes_yaml_path())
    bundled = load_mung_class_ontology_from_package()
    assert fresh is not bundled
    assert fresh.classes == bundled.classes


def main() -> None:
    tests = [v for k, v in sorted(globals().items()) if k.startswith("test_") and callable(v)]
    for t in tests:
        t()
    print(f"[OK] bundled mung classes: {len(tests)} tests passed")


if __name__ == "__main__":
    main()
