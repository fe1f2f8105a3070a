"""
MuNG Studio 后端：MuNG（Music Notation Graph）类本体。

定位：
- `domain.mung_class`：单个类的原始声明、描述符与派生规则；
- `domain.mung_classes`：注册表与随包分发源表的加载；
- `domain.ontology_lint`：源表的数据质量检查。
- 读取/校验乐谱文件、渲染字形等都是本体的使用方，不在本包内。
"""
