"""
后端代码根包。

定位：
- MuNG Studio 的领域真值（MuNG 类本体、数据质量检查）放在 backend/src 下。
- 前端只负责展示与交互，不直接承载“真值”定义。
"""

