"""程序化三维体素关卡生成包。

子模块：
- grid: 稀疏体素网格、坐标与包围盒
- rng: 可复现的随机数工具
- config: 布局参数
- cave: 洞穴区域生长
- candidates: 自由体素与出生点候选
- layouts: Empty / Walls / Cave / Towers 四种布局策略
- component: 按类型选择布局并转发调用
- session: 关卡生成会话（双重播种）
- algorithms: 贪心长方体合并
- eval: 批量统计与制图
"""

__all__ = [
    "grid",
    "rng",
    "config",
    "cave",
    "candidates",
    "layouts",
    "component",
    "session",
    "algorithms",
    "eval",
]
