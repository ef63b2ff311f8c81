"""depot - 多项目工作区依赖聚合与构建工具"""

__version__ = "0.1.0"
