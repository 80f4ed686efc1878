"""
taskflow

解析流程图脚本并按步骤结果路由执行的流程引擎。
"""

__version__ = "0.1.0"
