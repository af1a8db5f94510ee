"""
站点管理后台 Core
"""

__version__ = "0.1.0"
