"""
Pixyo 백엔드 패키지
"""

__version__ = "0.1.0"
