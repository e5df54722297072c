"""溫哥華氣候分析核心

月度氣候觀測資料的查詢、統計與年度彙整。
"""

__version__ = "0.1.0"
