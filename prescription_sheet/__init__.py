"""
処方説明書レイアウトエンジン
服用タイミングの分類と飲み方テーブルの組み立て
"""
