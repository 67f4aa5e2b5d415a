"""
app/hotel/__init__.py

Hotel domain modules
"""
