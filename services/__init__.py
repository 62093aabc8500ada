# services/__init__.py
"""Services package for StokPro: storage, repositories and the catalog facade."""
