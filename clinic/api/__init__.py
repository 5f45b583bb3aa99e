# clinic/api/__init__.py
