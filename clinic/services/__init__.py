# clinic/services/__init__.py
