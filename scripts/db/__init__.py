# scripts/db/__init__.py
from .data_template import *
from .seed_catalog import *
