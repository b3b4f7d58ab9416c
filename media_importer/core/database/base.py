# File: media_importer/core/database/base.py

from sqlalchemy.orm import declarative_base

# The shared registry. Media records and their attributes inherit from this.
Base = declarative_base()
