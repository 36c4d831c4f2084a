# booking_core/models/base.py
"""Shared declarative base for all models"""
from sqlalchemy.orm import declarative_base

Base = declarative_base()
