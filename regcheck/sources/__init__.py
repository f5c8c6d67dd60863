"""Endpoint list sources"""
from .fetcher import fetch_list, ensure_list, load_list

__all__ = ['fetch_list', 'ensure_list', 'load_list']
