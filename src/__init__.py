"""Binance Portfolio Tracker"""
__version__ = "1.0.0"
