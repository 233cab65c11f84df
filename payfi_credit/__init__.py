"""
PayFi Credit Gateway - Income-Backed Credit Service

A FastAPI-based microservice that assesses on-chain credit limits from
wallet cashflow and adjusts them as repayments come in.
"""

__version__ = "0.1.0"
