"""
API Module - FastAPI service exposing extraction, corrections and insights
"""
